"""
Application configuration using Pydantic Settings.
Loads from environment variables / .env file.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # App
    APP_NAME: str = "geosearch"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # OpenWeatherMap
    OPENWEATHER_API_KEY: str = ""
    OPENWEATHER_BASE_URL: str = "https://api.openweathermap.org"
    WEATHER_UNITS: str = "metric"
    HTTP_TIMEOUT_SECONDS: float = 10.0
    
    # Search box
    SEARCH_DEBOUNCE_SECONDS: float = 0.3
    SEARCH_MIN_QUERY_LENGTH: int = 2
    SEARCH_RESULT_LIMIT: int = 5
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"



@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
