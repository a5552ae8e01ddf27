"""Weather-related models and schemas."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class WeatherCondition(BaseModel):
    """One entry of the `weather` array."""
    main: str
    description: str
    icon: str


class MainReadings(BaseModel):
    """Temperature and humidity block."""
    temp: float
    humidity: int
    feels_like: float


class Wind(BaseModel):
    speed: float


class WeatherResponse(BaseModel):
    """Current weather as returned by /data/2.5/weather."""
    name: str
    weather: List[WeatherCondition] = Field(default_factory=list)
    main: MainReadings
    wind: Wind
    fetched_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def condition(self) -> Optional[WeatherCondition]:
        """Primary condition, if the API sent any."""
        return self.weather[0] if self.weather else None
