"""Weather service using OpenWeatherMap API."""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from geosearch.core.config import get_settings
from geosearch.core.exceptions import (
    BadRequestException,
    DecodeFailure,
    NotFoundException,
    TransportFailure,
)
from geosearch.weather.models import WeatherResponse

logger = logging.getLogger(__name__)


class WeatherService:
    """Fetches current weather by coordinates or by city name."""
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        units: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.OPENWEATHER_API_KEY
        self.base_url = f"{(base_url or settings.OPENWEATHER_BASE_URL).rstrip('/')}/data/2.5"
        self.units = units or settings.WEATHER_UNITS
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._http = http_client
    
    async def get_by_coordinates(self, lat: float, lon: float) -> WeatherResponse:
        """Current weather at a point (used after a suggestion is selected)."""
        params = {"lat": lat, "lon": lon}
        return await self._fetch(params, label=f"{lat},{lon}")
    
    async def get_by_city(self, city: str = "prague") -> WeatherResponse:
        """Current weather for a city name."""
        city = (city or "").strip()
        if not city:
            raise BadRequestException("City name is required.")
        return await self._fetch({"q": city}, label=city)
    
    async def _fetch(self, params: dict, label: str) -> WeatherResponse:
        params = {**params, "appid": self.api_key, "units": self.units}
        url = f"{self.base_url}/weather"
        
        try:
            if self._http is not None:
                response = await self._http.get(url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params)
            
            if response.status_code == 404:
                raise NotFoundException(f"Location '{label}' not found.")
            
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportFailure(
                f"Failed to fetch weather data: {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except httpx.HTTPError as e:
            raise TransportFailure(f"Failed to fetch weather data: {str(e)}")
        except (httpx.InvalidURL, UnicodeError) as e:
            raise TransportFailure(f"Weather request could not be built: {str(e)}")
        
        try:
            result = WeatherResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeFailure(f"Malformed weather response: {e.error_count()} error(s)")
        
        logger.debug(f"Weather for {label}: {result.main.temp}")
        return result
