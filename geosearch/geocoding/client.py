"""Geocoding client using the OpenWeatherMap direct geocoding API."""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from geosearch.core.config import get_settings
from geosearch.core.exceptions import DecodeFailure, TransportFailure
from geosearch.geocoding.models import CandidateList, LocationCandidate

logger = logging.getLogger(__name__)


class GeocodingClient:
    """Resolves free-text place names to raw location records."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.OPENWEATHER_API_KEY
        self.base_url = (base_url or settings.OPENWEATHER_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._http = http_client

    async def fetch_raw(self, query: str, limit: int) -> bytes:
        """Issue the direct geocoding request and return the raw body."""
        url = f"{self.base_url}/geo/1.0/direct"
        params = {"q": query, "limit": limit, "appid": self.api_key}

        try:
            if self._http is not None:
                response = await self._http.get(url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportFailure(
                f"Geocoding request failed: {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except httpx.HTTPError as e:
            raise TransportFailure(f"Geocoding request failed: {str(e)}")
        except (httpx.InvalidURL, UnicodeError) as e:
            raise TransportFailure(f"Geocoding request could not be built: {str(e)}")

        return response.content

    @staticmethod
    def decode(raw: bytes) -> List[LocationCandidate]:
        """Decode a direct geocoding response body."""
        try:
            return CandidateList.validate_json(raw)
        except ValidationError as e:
            raise DecodeFailure(f"Malformed geocoding response: {e.error_count()} error(s)")

    async def direct(self, query: str, limit: int = 5) -> List[LocationCandidate]:
        """Fetch and decode up to ``limit`` raw matches for ``query``."""
        raw = await self.fetch_raw(query, limit)
        records = self.decode(raw)
        logger.debug(f"Geocoding '{query}' returned {len(records)} raw record(s)")
        return records
