import asyncio
from typing import Callable, List, Optional

import httpx
import pytest

from geosearch.geocoding.models import LocationCandidate


def make_candidate(
    name: str = "Prague",
    country: str = "CZ",
    lat: float = 50.0755,
    lon: float = 14.4378,
    state: Optional[str] = None,
    local_names: Optional[dict] = None,
) -> LocationCandidate:
    return LocationCandidate(
        name=name,
        country=country,
        lat=lat,
        lon=lon,
        state=state,
        local_names=local_names,
    )


class FakeGeocodingClient:
    """Stands in for GeocodingClient; records every query it is asked for."""

    def __init__(self, results=None, error: Optional[Exception] = None):
        self.results = results or {}
        self.error = error
        self.calls: List[tuple] = []
        self.gates = {}
        self.started = asyncio.Event()

    def hold(self, query: str) -> asyncio.Event:
        """Make requests for ``query`` wait until the returned event is set."""
        gate = asyncio.Event()
        self.gates[query] = gate
        return gate

    async def direct(self, query: str, limit: int = 5) -> List[LocationCandidate]:
        self.calls.append((query, limit))
        self.started.set()
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))


def mock_http_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def fake_client():
    return FakeGeocodingClient()
