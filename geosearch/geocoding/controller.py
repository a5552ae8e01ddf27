"""
Debounced search controller for a location search box.

One controller backs one search box. Every keystroke goes through
``search()``; the controller waits for input to go quiet, asks the geocoding
API for matches, cleans them up and publishes the list to its subscribers.

Each search is numbered. A newer ``search()``/``cancel()`` bumps the number
and cancels the older task, and a finishing task only publishes if its
number is still the latest one, so an out-of-order response can never
overwrite newer results.

Must be driven from a running asyncio event loop; all state changes happen
on that loop.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from geosearch.core.config import get_settings
from geosearch.core.exceptions import AppException
from geosearch.geocoding.client import GeocodingClient
from geosearch.geocoding.models import LocationCandidate
from geosearch.geocoding.sanitizer import run_pipeline
from geosearch.weather.models import WeatherResponse
from geosearch.weather.service import WeatherService

logger = logging.getLogger(__name__)

ResultsListener = Callable[[List[LocationCandidate]], None]
WeatherListener = Callable[[WeatherResponse], None]


class SearchPhase(str, Enum):
    """Lifecycle of the current search."""
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass(frozen=True)
class Published:
    token: int
    results: List[LocationCandidate]


@dataclass(frozen=True)
class Failed:
    token: int
    error: AppException


@dataclass(frozen=True)
class Superseded:
    token: int


SearchOutcome = Union[Published, Failed, Superseded]


class SearchController:
    """Owns the current search, its published results and the selected weather."""

    def __init__(
        self,
        client: Optional[GeocodingClient] = None,
        weather_service: Optional[WeatherService] = None,
        *,
        debounce_seconds: Optional[float] = None,
        min_query_length: Optional[int] = None,
        limit: Optional[int] = None,
    ):
        settings = get_settings()
        self.client = client or GeocodingClient()
        self.weather_service = weather_service
        self.debounce_seconds = (
            debounce_seconds if debounce_seconds is not None else settings.SEARCH_DEBOUNCE_SECONDS
        )
        self.min_query_length = (
            min_query_length if min_query_length is not None else settings.SEARCH_MIN_QUERY_LENGTH
        )
        self.limit = limit if limit is not None else settings.SEARCH_RESULT_LIMIT

        self.phase = SearchPhase.IDLE
        self.last_error: Optional[AppException] = None
        self.weather: Optional[WeatherResponse] = None

        self._token = 0
        self._task: Optional[asyncio.Task] = None
        self._task_token = 0
        self._weather_task: Optional[asyncio.Task] = None
        self._results: Tuple[LocationCandidate, ...] = ()
        self._listeners: List[ResultsListener] = []
        self._weather_listeners: List[WeatherListener] = []

    # ------------------------------------------------------------------
    # Published state
    # ------------------------------------------------------------------

    @property
    def token(self) -> int:
        """Sequence number of the most recently issued search."""
        return self._token

    @property
    def published_results(self) -> List[LocationCandidate]:
        return list(self._results)

    def subscribe(self, listener: ResultsListener) -> Callable[[], None]:
        """Call ``listener`` with every new result list. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._remove(self._listeners, listener)

    def subscribe_weather(self, listener: WeatherListener) -> Callable[[], None]:
        """Call ``listener`` with every weather record fetched by ``select``."""
        self._weather_listeners.append(listener)
        return lambda: self._remove(self._weather_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def _publish(self, results: List[LocationCandidate]) -> None:
        self._results = tuple(results)
        for listener in list(self._listeners):
            try:
                listener(list(self._results))
            except Exception:
                logger.exception("Search results listener failed")

    # ------------------------------------------------------------------
    # Search lifecycle
    # ------------------------------------------------------------------

    def search(self, query: str) -> Optional[asyncio.Task]:
        """
        Handle a change of the search box text.

        Supersedes any earlier search. Queries shorter than the minimum
        length clear the suggestions without touching the network; others
        are scheduled behind the debounce delay.

        Returns the scheduled task, or None when nothing was scheduled.
        """
        token = self._supersede()
        trimmed = (query or "").strip()

        if len(trimmed) < self.min_query_length:
            self.phase = SearchPhase.IDLE
            self._publish([])
            return None

        self.phase = SearchPhase.DEBOUNCING
        task = asyncio.get_running_loop().create_task(self._run(token, trimmed))
        task.add_done_callback(self._log_task_error)
        self._task = task
        self._task_token = token
        return task

    def cancel(self) -> None:
        """Drop any pending search and clear the suggestions."""
        self._supersede()
        self.phase = SearchPhase.IDLE
        self._publish([])

    def select(self, candidate: LocationCandidate) -> Optional[asyncio.Task]:
        """
        Finalize the search on ``candidate``.

        Starts the weather fetch for its coordinates, then dismisses the
        suggestion list like ``cancel()``. Returns the weather task, or None
        when the controller has no weather service.
        """
        task = None
        if self.weather_service is not None:
            if self._weather_task is not None and not self._weather_task.done():
                self._weather_task.cancel()
            task = asyncio.get_running_loop().create_task(
                self._load_weather(candidate.lat, candidate.lon)
            )
            task.add_done_callback(self._log_task_error)
            self._weather_task = task

        self.cancel()
        return task

    async def settle(self) -> Optional[SearchOutcome]:
        """Wait for the current search to finish and return its outcome."""
        task, token = self._task, self._task_token
        if task is None:
            return None

        await asyncio.wait([task])
        if task.cancelled():
            return Superseded(token)
        return task.result()

    async def aclose(self) -> None:
        """Cancel outstanding search and weather work."""
        self.cancel()
        if self._weather_task is not None and not self._weather_task.done():
            self._weather_task.cancel()

    def _is_current(self, token: int) -> bool:
        return token == self._token

    def _supersede(self) -> int:
        self._token += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        return self._token

    async def _run(self, token: int, query: str) -> SearchOutcome:
        await asyncio.sleep(self.debounce_seconds)
        if not self._is_current(token):
            return Superseded(token)

        self.phase = SearchPhase.IN_FLIGHT
        try:
            raw = await self.client.direct(query, limit=self.limit)
        except AppException as e:
            return self._fail(token, query, e)
        except Exception as e:
            logger.error(f"Unexpected geocoding error for '{query}': {e!r}")
            return self._fail(token, query, AppException(f"Geocoding failed: {str(e)}"))

        if not self._is_current(token):
            logger.debug(f"Discarding stale geocoding response for '{query}'")
            return Superseded(token)

        results = run_pipeline(raw, limit=self.limit)
        self.phase = SearchPhase.PUBLISHED
        self._publish(results)
        return Published(token, results)

    def _fail(self, token: int, query: str, error: AppException) -> SearchOutcome:
        if not self._is_current(token):
            return Superseded(token)
        logger.warning(f"Geocoding failed for '{query}': {error.detail}")
        self.last_error = error
        self.phase = SearchPhase.FAILED
        self._publish([])
        return Failed(token, error)

    async def _load_weather(self, lat: float, lon: float) -> Optional[WeatherResponse]:
        try:
            weather = await self.weather_service.get_by_coordinates(lat, lon)
        except AppException as e:
            error = e
        except Exception as e:
            logger.error(f"Unexpected weather error for {lat},{lon}: {e!r}")
            error = AppException(f"Weather fetch failed: {str(e)}")
        else:
            error = None

        if asyncio.current_task() is not self._weather_task:
            return None

        if error is not None:
            logger.warning(f"Weather fetch failed for {lat},{lon}: {error.detail}")
            self.last_error = error
            return None

        self.weather = weather
        for listener in list(self._weather_listeners):
            try:
                listener(weather)
            except Exception:
                logger.exception("Weather listener failed")
        return weather

    @staticmethod
    def _log_task_error(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Search task crashed: {exc!r}")
