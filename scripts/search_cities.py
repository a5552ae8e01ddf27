#!/usr/bin/env python3
"""
Location search script for manually exercising the search box controller.

Types the query into a SearchController one keystroke at a time, the way a
user would, then prints the suggestions that were published.

Usage:
    # Show suggestions for a query
    python -m scripts.search_cities --query prague

    # Also pick the first suggestion and print its current weather
    python -m scripts.search_cities --query prague --select 1

    # Simulate a slow typist (150ms between keystrokes)
    python -m scripts.search_cities --query "san jose" --keystroke-delay 0.15

Exit codes:
    0 - Success (suggestions published)
    1 - No suggestions, or the selected weather could not be fetched
    2 - Search failed or invalid arguments
"""

import argparse
import asyncio
import logging
import os
import sys

# Make geosearch package importable when run from scripts/ or repo root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from geosearch.core.config import get_settings
from geosearch.geocoding.client import GeocodingClient
from geosearch.geocoding.controller import Failed, SearchController
from geosearch.weather.service import WeatherService


# Configure logging for cron-friendly output
logging.basicConfig(
    level=getattr(logging, get_settings().LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def format_candidate(index: int, candidate) -> str:
    parts = [candidate.name]
    if candidate.state:
        parts.append(candidate.state)
    parts.append(candidate.country.upper())
    return f"{index}. {', '.join(parts)} ({candidate.lat:.4f}, {candidate.lon:.4f})"


async def type_query(controller: SearchController, query: str, keystroke_delay: float):
    """Feed ``query`` into the controller prefix by prefix."""
    for end in range(1, len(query) + 1):
        controller.search(query[:end])
        if keystroke_delay:
            await asyncio.sleep(keystroke_delay)
    return await controller.settle()


async def main():
    parser = argparse.ArgumentParser(
        description="Run a debounced location search against OpenWeather",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--query", type=str, required=True, help="Text to type into the search box")
    parser.add_argument(
        "--select",
        type=int,
        help="1-based index of the suggestion to select",
    )
    parser.add_argument(
        "--keystroke-delay",
        type=float,
        default=0.05,
        help="Seconds between simulated keystrokes",
    )

    args = parser.parse_args()

    settings = get_settings()
    if not settings.OPENWEATHER_API_KEY:
        logger.error("OPENWEATHER_API_KEY is not configured")
        sys.exit(2)

    client = GeocodingClient()
    weather_service = WeatherService()
    controller = SearchController(client, weather_service)
    controller.subscribe(lambda results: logger.debug(f"Published {len(results)} suggestion(s)"))

    try:
        outcome = await type_query(controller, args.query, args.keystroke_delay)

        if isinstance(outcome, Failed):
            logger.error(f"Search failed: {outcome.error.detail}")
            sys.exit(2)

        suggestions = controller.published_results
        if not suggestions:
            logger.warning(f"No suggestions for '{args.query}'")
            sys.exit(1)

        for index, candidate in enumerate(suggestions, start=1):
            print(format_candidate(index, candidate))

        if args.select is None:
            sys.exit(0)

        if not 1 <= args.select <= len(suggestions):
            parser.error(f"--select must be between 1 and {len(suggestions)}")

        task = controller.select(suggestions[args.select - 1])
        weather = await task
        if weather is None:
            logger.error("Could not fetch weather for the selected location")
            sys.exit(1)

        condition = weather.condition
        description = condition.description if condition else "n/a"
        print(
            f"{weather.name}: {weather.main.temp:.1f}° (feels like {weather.main.feels_like:.1f}°), "
            f"{description}, humidity {weather.main.humidity}%, wind {weather.wind.speed} m/s"
        )
        sys.exit(0)

    finally:
        await controller.aclose()


if __name__ == "__main__":
    asyncio.run(main())
