"""Location search: geocoding client, result clean-up and the debounced controller."""

from geosearch.geocoding.client import GeocodingClient
from geosearch.geocoding.controller import (
    Failed,
    Published,
    SearchController,
    SearchPhase,
    Superseded,
)
from geosearch.geocoding.models import LocationCandidate
from geosearch.geocoding.sanitizer import run_pipeline

__all__ = [
    "GeocodingClient",
    "SearchController",
    "SearchPhase",
    "Published",
    "Failed",
    "Superseded",
    "LocationCandidate",
    "run_pipeline",
]
