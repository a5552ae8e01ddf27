"""geosearch - debounced location search over the OpenWeather geocoding API."""

__version__ = "0.1.0"
