"""Core module - config, exceptions."""

from geosearch.core.config import get_settings, Settings
from geosearch.core.exceptions import (
    AppException,
    TransportFailure,
    DecodeFailure,
    NotFoundException,
    BadRequestException,
)

__all__ = [
    "get_settings",
    "Settings",
    "AppException",
    "TransportFailure",
    "DecodeFailure",
    "NotFoundException",
    "BadRequestException",
]
