"""Geocoding models."""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class LocationCandidate(BaseModel):
    """One place returned by the OpenWeather direct geocoding endpoint."""
    model_config = ConfigDict(frozen=True)

    name: str
    local_names: Optional[Dict[str, str]] = Field(None, description="Language tag -> localized name")
    lat: float
    lon: float
    country: str = Field(..., description="ISO 3166 alpha-2 code")
    state: Optional[str] = None


# Decoder for the raw response body (a JSON array of records)
CandidateList = TypeAdapter(List[LocationCandidate])
