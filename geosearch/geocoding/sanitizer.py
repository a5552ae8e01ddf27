"""Clean-up of raw geocoding records before they reach the search box.

Raw records go through ``sanitize`` -> ``is_valid`` -> ``dedupe`` -> cap.
Sanitizing runs first so names that trim to nothing are rejected, invalid
records are dropped before they can claim a dedupe slot, and the cap is
applied to the deduplicated list.
"""

import math
import unicodedata
from typing import Iterable, List, Optional

from geosearch.geocoding.models import LocationCandidate

MAX_SUGGESTIONS = 5
COORD_PRECISION = 6

# Unicode "control" (Cc) and "format" (Cf) categories
_CONTROL_CATEGORIES = ("Cc", "Cf")


def clean_text(value: str) -> str:
    """Remove control characters and trim whitespace/newlines."""
    filtered = "".join(
        ch for ch in value if unicodedata.category(ch) not in _CONTROL_CATEGORIES
    )
    return filtered.strip()


def sanitize(record: LocationCandidate) -> LocationCandidate:
    """Return a copy of ``record`` with its text fields cleaned."""
    state: Optional[str] = None
    if record.state is not None:
        state = clean_text(record.state)

    return record.model_copy(update={
        "name": clean_text(record.name),
        "country": clean_text(record.country),
        "state": state,
    })


def is_valid(record: LocationCandidate) -> bool:
    """
    Check a record is fit to show as a suggestion.

    Requires a name, a 2-letter country code and sane coordinates. The
    (0, 0) point is treated as a missing-coordinates sentinel.
    """
    name = record.name.strip()
    country = record.country.strip()
    if not name or not country:
        return False

    if len(country) != 2:
        return False

    # NaN fails both comparisons
    if not (-90.0 <= record.lat <= 90.0 and -180.0 <= record.lon <= 180.0):
        return False

    if record.lat == 0 and record.lon == 0:
        return False

    return True


def round_half_away(value: float, places: int = COORD_PRECISION) -> float:
    """
    Round to ``places`` decimals, halves away from zero.

    Unlike the builtin ``round``, halves never go to the even neighbour.
    Non-finite values (NaN, infinity) are returned unchanged.

    Examples:
        round_half_away(2.5, places=0) -> 3.0
        round_half_away(-2.5, places=0) -> -3.0
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** places
    scaled = value * factor
    if scaled >= 0:
        rounded = math.floor(scaled + 0.5)
    else:
        rounded = math.ceil(scaled - 0.5)
    return rounded / factor


def coordinate_key(lat: float, lon: float) -> str:
    """
    Dedupe identity of a place: both coordinates rounded to 6 decimals.

    Meant for records that passed ``is_valid``; non-finite coordinates are
    keyed by their raw value.
    """
    return f"{round_half_away(lat)},{round_half_away(lon)}"


def dedupe(records: Iterable[LocationCandidate]) -> List[LocationCandidate]:
    """Drop records whose rounded coordinates were already seen, keeping order."""
    seen = set()
    unique = []
    for record in records:
        key = coordinate_key(record.lat, record.lon)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def run_pipeline(
    raw_records: Iterable[LocationCandidate],
    limit: int = MAX_SUGGESTIONS,
) -> List[LocationCandidate]:
    """Sanitize, validate, dedupe and cap raw geocoding records."""
    sanitized = [sanitize(record) for record in raw_records]
    valid = [record for record in sanitized if is_valid(record)]
    return dedupe(valid)[:limit]
