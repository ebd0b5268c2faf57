"""
modules/validation/ingestion_validator.py
------------------------------------------
Data-quality guards applied to POIs and day numbers before they reach the
scheduler or the editor.

  POI:
    ✓ osm_id is a positive integer
    ✓ osm_type is one of node / way / relation
    ✓ Non-null coordinates
    ✓ Latitude in [-90, 90], longitude in [-180, 180], both finite
    ✓ Coordinates are not both exactly 0.0 (likely missing)
    ✓ Non-empty name
    ✓ Rating in [1, 5] if present (0.0 treated as absent)

  Day number:
    ✓ 1 <= day_number <= trip duration

Usage:
    from modules.validation import validate_poi

    result = validate_poi(poi)
    if not result.valid:
        print(result.errors)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from modules.validation.errors import ItineraryValidationError
from schemas.poi import PointOfInterest

OSM_TYPES: frozenset[str] = frozenset({"node", "way", "relation"})


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The validated object (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: Any = field(default=None, repr=False)

    def __bool__(self) -> bool:
        return self.valid


# ── POI validation ─────────────────────────────────────────────────────────────

def validate_poi(poi: PointOfInterest) -> ValidationResult:
    """
    Validate a POI before it is clustered, scheduled or swapped in.

    Checks:
      - osm_id / osm_type: stable external identity present
      - coordinates: non-null, finite, in range, not both 0.0
      - name: non-empty
      - rating: in [1, 5] if present
    """
    errors: list[str] = []
    label = poi.name or f"osm:{poi.osm_id}"

    # ── Identity ───────────────────────────────────────────────────────────
    if isinstance(poi.osm_id, bool) or not isinstance(poi.osm_id, int) or poi.osm_id <= 0:
        errors.append(f"{label}: osm_id must be a positive integer (got {poi.osm_id!r})")
    if poi.osm_type not in OSM_TYPES:
        errors.append(
            f"{label}: osm_type must be one of node, way, relation (got {poi.osm_type!r})"
        )

    # ── Coordinates ────────────────────────────────────────────────────────
    coords = poi.coordinates
    if coords is None:
        errors.append(f"{label}: coordinates must not be NULL")
    else:
        lat, lon = coords.lat, coords.lon
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)) \
                or not (math.isfinite(lat) and math.isfinite(lon)):
            errors.append(f"{label}: coordinates must be finite numbers (got lat={lat!r}, lon={lon!r})")
        else:
            if not (-90.0 <= lat <= 90.0):
                errors.append(f"{label}: lat={lat} is outside valid range [-90, 90]")
            if not (-180.0 <= lon <= 180.0):
                errors.append(f"{label}: lon={lon} is outside valid range [-180, 180]")
            if lat == 0.0 and lon == 0.0:
                errors.append(
                    f"{label}: lat=0.0 and lon=0.0 is likely a missing/default value"
                )

    # ── Name ───────────────────────────────────────────────────────────────
    if not poi.name or not str(poi.name).strip():
        errors.append(f"osm:{poi.osm_id}: name must not be empty")

    # ── Rating ─────────────────────────────────────────────────────────────
    if poi.rating is not None:
        r = float(poi.rating)
        # 0.0 is the sentinel for "absent", treated as NULL, not invalid
        if r != 0.0 and not (1.0 <= r <= 5.0):
            errors.append(f"{label}: rating={r} is outside valid range [1, 5]")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=poi)


def validate_pois(pois: Iterable[PointOfInterest]) -> None:
    """Raise ItineraryValidationError listing every problem across *pois*."""
    errors: list[str] = []
    for poi in pois:
        errors.extend(validate_poi(poi).errors)
    if errors:
        raise ItineraryValidationError(
            ["Invalid POI structure: missing or malformed required fields"] + errors
        )


# ── Day number validation ──────────────────────────────────────────────────────

def validate_day_number(day_number: Any, duration: Optional[int] = None) -> ValidationResult:
    """
    Validate a 1-based day index, optionally against the trip duration.
    """
    errors: list[str] = []

    if isinstance(day_number, bool) or not isinstance(day_number, int):
        errors.append(f"day_number={day_number!r} must be a positive integer")
    elif day_number <= 0:
        errors.append(f"day_number={day_number} must be > 0")
    elif duration is not None and day_number > duration:
        errors.append(f"Day {day_number} not found in itinerary ({duration} days)")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=day_number)
