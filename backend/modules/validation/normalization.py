"""
modules/validation/normalization.py
-----------------------------------
Single home for input coercion and fallback policy.

Everything that turns a loosely-typed value (a string from JSON, a tag on a
POI) into one of the engine's closed types lives here, together with the
decision of whether an unknown value falls back to a default or is rejected:

  pace         strict -> ItineraryValidationError, lenient -> config.DEFAULT_PACE
  travel mode  unknown -> config.DEFAULT_TRAVEL_MODE
  time block   unknown -> ItineraryValidationError (None / "" means "not given")
  edit type    unknown -> ItineraryValidationError
  POI tag      unknown timeBlock tag -> ignored, category decides
  coordinates  unusable -> callers use config.TRAVEL_FALLBACK_MINUTES
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

import config
from modules.validation.errors import ItineraryValidationError
from schemas.itinerary import EditType, PaceName, TimeBlock, TravelMode
from schemas.poi import Coordinates, PointOfInterest

logger = logging.getLogger(__name__)


def _clean(value: Any) -> str:
    return str(value.value if hasattr(value, "value") else value).strip().lower()


def normalize_pace(value: Any, strict: bool = True) -> PaceName:
    if isinstance(value, PaceName):
        return value
    try:
        return PaceName(_clean(value))
    except ValueError:
        if strict:
            allowed = ", ".join(p.value for p in PaceName)
            raise ItineraryValidationError(f"Pace must be one of: {allowed} (got {value!r})")
        logger.debug("normalize_pace: %r -> %s", value, config.DEFAULT_PACE)
        return PaceName(config.DEFAULT_PACE)


def normalize_travel_mode(value: Any) -> TravelMode:
    if isinstance(value, TravelMode):
        return value
    try:
        return TravelMode(_clean(value))
    except ValueError:
        logger.debug("normalize_travel_mode: %r -> %s", value, config.DEFAULT_TRAVEL_MODE)
        return TravelMode(config.DEFAULT_TRAVEL_MODE)


def normalize_time_block(value: Any) -> Optional[TimeBlock]:
    if value is None or isinstance(value, TimeBlock):
        return value
    cleaned = _clean(value)
    if not cleaned:
        return None
    try:
        return TimeBlock(cleaned)
    except ValueError:
        allowed = ", ".join(b.value for b in TimeBlock)
        raise ItineraryValidationError(f"Time block must be one of: {allowed} (got {value!r})")


def normalize_edit_type(value: Any) -> EditType:
    if isinstance(value, EditType):
        return value
    try:
        return EditType(_clean(value))
    except ValueError:
        allowed = ", ".join(e.value for e in EditType)
        raise ItineraryValidationError(f"Edit type must be one of: {allowed} (got {value!r})")


def coordinates_usable(coords: Optional[Coordinates]) -> bool:
    """True when both values are finite numbers inside the lat/lon ranges."""
    if coords is None:
        return False
    lat, lon = coords.lat, coords.lon
    if isinstance(lat, bool) or isinstance(lon, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def preferred_block(poi: PointOfInterest) -> TimeBlock:
    """
    Time block a POI would like to be scheduled in.

    An explicit timeBlock tag wins; an unrecognised tag value is ignored.
    Otherwise the category decides (config.MORNING_CATEGORIES /
    config.EVENING_CATEGORIES), and anything else prefers the afternoon.
    """
    for key in config.TIME_BLOCK_TAG_KEYS:
        raw = poi.tags.get(key)
        if raw is None:
            continue
        try:
            return TimeBlock(_clean(raw))
        except ValueError:
            logger.debug("preferred_block: ignoring %s=%r on %s", key, raw, poi.name)

    category = (poi.category or "").lower()
    if category in config.MORNING_CATEGORIES:
        return TimeBlock.MORNING
    if category in config.EVENING_CATEGORIES:
        return TimeBlock.EVENING
    return TimeBlock.AFTERNOON
