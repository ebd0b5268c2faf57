"""
modules/planning/geometry.py
----------------------------
Distance and travel-time estimation between POIs using the Haversine formula
and fixed average speeds.  No external HTTP calls are made.

Config knobs (config.py):
  WALKING_SPEED_KMH / DRIVING_SPEED_KMH     -- average speeds
  WALKING_FLOOR_MINUTES / DRIVING_FLOOR_MINUTES -- minimum leg time
  TRAVEL_FALLBACK_MINUTES                   -- used when a coordinate is unusable
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Union

import config
from modules.validation.normalization import coordinates_usable, normalize_travel_mode
from schemas.itinerary import TravelMode
from schemas.poi import Coordinates, PointOfInterest

logger = logging.getLogger(__name__)

Located = Union[PointOfInterest, Coordinates]

# ---------------------------------------------------------------------------
# Pure maths
# ---------------------------------------------------------------------------

_EARTH_RADIUS_KM = 6371.0

_SPEED_KMH: dict[TravelMode, float] = {
    TravelMode.WALKING: config.WALKING_SPEED_KMH,
    TravelMode.DRIVING: config.DRIVING_SPEED_KMH,
}
_FLOOR_MIN: dict[TravelMode, int] = {
    TravelMode.WALKING: config.WALKING_FLOOR_MINUTES,
    TravelMode.DRIVING: config.DRIVING_FLOOR_MINUTES,
}


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (Haversine formula) in km."""
    r = _EARTH_RADIUS_KM
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    return 2 * r * math.asin(min(1.0, math.sqrt(a)))


def _km_to_minutes(km: float, speed_kmh: float) -> float:
    """Straight-line km to minutes at a given speed."""
    return (km / speed_kmh) * 60.0


def _coords_of(item: Optional[Located]) -> Optional[Coordinates]:
    if isinstance(item, PointOfInterest):
        return item.coordinates
    return item


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def distance_km(a: Located, b: Located) -> float:
    """
    Haversine distance between two POIs (or bare coordinates) in km.

    Symmetric, and exactly 0.0 for coincident points.  Raises ValueError when
    either side has no usable coordinates; callers that must not fail use
    ``estimate_travel_time`` instead, which has a fallback.
    """
    ca, cb = _coords_of(a), _coords_of(b)
    if not coordinates_usable(ca) or not coordinates_usable(cb):
        raise ValueError("distance_km: both endpoints need valid coordinates")
    if ca.lat == cb.lat and ca.lon == cb.lon:
        return 0.0
    return haversine_km(ca.lat, ca.lon, cb.lat, cb.lon)


def estimate_travel_time(
    a: Optional[Located],
    b: Optional[Located],
    mode: TravelMode = TravelMode.DRIVING,
) -> int:
    """
    Whole minutes to travel from *a* to *b*.

    ceil(km / speed * 60), raised to the mode's floor for any non-zero leg.
    Coincident points cost 0.  A missing, non-finite or out-of-range
    coordinate on either side yields config.TRAVEL_FALLBACK_MINUTES.
    An unrecognised mode counts as config.DEFAULT_TRAVEL_MODE.  Never raises.
    """
    mode = normalize_travel_mode(mode)
    ca, cb = _coords_of(a), _coords_of(b)
    if not coordinates_usable(ca) or not coordinates_usable(cb):
        logger.debug("estimate_travel_time: unusable coordinates, using fallback")
        return config.TRAVEL_FALLBACK_MINUTES
    if ca.lat == cb.lat and ca.lon == cb.lon:
        return 0
    km = haversine_km(ca.lat, ca.lon, cb.lat, cb.lon)
    minutes = math.ceil(_km_to_minutes(km, _SPEED_KMH[mode]))
    return max(_FLOOR_MIN[mode], minutes)
