"""
modules/planning/itinerary_builder.py
-------------------------------------
Creation path: candidate POIs -> multi-day Itinerary.

  1. Validate input (raises ItineraryValidationError, nothing is built).
  2. Cluster POIs by proximity (cluster size / radius from the pace profile).
  3. Cluster i goes to day (i mod days); cluster and POI order are preserved.
  4. schedule_day() once per day, date = start_date + (day - 1).
  5. Aggregate totals; metadata version 1, not an edit.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from modules.planning.clustering import cluster_pois
from modules.planning.day_scheduler import schedule_day
from modules.planning.pace import get_pace_profile
from modules.validation.errors import ItineraryValidationError
from modules.validation.ingestion_validator import validate_pois
from modules.validation.normalization import normalize_pace
from schemas.itinerary import Itinerary, ItineraryMetadata, PaceName, assemble_itinerary
from schemas.poi import PointOfInterest

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def distribute_clusters(
    clusters: list[list[PointOfInterest]],
    days: int,
) -> list[list[PointOfInterest]]:
    """Round-robin: cluster i -> day i mod days.  Returns one POI list per day."""
    per_day: list[list[PointOfInterest]] = [[] for _ in range(days)]
    for idx, cluster in enumerate(clusters):
        per_day[idx % days].extend(cluster)
    return per_day


def build_itinerary(
    pois: list[PointOfInterest],
    days: int,
    start_date: date,
    pace: Any = PaceName.MODERATE,
    city: str = "",
    created_at: Optional[str] = None,
) -> Itinerary:
    """
    Build a complete itinerary from candidate POIs.

    Args:
        pois:       Candidate POIs; each needs an osm id, a name and valid coordinates.
        days:       Trip length in days (>= 1).
        start_date: Calendar date of day 1.
        pace:       "relaxed" | "moderate" | "fast" (strict, unknown raises).
        city:       Destination name, carried through unchanged.
        created_at: Override for metadata.created_at (tests / replays).

    Returns:
        Itinerary with metadata.version == 1.

    Raises:
        ItineraryValidationError: on any malformed input.
    """
    errors: list[str] = []
    if not pois:
        errors.append("POIs array is required and must not be empty")
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        errors.append(f"Duration must be a positive number (got {days!r})")
    if not isinstance(start_date, date):
        errors.append(f"Start date is required and must be a date (got {start_date!r})")
    if not city or not str(city).strip():
        errors.append("City is required and must be a non-empty string")
    if errors:
        raise ItineraryValidationError(errors)

    pace_name = normalize_pace(pace, strict=True)
    validate_pois(pois)
    profile = get_pace_profile(pace_name)

    clusters = cluster_pois(
        list(pois),
        max_cluster_size=profile.max_cluster_size,
        max_distance_km=profile.max_cluster_distance_km,
    )
    per_day = distribute_clusters(clusters, days)

    itinerary_days = [
        schedule_day(n, start_date + timedelta(days=n - 1), per_day[n - 1], profile)
        for n in range(1, days + 1)
    ]

    itinerary = assemble_itinerary(
        city=city,
        duration=days,
        start_date=start_date,
        pace=pace_name,
        days=itinerary_days,
        total_pois=len(pois),
        metadata=ItineraryMetadata(created_at=created_at or _utc_now_iso()),
    )
    logger.info(
        "build_itinerary: %s, %d day(s), pace=%s, %d POIs -> %d clusters, %d activities",
        city, days, pace_name.value, len(pois), len(clusters), itinerary.total_activities,
    )
    return itinerary
