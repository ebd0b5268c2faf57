"""
schemas/poi.py
--------------
Point-of-interest record supplied by the POI-search collaborator.

A POI is immutable once constructed; containers (clusters, activities) hold
references to it and never change it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    """Latitude / longitude in decimal degrees."""
    lat: float
    lon: float


@dataclass(frozen=True)
class PointOfInterest:
    """
    A named, geolocated place.

    osm_id / osm_type together form the stable external identity
    (OpenStreetMap node / way / relation).  ``coordinates`` may be None on
    records that have not been validated yet; the itinerary builder rejects
    such records, while travel-time estimation falls back to a fixed value.
    """
    osm_id:      int
    osm_type:    str = "node"                  # "node" | "way" | "relation"
    name:        str = ""
    category:    str = ""                      # e.g. "history", "food", "museum"
    coordinates: Optional[Coordinates] = None
    tags:        dict[str, str] = field(default_factory=dict, hash=False)
    description: Optional[str] = None
    rating:      Optional[float] = None

    @property
    def lat(self) -> Optional[float]:
        return self.coordinates.lat if self.coordinates else None

    @property
    def lon(self) -> Optional[float]:
        return self.coordinates.lon if self.coordinates else None


def clone_poi(poi: PointOfInterest) -> PointOfInterest:
    """Field-by-field copy; the tag map is copied so no dict is shared."""
    return PointOfInterest(
        osm_id=poi.osm_id,
        osm_type=poi.osm_type,
        name=poi.name,
        category=poi.category,
        coordinates=(
            Coordinates(poi.coordinates.lat, poi.coordinates.lon)
            if poi.coordinates else None
        ),
        tags=dict(poi.tags),
        description=poi.description,
        rating=poi.rating,
    )
