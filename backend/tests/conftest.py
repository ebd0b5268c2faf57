"""
Shared fixtures: six Jaipur POIs and the moderate 3-day itinerary built from
them (created_at pinned so builds compare equal).

Moderate build, for reference:
  Day 1  morning  City Palace 09:00-10:00, Jantar Mantar 10:30-11:30
         evening  Laxmi Mishthan Bhandar 18:30-19:18
  Day 2  morning  Amber Fort 09:00-10:00
  Day 3  morning  Chokhi Dhani 09:00-10:00
"""

from __future__ import annotations

from datetime import date

import pytest

from modules.planning.itinerary_builder import build_itinerary
from schemas.itinerary import Itinerary
from schemas.poi import Coordinates, PointOfInterest

CREATED_AT = "2024-02-01T00:00:00Z"
START = date(2024, 2, 15)


def _poi(osm_id: int, name: str, category: str, lat: float, lon: float) -> PointOfInterest:
    return PointOfInterest(
        osm_id=osm_id, name=name, category=category, coordinates=Coordinates(lat, lon),
    )


CITY_PALACE   = _poi(123456789, "City Palace", "history", 26.9258, 75.8236)
HAWA_MAHAL    = _poi(987654321, "Hawa Mahal", "history", 26.9239, 75.8267)
JANTAR_MANTAR = _poi(456789123, "Jantar Mantar", "history", 26.9247, 75.8246)
AMBER_FORT    = _poi(789123456, "Amber Fort", "history", 26.9855, 75.8513)
LMB           = _poi(321654987, "Laxmi Mishthan Bhandar", "food", 26.9124, 75.7873)
CHOKHI_DHANI  = _poi(654987321, "Chokhi Dhani", "culture", 26.8500, 75.8000)
NAHARGARH     = _poi(112233445, "Nahargarh Fort", "history", 26.9373, 75.8155)
ALBERT_HALL   = _poi(556677889, "Albert Hall Museum", "museum", 26.9118, 75.8195)


@pytest.fixture
def jaipur_pois() -> list[PointOfInterest]:
    return [CITY_PALACE, HAWA_MAHAL, JANTAR_MANTAR, AMBER_FORT, LMB, CHOKHI_DHANI]


@pytest.fixture
def jaipur_itinerary(jaipur_pois) -> Itinerary:
    return build_itinerary(
        jaipur_pois, 3, START, "moderate", "Jaipur", created_at=CREATED_AT,
    )


@pytest.fixture
def poi_payload() -> list[dict]:
    """The demo POIs in camelCase wire form."""
    return [
        {
            "osmId": p.osm_id,
            "osmType": p.osm_type,
            "name": p.name,
            "category": p.category,
            "coordinates": {"lat": p.lat, "lon": p.lon},
        }
        for p in (CITY_PALACE, HAWA_MAHAL, JANTAR_MANTAR, AMBER_FORT, LMB, CHOKHI_DHANI)
    ]
