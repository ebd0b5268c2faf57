"""
modules/planning/pace.py
------------------------
Static pace profiles (relaxed / moderate / fast).

A profile fixes how much fits into a day: activity caps, activity-duration
bounds, the buffer added to every travel leg, the three block windows and the
rest time between blocks.  Profiles are immutable module-level constants.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Union

import config
from modules.planning.clock import hhmm_to_minutes, round_half_up
from schemas.itinerary import PaceName, TimeBlock
from schemas.poi import PointOfInterest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockWindow:
    start:        str    # "HH:MM"
    end:          str    # "HH:MM"
    max_duration: int    # minutes

    @property
    def start_minutes(self) -> int:
        return hhmm_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return hhmm_to_minutes(self.end)


@dataclass(frozen=True)
class DurationBounds:
    min:     int
    max:     int
    default: int


@dataclass(frozen=True)
class PaceProfile:
    name:                     PaceName
    max_activities_per_day:   int
    max_activities_per_block: int
    activity_duration:        DurationBounds
    travel_buffer:            int            # minutes added to every leg
    windows:                  Mapping[TimeBlock, BlockWindow]
    rest_time:                int            # minutes between blocks
    max_cluster_size:         int
    max_cluster_distance_km:  float

    def window(self, block: TimeBlock) -> BlockWindow:
        return self.windows[block]


def _windows(morning: BlockWindow, afternoon: BlockWindow, evening: BlockWindow):
    return MappingProxyType({
        TimeBlock.MORNING:   morning,
        TimeBlock.AFTERNOON: afternoon,
        TimeBlock.EVENING:   evening,
    })


RELAXED = PaceProfile(
    name=PaceName.RELAXED,
    max_activities_per_day=4,
    max_activities_per_block=2,
    activity_duration=DurationBounds(min=60, max=180, default=90),
    travel_buffer=30,
    windows=_windows(
        BlockWindow("09:00", "12:00", 180),
        BlockWindow("13:00", "17:00", 240),
        BlockWindow("18:00", "21:00", 180),
    ),
    rest_time=60,
    max_cluster_size=3,
    max_cluster_distance_km=config.DEFAULT_CLUSTER_DISTANCE_KM,
)

MODERATE = PaceProfile(
    name=PaceName.MODERATE,
    max_activities_per_day=6,
    max_activities_per_block=3,
    activity_duration=DurationBounds(min=45, max=120, default=60),
    travel_buffer=20,
    windows=_windows(
        BlockWindow("09:00", "12:30", 210),
        BlockWindow("13:30", "17:30", 240),
        BlockWindow("18:30", "21:30", 180),
    ),
    rest_time=30,
    max_cluster_size=4,
    max_cluster_distance_km=config.DEFAULT_CLUSTER_DISTANCE_KM,
)

FAST = PaceProfile(
    name=PaceName.FAST,
    max_activities_per_day=8,
    max_activities_per_block=4,
    activity_duration=DurationBounds(min=30, max=90, default=45),
    travel_buffer=15,
    windows=_windows(
        BlockWindow("08:00", "12:00", 240),
        BlockWindow("13:00", "18:00", 300),
        BlockWindow("19:00", "22:00", 180),
    ),
    rest_time=15,
    max_cluster_size=5,
    max_cluster_distance_km=config.DEFAULT_CLUSTER_DISTANCE_KM,
)

PACE_PROFILES: Mapping[PaceName, PaceProfile] = MappingProxyType({
    PaceName.RELAXED:  RELAXED,
    PaceName.MODERATE: MODERATE,
    PaceName.FAST:     FAST,
})

# Category -> duration multiplier applied to the pace default
CATEGORY_DURATION_MULTIPLIERS: Mapping[str, float] = MappingProxyType({
    "museum":     1.5,
    "gallery":    1.2,
    "historic":   1.3,
    "food":       0.8,
    "cafe":       0.6,
    "shopping":   0.7,
    "park":       1.0,
    "recreation": 1.1,
})


def get_pace_profile(pace: Union[PaceName, str, None]) -> PaceProfile:
    """
    Look up a profile by name.

    Lenient: unknown or missing names return the moderate profile.  Inputs
    that must reject an unknown pace go through
    ``modules.validation.normalization.normalize_pace(strict=True)`` first.
    """
    if isinstance(pace, PaceName):
        return PACE_PROFILES[pace]
    try:
        return PACE_PROFILES[PaceName(str(pace).strip().lower())]
    except ValueError:
        logger.debug("get_pace_profile: unknown pace %r, using %s", pace, config.DEFAULT_PACE)
        return PACE_PROFILES[PaceName(config.DEFAULT_PACE)]


def activity_duration(poi: PointOfInterest, pace: Union[PaceProfile, PaceName, str]) -> int:
    """Minutes to allot to *poi*: pace default x category multiplier, clamped."""
    profile = pace if isinstance(pace, PaceProfile) else get_pace_profile(pace)
    bounds = profile.activity_duration
    multiplier = CATEGORY_DURATION_MULTIPLIERS.get((poi.category or "").lower(), 1.0)
    minutes = round_half_up(bounds.default * multiplier)
    return max(bounds.min, min(bounds.max, minutes))
