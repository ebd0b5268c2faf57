"""
schemas/itinerary.py
--------------------
Dataclass definitions for the scheduled itinerary structures.

Every entity is frozen and every sequence is a tuple, so an itinerary handed
to the engine can never be altered by it.  Aggregate fields (block totals, day
totals, itinerary activity count) are only produced by ``build_block``,
``build_day`` and ``assemble_itinerary``, which derive them from children.

Times are "HH:MM" strings counted from midnight of the activity's day.  Values
past midnight are written as "24:10" rather than wrapped; convert through
``modules.planning.clock``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterator, Optional

from schemas.poi import PointOfInterest, clone_poi


# ── Closed vocabularies ────────────────────────────────────────────────────────

class TimeBlock(str, Enum):
    MORNING   = "morning"
    AFTERNOON = "afternoon"
    EVENING   = "evening"


BLOCK_ORDER: tuple[TimeBlock, ...] = (
    TimeBlock.MORNING, TimeBlock.AFTERNOON, TimeBlock.EVENING,
)


class PaceName(str, Enum):
    RELAXED  = "relaxed"
    MODERATE = "moderate"
    FAST     = "fast"


class EditType(str, Enum):
    RELAX         = "relax"
    SWAP          = "swap"
    ADD           = "add"
    REMOVE        = "remove"
    REDUCE_TRAVEL = "reduce_travel"


class TravelMode(str, Enum):
    WALKING = "walking"
    DRIVING = "driving"


# ── Activity / block / day ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Activity:
    """A POI scheduled into a concrete time window."""
    poi:        PointOfInterest
    start_time: str                                   # "HH:MM"
    end_time:   str                                   # "HH:MM"
    duration:   int                                   # minutes
    travel_time_from_previous:     Optional[int]   = None   # minutes, incl. buffer
    travel_distance_from_previous: Optional[float] = None   # km
    notes:      Optional[str] = None


@dataclass(frozen=True)
class DayBlock:
    """One time block of a day.  Build with ``build_block``."""
    block:          TimeBlock
    activities:     tuple[Activity, ...]
    start_time:     str
    end_time:       str
    total_duration: int       # Σ activity.duration
    travel_time:    int       # Σ activity.travel_time_from_previous


@dataclass(frozen=True)
class ItineraryDay:
    """One calendar day of the trip.  Build with ``build_day``."""
    day:               int                  # 1-based
    date:              date
    morning:           Optional[DayBlock] = None
    afternoon:         Optional[DayBlock] = None
    evening:           Optional[DayBlock] = None
    total_activities:  int = 0
    total_travel_time: int = 0
    total_duration:    int = 0
    is_feasible:       bool = True
    feasibility_issues: tuple[str, ...] = ()

    def block(self, kind: TimeBlock) -> Optional[DayBlock]:
        return getattr(self, kind.value)

    def blocks(self) -> Iterator[tuple[TimeBlock, DayBlock]]:
        """Existing blocks in chronological order."""
        for kind in BLOCK_ORDER:
            blk = self.block(kind)
            if blk is not None:
                yield kind, blk

    def activities(self) -> list[Activity]:
        return [act for _, blk in self.blocks() for act in blk.activities]


# ── Itinerary ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EditTarget:
    day:       int
    edit_type: EditType
    block:     Optional[TimeBlock] = None


@dataclass(frozen=True)
class ItineraryMetadata:
    created_at:  str                      # ISO-8601 timestamp
    version:     int = 1
    is_edit:     bool = False
    edit_target: Optional[EditTarget] = None


@dataclass(frozen=True)
class Itinerary:
    """
    Top-level schedule.  Created once by the itinerary builder; every edit
    yields a new instance with ``metadata.version`` incremented by one.
    """
    city:             str
    duration:         int                   # days
    start_date:       date
    pace:             PaceName
    days:             tuple[ItineraryDay, ...]
    total_pois:       int
    total_activities: int
    metadata:         ItineraryMetadata = field(
        default_factory=lambda: ItineraryMetadata(created_at="")
    )

    def get_day(self, day_number: int) -> Optional[ItineraryDay]:
        return next((d for d in self.days if d.day == day_number), None)


# ── Builders (the only place aggregates are computed) ─────────────────────────

def build_block(
    kind: TimeBlock,
    activities: list[Activity] | tuple[Activity, ...],
    start_time: str,
) -> DayBlock:
    acts = tuple(activities)
    return DayBlock(
        block=kind,
        activities=acts,
        start_time=start_time,
        end_time=acts[-1].end_time if acts else start_time,
        total_duration=sum(a.duration for a in acts),
        travel_time=sum(a.travel_time_from_previous or 0 for a in acts),
    )


def build_day(
    day: int,
    day_date: date,
    morning: Optional[DayBlock] = None,
    afternoon: Optional[DayBlock] = None,
    evening: Optional[DayBlock] = None,
    feasibility_issues: list[str] | tuple[str, ...] = (),
) -> ItineraryDay:
    acts = [
        a for blk in (morning, afternoon, evening) if blk is not None
        for a in blk.activities
    ]
    issues = tuple(feasibility_issues)
    return ItineraryDay(
        day=day,
        date=day_date,
        morning=morning,
        afternoon=afternoon,
        evening=evening,
        total_activities=len(acts),
        total_travel_time=sum(a.travel_time_from_previous or 0 for a in acts),
        total_duration=sum(a.duration for a in acts),
        is_feasible=not issues,
        feasibility_issues=issues,
    )


def assemble_itinerary(
    city: str,
    duration: int,
    start_date: date,
    pace: PaceName,
    days: list[ItineraryDay] | tuple[ItineraryDay, ...],
    total_pois: int,
    metadata: ItineraryMetadata,
) -> Itinerary:
    days_t = tuple(days)
    return Itinerary(
        city=city,
        duration=duration,
        start_date=start_date,
        pace=pace,
        days=days_t,
        total_pois=total_pois,
        total_activities=sum(d.total_activities for d in days_t),
        metadata=metadata,
    )


# ── Typed deep clones ──────────────────────────────────────────────────────────

def clone_activity(act: Activity) -> Activity:
    return Activity(
        poi=clone_poi(act.poi),
        start_time=act.start_time,
        end_time=act.end_time,
        duration=act.duration,
        travel_time_from_previous=act.travel_time_from_previous,
        travel_distance_from_previous=act.travel_distance_from_previous,
        notes=act.notes,
    )


def clone_block(blk: Optional[DayBlock]) -> Optional[DayBlock]:
    if blk is None:
        return None
    return DayBlock(
        block=blk.block,
        activities=tuple(clone_activity(a) for a in blk.activities),
        start_time=blk.start_time,
        end_time=blk.end_time,
        total_duration=blk.total_duration,
        travel_time=blk.travel_time,
    )


def clone_day(day: ItineraryDay) -> ItineraryDay:
    return ItineraryDay(
        day=day.day,
        date=day.date,
        morning=clone_block(day.morning),
        afternoon=clone_block(day.afternoon),
        evening=clone_block(day.evening),
        total_activities=day.total_activities,
        total_travel_time=day.total_travel_time,
        total_duration=day.total_duration,
        is_feasible=day.is_feasible,
        feasibility_issues=tuple(day.feasibility_issues),
    )


def clone_itinerary(it: Itinerary) -> Itinerary:
    md = it.metadata
    return Itinerary(
        city=it.city,
        duration=it.duration,
        start_date=it.start_date,
        pace=it.pace,
        days=tuple(clone_day(d) for d in it.days),
        total_pois=it.total_pois,
        total_activities=it.total_activities,
        metadata=ItineraryMetadata(
            created_at=md.created_at,
            version=md.version,
            is_edit=md.is_edit,
            edit_target=md.edit_target,
        ),
    )
