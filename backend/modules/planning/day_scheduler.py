"""
modules/planning/day_scheduler.py
---------------------------------
Allocates one day's POIs into morning / afternoon / evening blocks and lays
each block out in time.

Per block:
  1. Keep at most max_activities_per_block POIs, ordered by nearest neighbour.
  2. Walk them: travel (driving estimate + pace buffer) then the activity.
  3. The first activity that would end after the block window stops the
     walk; it and everything after it are dropped.

Per day:
  - Only the first max_activities_per_day POIs are considered.
  - Each POI goes to its preferred block, cascading to the next block with
    room (see _CASCADE); POIs with nowhere to go are dropped.
  - A block starts at max(window start, previous block end + rest time).
  - The day is flagged when activity + travel time exceeds 12 h, or when it
    ends up with no activities.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Union

import config
from modules.planning.clock import hhmm_to_minutes, minutes_to_hhmm, round_half_up
from modules.planning.clustering import optimize_route
from modules.planning.geometry import distance_km, estimate_travel_time
from modules.planning.pace import PaceProfile, activity_duration, get_pace_profile
from modules.validation.normalization import preferred_block
from schemas.itinerary import (
    BLOCK_ORDER,
    Activity,
    DayBlock,
    ItineraryDay,
    PaceName,
    TimeBlock,
    build_block,
    build_day,
)
from schemas.poi import PointOfInterest

logger = logging.getLogger(__name__)

PaceLike = Union[PaceProfile, PaceName, str]

# Preferred block -> slots tried in order
_CASCADE: dict[TimeBlock, tuple[TimeBlock, ...]] = {
    TimeBlock.MORNING:   (TimeBlock.MORNING, TimeBlock.AFTERNOON),
    TimeBlock.EVENING:   (TimeBlock.EVENING, TimeBlock.AFTERNOON),
    TimeBlock.AFTERNOON: (TimeBlock.AFTERNOON, TimeBlock.MORNING, TimeBlock.EVENING),
}

NO_ACTIVITIES_ISSUE = "Day has no activities"


def as_profile(pace: PaceLike) -> PaceProfile:
    return pace if isinstance(pace, PaceProfile) else get_pace_profile(pace)


# ── Shared feasibility wording ────────────────────────────────────────────────

def total_time_issue(total_minutes: int) -> Optional[str]:
    """Issue string when activity + travel minutes exceed the daily cap, else None."""
    if total_minutes <= config.DAY_MAX_MINUTES:
        return None
    return (
        f"Total time ({round_half_up(total_minutes / 60)}h) "
        f"exceeds maximum ({config.DAY_MAX_MINUTES // 60}h)"
    )


# ── Activity construction ─────────────────────────────────────────────────────

def make_activity(
    poi: PointOfInterest,
    start_minutes: int,
    duration: int,
    previous: Optional[PointOfInterest],
    profile: PaceProfile,
    notes: Optional[str] = None,
) -> Activity:
    """
    Activity for *poi* starting at *start_minutes*.

    Travel fields are filled from *previous* (estimate + buffer) and left
    None when the activity opens its block.
    """
    travel, dist = leg_from(previous, poi, profile)
    return Activity(
        poi=poi,
        start_time=minutes_to_hhmm(start_minutes),
        end_time=minutes_to_hhmm(start_minutes + duration),
        duration=duration,
        travel_time_from_previous=travel,
        travel_distance_from_previous=dist,
        notes=notes,
    )


def leg_from(
    previous: Optional[PointOfInterest],
    poi: PointOfInterest,
    profile: PaceProfile,
) -> tuple[Optional[int], Optional[float]]:
    """(travel minutes incl. buffer, km) from *previous* to *poi*; (None, None) if first."""
    if previous is None:
        return None, None
    travel = estimate_travel_time(previous, poi) + profile.travel_buffer
    try:
        dist = distance_km(previous, poi)
    except ValueError:
        dist = None
    return travel, dist


# ── Block ─────────────────────────────────────────────────────────────────────

def schedule_block(
    pois: list[PointOfInterest],
    block: TimeBlock,
    start_time: str,
    pace: PaceLike,
) -> DayBlock:
    """
    Lay out *pois* in *block* starting at *start_time*.

    Args:
        pois:       Candidate POIs (only the first per-block-cap are used).
        block:      Which block; its window end is the hard stop.
        start_time: "HH:MM" the first activity starts at.
        pace:       Pace profile or name.

    Returns:
        DayBlock with derived totals; may hold fewer POIs than offered.
    """
    profile = as_profile(pace)
    window_end = profile.window(block).end_minutes
    route = optimize_route(list(pois)[: profile.max_activities_per_block])

    activities: list[Activity] = []
    cursor = hhmm_to_minutes(start_time)
    previous: Optional[PointOfInterest] = None

    for poi in route:
        travel, _ = leg_from(previous, poi, profile)
        duration = activity_duration(poi, profile)
        start = cursor + (travel or 0)
        if start + duration > window_end:
            logger.debug(
                "schedule_block: %s ends %s past %s window end, dropping %d POI(s)",
                poi.name, minutes_to_hhmm(start + duration), block.value,
                len(route) - len(activities),
            )
            break
        activities.append(make_activity(poi, start, duration, previous, profile))
        cursor = start + duration
        previous = poi

    return build_block(block, activities, start_time)


# ── Day ───────────────────────────────────────────────────────────────────────

def allocate_blocks(
    pois: list[PointOfInterest],
    profile: PaceProfile,
) -> dict[TimeBlock, list[PointOfInterest]]:
    """Distribute the day's POIs over the three blocks honouring the per-block cap."""
    buckets: dict[TimeBlock, list[PointOfInterest]] = {kind: [] for kind in BLOCK_ORDER}
    cap = profile.max_activities_per_block

    for poi in pois[: profile.max_activities_per_day]:
        for kind in _CASCADE[preferred_block(poi)]:
            if len(buckets[kind]) < cap:
                buckets[kind].append(poi)
                break
        else:
            logger.debug("allocate_blocks: no room for %s, dropped", poi.name)

    return buckets


def schedule_day(
    day_number: int,
    day_date: date,
    pois: list[PointOfInterest],
    pace: PaceLike,
) -> ItineraryDay:
    """Build one ItineraryDay from its share of POIs."""
    profile = as_profile(pace)
    buckets = allocate_blocks(list(pois), profile)

    built: dict[str, DayBlock] = {}
    previous_end: Optional[int] = None
    for kind in BLOCK_ORDER:
        if not buckets[kind]:
            continue
        start = profile.window(kind).start_minutes
        if previous_end is not None:
            start = max(start, previous_end + profile.rest_time)
        blk = schedule_block(buckets[kind], kind, minutes_to_hhmm(start), profile)
        if not blk.activities:
            continue
        built[kind.value] = blk
        previous_end = hhmm_to_minutes(blk.end_time)

    day = build_day(day_number, day_date, **built)

    issues: list[str] = []
    over = total_time_issue(day.total_duration + day.total_travel_time)
    if over:
        issues.append(over)
    if day.total_activities == 0:
        issues.append(NO_ACTIVITIES_ISSUE)

    if issues:
        logger.info("schedule_day: day %d flagged: %s", day_number, "; ".join(issues))
        day = build_day(day_number, day_date, feasibility_issues=issues, **built)
    return day
