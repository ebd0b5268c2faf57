"""
modules/editing/edit_operations.py
----------------------------------
The five targeted block edits: relax, swap, add, remove, reduce_travel.

Every operation is a pure function (block, kind, params, profile) -> DayBlock.
The input block is never touched; a new activity tuple is always built.
Missing or contradictory parameters raise ItineraryValidationError before
anything is computed.

Timing rule shared by all operations: an activity starts at its
predecessor's end plus its own travel_time_from_previous (the first one at
the block start).  _resequence() re-applies that rule from a given index.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from modules.planning.clock import add_minutes, hhmm_to_minutes, minutes_to_hhmm
from modules.planning.clustering import route_order
from modules.planning.day_scheduler import leg_from, make_activity
from modules.planning.pace import PaceProfile, activity_duration
from modules.validation.errors import ItineraryValidationError
from schemas.edit import EditParams
from schemas.itinerary import Activity, DayBlock, EditType, TimeBlock, build_block
from schemas.poi import PointOfInterest

logger = logging.getLogger(__name__)

BlockEdit = Callable[[Optional[DayBlock], TimeBlock, EditParams, PaceProfile], DayBlock]


# ── Helpers ───────────────────────────────────────────────────────────────────

def _resequence(
    activities: list[Activity],
    from_index: int,
    block_start: str,
) -> list[Activity]:
    """Re-time activities[from_index:] after their predecessors; data is kept."""
    out = list(activities[:from_index])
    for act in activities[from_index:]:
        if out:
            start = hhmm_to_minutes(out[-1].end_time) + (act.travel_time_from_previous or 0)
        else:
            start = hhmm_to_minutes(block_start)
        out.append(replace(
            act,
            start_time=minutes_to_hhmm(start),
            end_time=minutes_to_hhmm(start + act.duration),
        ))
    return out


def _route_travel(route: list[Activity], profile: PaceProfile) -> int:
    return sum(
        leg_from(prev.poi, act.poi, profile)[0]
        for prev, act in zip(route, route[1:])
    )


def _require_activities(block: Optional[DayBlock], kind: TimeBlock, edit: EditType) -> list[Activity]:
    if block is None or not block.activities:
        raise ItineraryValidationError(
            f"Cannot {edit.value}: {kind.value} block has no activities"
        )
    return list(block.activities)


# ── Operations ────────────────────────────────────────────────────────────────

def relax_block(
    block: Optional[DayBlock],
    kind: TimeBlock,
    params: EditParams,
    profile: PaceProfile,
) -> DayBlock:
    """Drop the last activity and/or extend the final one.  Never reorders."""
    if not params.reduce_activities and not params.increase_duration:
        raise ItineraryValidationError(
            "relax requires reduce_activities or a positive increase_duration"
        )
    if params.increase_duration is not None and params.increase_duration < 0:
        raise ItineraryValidationError(
            f"increase_duration must be >= 0 (got {params.increase_duration})"
        )
    acts = _require_activities(block, kind, EditType.RELAX)

    if params.reduce_activities and len(acts) > 1:
        acts = acts[:-1]

    if params.increase_duration:
        last = acts[-1]
        duration = last.duration + params.increase_duration
        acts[-1] = replace(last, duration=duration, end_time=add_minutes(last.start_time, duration))

    return build_block(kind, acts, block.start_time)


def swap_activity(
    block: Optional[DayBlock],
    kind: TimeBlock,
    params: EditParams,
    profile: PaceProfile,
) -> DayBlock:
    """
    Replace the activity at params.activity_index (default: last) with
    params.new_poi.  The new activity gets its own pace duration and a fresh
    leg from its predecessor; later activities are only re-timed.
    """
    if params.new_poi is None:
        raise ItineraryValidationError("swap requires new_poi")
    acts = _require_activities(block, kind, EditType.SWAP)

    idx = params.activity_index if params.activity_index is not None else len(acts) - 1
    if not 0 <= idx < len(acts):
        raise ItineraryValidationError(
            f"activity_index {idx} out of range for {kind.value} block ({len(acts)} activities)"
        )

    previous = acts[idx - 1] if idx > 0 else None
    travel, _ = leg_from(previous.poi if previous else None, params.new_poi, profile)
    start = (
        hhmm_to_minutes(previous.end_time) + (travel or 0)
        if previous else hhmm_to_minutes(block.start_time)
    )
    acts[idx] = make_activity(
        params.new_poi,
        start,
        activity_duration(params.new_poi, profile),
        previous.poi if previous else None,
        profile,
    )
    return build_block(kind, _resequence(acts, idx + 1, block.start_time), block.start_time)


def add_activity(
    block: Optional[DayBlock],
    kind: TimeBlock,
    params: EditParams,
    profile: PaceProfile,
) -> DayBlock:
    """
    Append params.poi_to_add after the last activity (end + travel + buffer).

    A block that does not exist yet is created at its window start.  A block
    already at the per-block cap is rejected.
    """
    poi = params.poi_to_add
    if poi is None:
        raise ItineraryValidationError("add requires poi_to_add")

    duration = activity_duration(poi, profile)
    if block is None or not block.activities:
        start_time = block.start_time if block else profile.window(kind).start
        act = make_activity(poi, hhmm_to_minutes(start_time), duration, None, profile)
        return build_block(kind, [act], start_time)

    acts = list(block.activities)
    if len(acts) >= profile.max_activities_per_block:
        raise ItineraryValidationError(
            f"Cannot add to {kind.value} block: already holds "
            f"{len(acts)} of {profile.max_activities_per_block} activities"
        )

    last = acts[-1]
    travel, _ = leg_from(last.poi, poi, profile)
    acts.append(make_activity(
        poi, hhmm_to_minutes(last.end_time) + travel, duration, last.poi, profile,
    ))
    return build_block(kind, acts, block.start_time)


def remove_activity(
    block: Optional[DayBlock],
    kind: TimeBlock,
    params: EditParams,
    profile: PaceProfile,
) -> DayBlock:
    """
    Remove by activity_index, else by poi_id_to_remove (falls back to the
    last activity when no POI matches), else the last activity.

    The activity that moves into the gap gets a fresh leg from its new
    predecessor (no leg when it becomes first); everything after is re-timed.
    """
    acts = _require_activities(block, kind, EditType.REMOVE)

    if params.activity_index is not None:
        idx = params.activity_index
        if not 0 <= idx < len(acts):
            raise ItineraryValidationError(
                f"activity_index {idx} out of range for {kind.value} block ({len(acts)} activities)"
            )
    elif params.poi_id_to_remove is not None:
        idx = next(
            (i for i, a in enumerate(acts) if a.poi.osm_id == params.poi_id_to_remove),
            len(acts) - 1,
        )
        if acts[idx].poi.osm_id != params.poi_id_to_remove:
            logger.info(
                "remove_activity: osm id %s not in %s block, removing last activity",
                params.poi_id_to_remove, kind.value,
            )
    else:
        idx = len(acts) - 1

    del acts[idx]
    if idx < len(acts):
        previous = acts[idx - 1].poi if idx > 0 else None
        travel, dist = leg_from(previous, acts[idx].poi, profile)
        acts[idx] = replace(
            acts[idx],
            travel_time_from_previous=travel,
            travel_distance_from_previous=dist,
        )
    return build_block(kind, _resequence(acts, idx, block.start_time), block.start_time)


def reduce_travel(
    block: Optional[DayBlock],
    kind: TimeBlock,
    params: EditParams,
    profile: PaceProfile,
) -> DayBlock:
    """
    Reorder the block by nearest neighbour.  With a target_travel_time, drop
    the last POI of the new order while block travel exceeds it, at most
    n - 1 times.  Kept activities keep their duration and notes; timing is
    rebuilt from the block start.
    """
    target = params.target_travel_time
    if target is not None and target < 0:
        raise ItineraryValidationError(f"target_travel_time must be >= 0 (got {target})")
    acts = _require_activities(block, kind, EditType.REDUCE_TRAVEL)
    if len(acts) <= 1:
        return build_block(kind, acts, block.start_time)

    route = [acts[i] for i in route_order([a.poi for a in acts])]

    if target is not None:
        drops = 0
        while len(route) > 1 and drops < len(acts) - 1 and _route_travel(route, profile) > target:
            dropped = route.pop()
            drops += 1
            logger.debug("reduce_travel: dropped %s from %s block", dropped.poi.name, kind.value)

    rebuilt: list[Activity] = []
    cursor = hhmm_to_minutes(block.start_time)
    previous: Optional[PointOfInterest] = None
    for kept in route:
        poi = kept.poi
        travel, _ = leg_from(previous, poi, profile)
        start = cursor + (travel or 0)
        rebuilt.append(make_activity(poi, start, kept.duration, previous, profile, notes=kept.notes))
        cursor = start + kept.duration
        previous = poi

    return build_block(kind, rebuilt, block.start_time)


_OPERATIONS: dict[EditType, BlockEdit] = {
    EditType.RELAX:         relax_block,
    EditType.SWAP:          swap_activity,
    EditType.ADD:           add_activity,
    EditType.REMOVE:        remove_activity,
    EditType.REDUCE_TRAVEL: reduce_travel,
}


def apply_edit_to_block(
    block: Optional[DayBlock],
    kind: TimeBlock,
    edit_type: EditType,
    params: EditParams,
    profile: PaceProfile,
) -> DayBlock:
    """Dispatch one edit onto one block (which may be None only for add)."""
    return _OPERATIONS[edit_type](block, kind, params, profile)
