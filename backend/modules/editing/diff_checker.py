"""
modules/editing/diff_checker.py
-------------------------------
Verifies that an edit touched only its declared target.

  - Itinerary scalars (city, duration, start date, pace) must not change.
  - Every day other than the target must be identical.
  - With a target block, the target day's other blocks must be identical
    and its day number / date must not change.
  - Without a target block the whole target day may change.

A day is reported as changed only when it actually differs, so comparing an
itinerary with itself reports every day unchanged.  Violations are data:
nothing here raises.
"""

from __future__ import annotations

from typing import Optional

from schemas.edit import DiffResult
from schemas.itinerary import BLOCK_ORDER, Activity, DayBlock, Itinerary, ItineraryDay, TimeBlock


# ── Structural equality ───────────────────────────────────────────────────────

def activities_equal(a: Activity, b: Activity) -> bool:
    return (
        a.poi.osm_id == b.poi.osm_id
        and a.start_time == b.start_time
        and a.end_time == b.end_time
        and a.duration == b.duration
        and a.travel_time_from_previous == b.travel_time_from_previous
        and a.travel_distance_from_previous == b.travel_distance_from_previous
    )


def blocks_equal(a: Optional[DayBlock], b: Optional[DayBlock]) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if (
        a.block != b.block
        or a.start_time != b.start_time
        or a.end_time != b.end_time
        or a.total_duration != b.total_duration
        or a.travel_time != b.travel_time
        or len(a.activities) != len(b.activities)
    ):
        return False
    return all(activities_equal(x, y) for x, y in zip(a.activities, b.activities))


def days_equal(a: ItineraryDay, b: ItineraryDay) -> bool:
    if (
        a.day != b.day
        or a.date != b.date
        or a.total_activities != b.total_activities
        or a.total_travel_time != b.total_travel_time
        or a.total_duration != b.total_duration
        or a.is_feasible != b.is_feasible
    ):
        return False
    return all(blocks_equal(a.block(kind), b.block(kind)) for kind in BLOCK_ORDER)


# ── Diff ──────────────────────────────────────────────────────────────────────

def _target_day_violations(
    original: ItineraryDay,
    edited: ItineraryDay,
    target_block: Optional[TimeBlock],
) -> list[str]:
    if target_block is None:
        return []
    violations = [
        f"{kind.value} block was modified but should remain unchanged"
        for kind in BLOCK_ORDER
        if kind != target_block and not blocks_equal(original.block(kind), edited.block(kind))
    ]
    if original.day != edited.day:
        violations.append("Day number changed")
    if original.date != edited.date:
        violations.append("Date changed")
    return violations


def check_diff(
    original: Itinerary,
    edited: Itinerary,
    target_day: int,
    target_block: Optional[TimeBlock] = None,
) -> DiffResult:
    """
    Compare *edited* against *original* for an edit aimed at *target_day*
    (and optionally *target_block*).

    Returns:
        DiffResult with changed / unchanged day numbers and violation strings.
    """
    violations: list[str] = []
    changed: list[int] = []
    unchanged: list[int] = []

    if original.city != edited.city:
        violations.append("City changed")
    if original.duration != edited.duration:
        violations.append("Duration changed")
    if original.start_date != edited.start_date:
        violations.append("Start date changed")
    if original.pace != edited.pace:
        violations.append("Pace changed")

    for day_num in range(1, original.duration + 1):
        before = original.get_day(day_num)
        after = edited.get_day(day_num)
        if before is None or after is None:
            violations.append(f"Day {day_num} missing in one of the itineraries")
            continue

        same = days_equal(before, after)
        if day_num == target_day:
            violations.extend(
                f"Day {day_num}: {v}"
                for v in _target_day_violations(before, after, target_block)
            )
        elif not same:
            violations.append(f"Day {day_num} was modified but should remain unchanged")

        (unchanged if same else changed).append(day_num)

    return DiffResult(
        changed_days=tuple(changed),
        unchanged_days=tuple(unchanged),
        violations=tuple(violations),
    )
