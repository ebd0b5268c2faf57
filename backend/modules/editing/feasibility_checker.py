"""
modules/editing/feasibility_checker.py
--------------------------------------
Validates a day (or one block) against its pace profile's hard limits.

Independent of how the day was produced: the builder, the editor and the
evaluation harness all call the same check_day(), so identical days always
get identical issue lists.

Issue order for check_day():
  1. total time (activity + travel) over 12 h
  2. activity count over the per-day cap
  3. no activities at all
  4. per existing block, in morning -> afternoon -> evening order,
     each prefixed "<block> block: "
"""

from __future__ import annotations

import logging

from modules.planning.clock import hhmm_to_minutes, round_half_up
from modules.planning.day_scheduler import (
    NO_ACTIVITIES_ISSUE,
    PaceLike,
    as_profile,
    total_time_issue,
)
from schemas.edit import FeasibilityResult
from schemas.itinerary import DayBlock, ItineraryDay

logger = logging.getLogger(__name__)


def _block_issues(block: DayBlock, pace: PaceLike) -> list[str]:
    profile = as_profile(pace)
    window = profile.window(block.block)
    issues: list[str] = []

    count = len(block.activities)
    if count > profile.max_activities_per_block:
        issues.append(
            f"Activity count ({count}) exceeds maximum ({profile.max_activities_per_block})"
        )

    span = hhmm_to_minutes(block.end_time) - hhmm_to_minutes(block.start_time)
    if span > window.max_duration:
        issues.append(
            f"Block duration ({round_half_up(span / 60)}h) "
            f"exceeds maximum ({round_half_up(window.max_duration / 60)}h)"
        )

    if block.activities and hhmm_to_minutes(block.activities[-1].end_time) > window.end_minutes:
        issues.append("Activities extend beyond block time window")

    return issues


def check_block(block: DayBlock, pace: PaceLike) -> FeasibilityResult:
    """Block-level limits only; issues are not prefixed."""
    issues = _block_issues(block, pace)
    return FeasibilityResult(feasible=not issues, issues=tuple(issues))


def check_day(day: ItineraryDay, pace: PaceLike) -> FeasibilityResult:
    profile = as_profile(pace)
    issues: list[str] = []

    over = total_time_issue(day.total_duration + day.total_travel_time)
    if over:
        issues.append(over)

    if day.total_activities > profile.max_activities_per_day:
        issues.append(
            f"Activity count ({day.total_activities}) "
            f"exceeds maximum ({profile.max_activities_per_day})"
        )

    if day.total_activities == 0:
        issues.append(NO_ACTIVITIES_ISSUE)

    for kind, block in day.blocks():
        issues.extend(f"{kind.value} block: {issue}" for issue in _block_issues(block, profile))

    if issues:
        logger.debug("check_day: day %d infeasible (%d issue(s))", day.day, len(issues))
    return FeasibilityResult(feasible=not issues, issues=tuple(issues))
