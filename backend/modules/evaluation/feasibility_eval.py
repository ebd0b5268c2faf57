"""
modules/evaluation/feasibility_eval.py
--------------------------------------
Scores a whole itinerary for feasibility.

Per day:
  - check_day() issues (the same list the builder / editor store on the day)
  - travel time above config.EVAL_MAX_TRAVEL_RATIO of activity + travel time

Score = 1.0
        - 0.3 if any day is over the 12 h cap
        - 0.2 if any day's travel ratio is too high
        - 0.2 if any day exceeds the pace's activity cap
        - min(0.3, 0.1 * issue count)
floored at 0.  Passes with no issues and score >= config.EVAL_FEASIBILITY_PASS_SCORE.
"""

from __future__ import annotations

import config
from modules.editing.feasibility_checker import check_day
from modules.evaluation.types import EvalResult, EvalType
from modules.planning.clock import round_half_up
from modules.planning.pace import get_pace_profile
from schemas.itinerary import Itinerary


def evaluate_feasibility(itinerary: Itinerary) -> EvalResult:
    profile = get_pace_profile(itinerary.pace)
    issues: list[str] = []

    max_daily = 0
    total_travel = 0
    max_activities = 0
    travel_reasonable = True
    pace_consistent = True

    for day in itinerary.days:
        total_time = day.total_duration + day.total_travel_time
        max_daily = max(max_daily, total_time)
        total_travel += day.total_travel_time
        max_activities = max(max_activities, day.total_activities)

        issues.extend(f"Day {day.day}: {issue}" for issue in check_day(day, profile).issues)

        ratio = day.total_travel_time / (total_time or 1)
        if ratio > config.EVAL_MAX_TRAVEL_RATIO:
            travel_reasonable = False
            issues.append(
                f"Day {day.day}: Travel time ({round_half_up(day.total_travel_time / 60)}h) "
                f"is more than {round_half_up(config.EVAL_MAX_TRAVEL_RATIO * 100)}% of total time"
            )

        if day.total_activities > profile.max_activities_per_day:
            pace_consistent = False

    score = 1.0
    if max_daily > config.DAY_MAX_MINUTES:
        score -= 0.3
    if not travel_reasonable:
        score -= 0.2
    if not pace_consistent:
        score -= 0.2
    if issues:
        score -= min(0.3, len(issues) * 0.1)
    score = round(max(0.0, score), 4)

    return EvalResult(
        eval_type=EvalType.FEASIBILITY,
        passed=not issues and score >= config.EVAL_FEASIBILITY_PASS_SCORE,
        score=score,
        details={
            "dailyDuration":        max_daily,
            "allowedTime":          config.DAY_MAX_MINUTES,
            "travelTime":           total_travel,
            "travelTimeReasonable": travel_reasonable,
            "paceConsistency": {
                "expected":   profile.max_activities_per_day,
                "actual":     max_activities,
                "consistent": pace_consistent,
            },
        },
        issues=tuple(issues),
        metadata={
            "itineraryPace":   itinerary.pace.value,
            "totalDays":       itinerary.duration,
            "totalActivities": itinerary.total_activities,
        },
    )
