"""
modules/evaluation/edit_correctness_eval.py
-------------------------------------------
Scores whether an edit modified only its target, on top of check_diff().
"""

from __future__ import annotations

from typing import Optional

import config
from modules.editing.diff_checker import check_diff
from modules.evaluation.types import EvalResult, EvalType
from schemas.itinerary import Itinerary, TimeBlock


def evaluate_edit_correctness(
    original: Itinerary,
    edited: Itinerary,
    target_day: int,
    target_block: Optional[TimeBlock] = None,
) -> EvalResult:
    """
    Score = 1.0 - 0.4 (non-target days changed)
                - min(0.4, 0.1 * violations)
                - 0.2 (a day expected unchanged is not reported unchanged)
    """
    diff = check_diff(original, edited, target_day, target_block)
    issues: list[str] = []

    unexpected = [d for d in diff.changed_days if d != target_day]
    if unexpected:
        issues.append(f"Unexpected days were modified: {', '.join(map(str, unexpected))}")

    issues.extend(diff.violations)

    missing_unchanged = [
        d.day for d in original.days
        if d.day != target_day and d.day not in diff.unchanged_days
    ]
    if missing_unchanged:
        issues.append(
            "Days that should be unchanged were modified: "
            + ", ".join(map(str, missing_unchanged))
        )

    score = 1.0
    if unexpected:
        score -= 0.4
    if diff.violations:
        score -= min(0.4, len(diff.violations) * 0.1)
    if missing_unchanged:
        score -= 0.2
    score = round(max(0.0, score), 4)

    return EvalResult(
        eval_type=EvalType.EDIT_CORRECTNESS,
        passed=diff.is_valid and not issues and score >= config.EVAL_EDIT_PASS_SCORE,
        score=score,
        details={
            "targetDay":          target_day,
            "targetBlock":        target_block.value if target_block else None,
            "unchangedDays":      list(diff.unchanged_days),
            "changedDays":        list(diff.changed_days),
            "violations":         list(diff.violations),
            "onlyTargetModified": diff.is_valid,
        },
        issues=tuple(issues),
        metadata={
            "originalVersion": original.metadata.version,
            "editedVersion":   edited.metadata.version,
        },
    )
