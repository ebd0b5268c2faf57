"""
modules/evaluation/types.py
---------------------------
Result types shared by the evaluation harness.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EvalType(str, Enum):
    FEASIBILITY      = "feasibility"
    """Daily time / travel ratio / pace limits of a whole itinerary."""
    EDIT_CORRECTNESS = "edit_correctness"
    """An edit changed only its declared target day / block."""
    GROUNDING        = "grounding"
    """Every scheduled POI maps to an OpenStreetMap element with coordinates."""


@dataclass(frozen=True)
class EvalResult:
    eval_type: EvalType
    passed:    bool
    score:     float                                   # 0.0 .. 1.0
    details:   dict[str, Any] = field(default_factory=dict)
    issues:    tuple[str, ...] = ()
    metadata:  dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "evalType": self.eval_type.value,
            "passed":   self.passed,
            "score":    self.score,
            "details":  self.details,
            "issues":   list(self.issues),
            "metadata": self.metadata,
        }
