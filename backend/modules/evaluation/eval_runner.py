"""
modules/evaluation/eval_runner.py
---------------------------------
Dispatches one evaluation by type.  Results are returned, never stored.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from modules.evaluation.edit_correctness_eval import evaluate_edit_correctness
from modules.evaluation.feasibility_eval import evaluate_feasibility
from modules.evaluation.grounding_eval import evaluate_itinerary_grounding
from modules.evaluation.types import EvalResult, EvalType
from modules.validation.errors import ItineraryValidationError
from modules.validation.normalization import normalize_time_block
from schemas.itinerary import Itinerary

logger = logging.getLogger(__name__)


def run_itinerary_evaluations(itinerary: Itinerary) -> list[EvalResult]:
    """Feasibility + grounding for one itinerary."""
    return [evaluate_feasibility(itinerary), evaluate_itinerary_grounding(itinerary)]


def run_evaluation(
    eval_type: EvalType | str,
    *,
    itinerary: Optional[Itinerary] = None,
    original: Optional[Itinerary] = None,
    edited: Optional[Itinerary] = None,
    target_day: Optional[int] = None,
    target_block: Any = None,
) -> EvalResult:
    try:
        kind = EvalType(eval_type)
    except ValueError:
        raise ItineraryValidationError(f"Unknown evaluation type: {eval_type!r}")

    if kind is EvalType.FEASIBILITY:
        if itinerary is None:
            raise ItineraryValidationError("Itinerary is required for feasibility evaluation")
        result = evaluate_feasibility(itinerary)

    elif kind is EvalType.EDIT_CORRECTNESS:
        if original is None or edited is None:
            raise ItineraryValidationError(
                "Original and edited itineraries are required for edit correctness evaluation"
            )
        if not target_day:
            raise ItineraryValidationError(
                "Edit target (day) is required for edit correctness evaluation"
            )
        result = evaluate_edit_correctness(
            original, edited, target_day, normalize_time_block(target_block),
        )

    else:
        if itinerary is None:
            raise ItineraryValidationError("Itinerary is required for grounding evaluation")
        result = evaluate_itinerary_grounding(itinerary)

    logger.info("run_evaluation: %s passed=%s score=%.2f", kind.value, result.passed, result.score)
    return result
