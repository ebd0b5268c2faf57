"""
modules/evaluation package: offline quality checks over itineraries and edits.
"""
from modules.evaluation.types import EvalResult, EvalType
from modules.evaluation.feasibility_eval import evaluate_feasibility
from modules.evaluation.edit_correctness_eval import evaluate_edit_correctness
from modules.evaluation.grounding_eval import evaluate_itinerary_grounding
from modules.evaluation.eval_runner import run_evaluation, run_itinerary_evaluations

__all__ = [
    "EvalResult",
    "EvalType",
    "evaluate_feasibility",
    "evaluate_edit_correctness",
    "evaluate_itinerary_grounding",
    "run_evaluation",
    "run_itinerary_evaluations",
]
