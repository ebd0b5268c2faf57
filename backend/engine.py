"""
engine.py
---------
Public entry points of the itinerary engine.

All four functions are synchronous and side-effect free: no I/O, no shared
state, inputs are never modified.  Callers that edit the same trip from
several threads must serialize those edits themselves (see
api/routes/itinerary.py).

    from engine import build_itinerary, apply_edit

    it = build_itinerary(pois, days=3, start_date=date(2024, 2, 15),
                         pace="moderate", city="Jaipur")
    result = apply_edit(it, EditInstruction(EditType.RELAX, target_day=1,
                                            params=EditParams(reduce_activities=True)))
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from modules.editing.diff_checker import check_diff as _check_diff
from modules.editing.feasibility_checker import check_day
from modules.editing.itinerary_editor import apply_edit as _apply_edit
from modules.planning.itinerary_builder import build_itinerary as _build_itinerary
from modules.validation.normalization import normalize_pace, normalize_time_block
from schemas.edit import DiffResult, EditInstruction, EditResult, FeasibilityResult
from schemas.itinerary import Itinerary, ItineraryDay
from schemas.poi import PointOfInterest

__all__ = ["build_itinerary", "apply_edit", "check_feasibility", "check_diff"]


def build_itinerary(
    pois: list[PointOfInterest],
    days: int,
    start_date: date,
    pace: Any,
    city: str,
) -> Itinerary:
    """Creation path.  Raises ItineraryValidationError on malformed input."""
    return _build_itinerary(pois, days, start_date, pace, city)


def apply_edit(itinerary: Itinerary, instruction: EditInstruction) -> EditResult:
    """Edit path.  Returns the new version with its change summary and checks."""
    return _apply_edit(itinerary, instruction)


def check_feasibility(day: ItineraryDay, pace: Any) -> FeasibilityResult:
    return check_day(day, normalize_pace(pace, strict=True))


def check_diff(
    original: Itinerary,
    edited: Itinerary,
    target_day: int,
    target_block: Optional[Any] = None,
) -> DiffResult:
    return _check_diff(original, edited, target_day, normalize_time_block(target_block))
