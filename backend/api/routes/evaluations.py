"""
api/routes/evaluations.py
-------------------------
POST /v1/evaluations/run

Runs one evaluation (feasibility | edit_correctness | grounding).  The
itinerary can come inline (camelCase wire JSON) or from a stored trip.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from api.routes.itinerary import latest_itinerary
from modules.evaluation import run_evaluation
from modules.validation.errors import ItineraryValidationError
from schemas.serialization import itinerary_from_dict

router = APIRouter()


class EvalRequest(BaseModel):
    eval_type: str = Field(..., description="feasibility | edit_correctness | grounding")
    trip_id: Optional[str] = Field(None, description="Use the trip's latest itinerary")
    itinerary: Optional[dict[str, Any]] = None
    original: Optional[dict[str, Any]] = None
    edited: Optional[dict[str, Any]] = None
    target_day: Optional[int] = None
    target_block: Optional[str] = None


@router.post("/run", summary="Run one evaluation")
def run(req: EvalRequest) -> dict:
    try:
        if req.itinerary is not None:
            itinerary = itinerary_from_dict(req.itinerary)
        elif req.trip_id:
            itinerary = latest_itinerary(req.trip_id)
        else:
            itinerary = None
        result = run_evaluation(
            req.eval_type,
            itinerary=itinerary,
            original=itinerary_from_dict(req.original) if req.original else None,
            edited=itinerary_from_dict(req.edited) if req.edited else None,
            target_day=req.target_day,
            target_block=req.target_block,
        )
    except ItineraryValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors) from exc
    return result.to_dict()
