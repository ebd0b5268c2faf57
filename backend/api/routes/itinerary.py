"""
api/routes/itinerary.py
------------------------
POST /v1/itinerary/build
POST /v1/itinerary/{trip_id}/edit
GET  /v1/itinerary/{trip_id}
POST /v1/itinerary/feasibility
POST /v1/itinerary/diff

Thin adapter over engine.py.  Built itineraries are kept in an in-memory
store keyed by trip_id; edits to one trip are serialized with a per-trip
lock.  Every build / edit is appended to the trip's JSONL audit log.

Bodies use the camelCase wire format of schemas/serialization.py for POIs,
itineraries and edit parameters.  ItineraryValidationError -> HTTP 422,
unknown trip -> HTTP 404.
"""

from __future__ import annotations

import threading
import time
import uuid
from datetime import date as date_type
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

import engine
from modules.observability.audit import record_build, record_edit, record_performance
from modules.observability.logger import StructuredLogger
from modules.validation.errors import ItineraryValidationError
from schemas.itinerary import Itinerary
from schemas.serialization import (
    day_from_dict,
    diff_to_dict,
    edit_result_to_dict,
    feasibility_to_dict,
    instruction_from_dict,
    itinerary_from_dict,
    itinerary_to_dict,
    poi_from_dict,
)

router = APIRouter()

# Handles are closed at the end of each request; the next write reopens them.
_audit = StructuredLogger()

# ── In-memory trip store ───────────────────────────────────────────────────────
# key: trip_id (str uuid4)
# value: {
#   "itinerary": Itinerary,          latest version
#   "lock":      threading.Lock,     serializes edits on this trip
# }
_store: dict[str, dict] = {}
_store_lock = threading.Lock()


# ── Request schemas ────────────────────────────────────────────────────────────

class BuildRequest(BaseModel):
    city: str
    days: int = Field(..., description="Trip length in days (>= 1)")
    start_date: str = Field(..., description="ISO-8601 date YYYY-MM-DD")
    pace: str = Field("moderate", description="relaxed | moderate | fast")
    pois: list[dict[str, Any]] = Field(
        default_factory=list, description="Candidate POIs (osmId, osmType, name, category, coordinates, tags)"
    )


class EditRequest(BaseModel):
    edit_type: str = Field(..., description="relax | swap | add | remove | reduce_travel")
    target_day: int
    target_block: Optional[str] = Field(None, description="morning | afternoon | evening")
    edit_params: dict[str, Any] = Field(default_factory=dict)


class FeasibilityRequest(BaseModel):
    day: dict[str, Any]
    pace: str = "moderate"


class DiffRequest(BaseModel):
    original: dict[str, Any]
    edited: dict[str, Any]
    target_day: int
    target_block: Optional[str] = None


# ── Helpers ────────────────────────────────────────────────────────────────────

def _unprocessable(exc: ItineraryValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=exc.errors)


def get_trip(trip_id: str) -> dict:
    """Retrieve a stored trip or raise 404."""
    entry = _store.get(trip_id)
    if not entry:
        raise HTTPException(
            status_code=404,
            detail=f"Trip '{trip_id}' not found. Call /v1/itinerary/build first.",
        )
    return entry


def latest_itinerary(trip_id: str) -> Itinerary:
    return get_trip(trip_id)["itinerary"]


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/build", summary="Build a multi-day itinerary from candidate POIs")
def build_itinerary(req: BuildRequest) -> dict:
    """
    Clusters the POIs, spreads clusters over the days and schedules each day.
    Returns the itinerary JSON plus a `trip_id` for the edit endpoints.
    """
    try:
        start = date_type.fromisoformat(req.start_date)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid date format: {exc}") from exc

    t0 = time.perf_counter()
    try:
        pois = [poi_from_dict(p) for p in req.pois]
        itinerary = engine.build_itinerary(pois, req.days, start, req.pace, req.city)
    except ItineraryValidationError as exc:
        raise _unprocessable(exc) from exc
    elapsed_ms = (time.perf_counter() - t0) * 1000

    trip_id = str(uuid.uuid4())
    with _store_lock:
        _store[trip_id] = {"itinerary": itinerary, "lock": threading.Lock()}

    record_build(_audit, trip_id, itinerary)
    record_performance(_audit, trip_id, "build_itinerary", elapsed_ms)
    _audit.close(trip_id)

    return {"trip_id": trip_id, "itinerary": itinerary_to_dict(itinerary)}


@router.post("/feasibility", summary="Check one day against its pace limits")
def check_feasibility(req: FeasibilityRequest) -> dict:
    try:
        result = engine.check_feasibility(day_from_dict(req.day), req.pace)
    except ItineraryValidationError as exc:
        raise _unprocessable(exc) from exc
    return feasibility_to_dict(result)


@router.post("/diff", summary="Verify that only the target day / block differs")
def check_diff(req: DiffRequest) -> dict:
    try:
        result = engine.check_diff(
            itinerary_from_dict(req.original),
            itinerary_from_dict(req.edited),
            req.target_day,
            req.target_block,
        )
    except ItineraryValidationError as exc:
        raise _unprocessable(exc) from exc
    return diff_to_dict(result)


@router.get("/{trip_id}", summary="Latest itinerary version of a trip")
def get_itinerary(trip_id: str) -> dict:
    return {"trip_id": trip_id, "itinerary": itinerary_to_dict(latest_itinerary(trip_id))}


@router.post("/{trip_id}/edit", summary="Apply one targeted edit")
def edit_itinerary(trip_id: str, req: EditRequest) -> dict:
    """
    Applies the edit to the trip's latest version and stores the result as
    the new latest version.  Returns the itinerary with its change summary,
    feasibility result and diff check.
    """
    entry = get_trip(trip_id)
    try:
        instruction = instruction_from_dict({
            "editType":    req.edit_type,
            "targetDay":   req.target_day,
            "targetBlock": req.target_block,
            "editParams":  req.edit_params,
        })
    except ItineraryValidationError as exc:
        raise _unprocessable(exc) from exc

    with entry["lock"]:
        before = entry["itinerary"]
        t0 = time.perf_counter()
        try:
            result = engine.apply_edit(before, instruction)
        except ItineraryValidationError as exc:
            raise _unprocessable(exc) from exc
        elapsed_ms = (time.perf_counter() - t0) * 1000
        entry["itinerary"] = result.itinerary
        record_edit(_audit, trip_id, before, instruction, result)

    record_performance(_audit, trip_id, "apply_edit", elapsed_ms)
    _audit.close(trip_id)
    return {"trip_id": trip_id, **edit_result_to_dict(result)}
