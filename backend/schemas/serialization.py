"""
schemas/serialization.py
------------------------
camelCase wire format <-> dataclasses.

Used by the HTTP adapter (request / response bodies) and by the audit log
(state hash).  Copying inside the engine never goes through this module; it
uses the typed clone functions in schemas.itinerary.

Enum-valued fields are coerced through modules.validation.normalization, so
an unknown pace / block / edit type in a payload raises
ItineraryValidationError here rather than deep inside the engine.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from modules.planning.clock import hhmm_to_minutes
from modules.validation.errors import ItineraryValidationError
from modules.validation.normalization import (
    normalize_edit_type,
    normalize_pace,
    normalize_time_block,
)
from schemas.edit import (
    DiffResult,
    EditChanges,
    EditInstruction,
    EditParams,
    EditResult,
    FeasibilityResult,
)
from schemas.itinerary import (
    Activity,
    DayBlock,
    EditTarget,
    Itinerary,
    ItineraryDay,
    ItineraryMetadata,
    build_block,
    build_day,
)
from schemas.poi import Coordinates, PointOfInterest


def _drop_none(d: dict) -> dict:
    return {k: v for k, v in d.items() if v is not None}


def _parse_date(value: Any, field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ItineraryValidationError(f"{field_name}={value!r} is not a valid ISO-8601 date")


def _opt_int(value: Any, field_name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ItineraryValidationError(f"{field_name} must be an integer (got {value!r})")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ItineraryValidationError(f"{field_name} must be an integer (got {value!r})")


# ── POI ────────────────────────────────────────────────────────────────────────

def poi_to_dict(poi: PointOfInterest) -> dict[str, Any]:
    return _drop_none({
        "osmId":       poi.osm_id,
        "osmType":     poi.osm_type,
        "name":        poi.name,
        "category":    poi.category,
        "coordinates": (
            {"lat": poi.coordinates.lat, "lon": poi.coordinates.lon}
            if poi.coordinates else None
        ),
        "tags":        dict(poi.tags),
        "description": poi.description,
        "rating":      poi.rating,
    })


def poi_from_dict(record: dict[str, Any]) -> PointOfInterest:
    """
    Structural conversion only.  Missing coordinates become None; range and
    presence checks are left to modules.validation.validate_poi.
    """
    if not isinstance(record, dict):
        raise ItineraryValidationError(f"POI must be an object (got {type(record).__name__})")
    osm_id = _opt_int(record.get("osmId", record.get("osm_id")), "osmId")
    coords_raw = record.get("coordinates")
    coords = None
    if isinstance(coords_raw, dict) and "lat" in coords_raw and "lon" in coords_raw:
        try:
            coords = Coordinates(float(coords_raw["lat"]), float(coords_raw["lon"]))
        except (TypeError, ValueError):
            raise ItineraryValidationError(
                f"POI coordinates must be numeric (got {coords_raw!r})"
            )
    rating = record.get("rating")
    return PointOfInterest(
        osm_id=osm_id if osm_id is not None else 0,
        osm_type=str(record.get("osmType", record.get("osm_type", "node"))),
        name=str(record.get("name") or ""),
        category=str(record.get("category") or ""),
        coordinates=coords,
        tags={str(k): str(v) for k, v in (record.get("tags") or {}).items()},
        description=record.get("description"),
        rating=float(rating) if isinstance(rating, (int, float)) else None,
    )


# ── Itinerary ──────────────────────────────────────────────────────────────────

def activity_to_dict(act: Activity) -> dict[str, Any]:
    return _drop_none({
        "poi":                        poi_to_dict(act.poi),
        "startTime":                  act.start_time,
        "endTime":                    act.end_time,
        "duration":                   act.duration,
        "travelTimeFromPrevious":     act.travel_time_from_previous,
        "travelDistanceFromPrevious": act.travel_distance_from_previous,
        "notes":                      act.notes,
    })


def block_to_dict(blk: DayBlock) -> dict[str, Any]:
    return {
        "block":         blk.block.value,
        "activities":    [activity_to_dict(a) for a in blk.activities],
        "startTime":     blk.start_time,
        "endTime":       blk.end_time,
        "totalDuration": blk.total_duration,
        "travelTime":    blk.travel_time,
    }


def day_to_dict(day: ItineraryDay) -> dict[str, Any]:
    return _drop_none({
        "day":    day.day,
        "date":   day.date.isoformat(),
        "blocks": {kind.value: block_to_dict(blk) for kind, blk in day.blocks()},
        "totalActivities":   day.total_activities,
        "totalTravelTime":   day.total_travel_time,
        "totalDuration":     day.total_duration,
        "isFeasible":        day.is_feasible,
        "feasibilityIssues": list(day.feasibility_issues) or None,
    })


def itinerary_to_dict(it: Itinerary) -> dict[str, Any]:
    md = it.metadata
    target = md.edit_target
    return {
        "city":            it.city,
        "duration":        it.duration,
        "startDate":       it.start_date.isoformat(),
        "pace":            it.pace.value,
        "days":            [day_to_dict(d) for d in it.days],
        "totalPOIs":       it.total_pois,
        "totalActivities": it.total_activities,
        "metadata": _drop_none({
            "createdAt": md.created_at,
            "version":   md.version,
            "isEdit":    md.is_edit,
            "editTarget": _drop_none({
                "day":   target.day,
                "block": target.block.value if target.block else None,
                "type":  target.edit_type.value,
            }) if target else None,
        }),
    }


def _hhmm(value: Any, field_name: str) -> str:
    try:
        hhmm_to_minutes(str(value))
    except ValueError:
        raise ItineraryValidationError(f"{field_name}={value!r} is not an 'HH:MM' time")
    return str(value)


def _activity_from_dict(raw: dict[str, Any]) -> Activity:
    dist = raw.get("travelDistanceFromPrevious")
    return Activity(
        poi=poi_from_dict(raw.get("poi") or {}),
        start_time=_hhmm(raw.get("startTime"), "startTime"),
        end_time=_hhmm(raw.get("endTime"), "endTime"),
        duration=_opt_int(raw.get("duration"), "duration") or 0,
        travel_time_from_previous=_opt_int(raw.get("travelTimeFromPrevious"), "travelTimeFromPrevious"),
        travel_distance_from_previous=float(dist) if dist is not None else None,
        notes=raw.get("notes"),
    )


def day_from_dict(raw: dict[str, Any]) -> ItineraryDay:
    if not isinstance(raw, dict):
        raise ItineraryValidationError("Itinerary day must be an object")
    blocks_raw = raw.get("blocks") or {}
    built: dict[str, Optional[DayBlock]] = {}
    for key, blk_raw in blocks_raw.items():
        kind = normalize_time_block(key)
        if blk_raw is None or kind is None:
            continue
        acts = [_activity_from_dict(a) for a in blk_raw.get("activities") or []]
        start = blk_raw.get("startTime") or (acts[0].start_time if acts else None)
        built[kind.value] = build_block(kind, acts, _hhmm(start, "startTime"))
    return build_day(
        day=_opt_int(raw.get("day"), "day") or 0,
        day_date=_parse_date(raw.get("date"), "date"),
        feasibility_issues=raw.get("feasibilityIssues") or (),
        **built,
    )


def itinerary_from_dict(raw: dict[str, Any]) -> Itinerary:
    """
    Rebuild an Itinerary from its wire form.

    Aggregate totals are recomputed by the builders instead of trusted.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("days"), list):
        raise ItineraryValidationError("Invalid itinerary structure: days array is missing or invalid")
    md_raw = raw.get("metadata") or {}
    target_raw = md_raw.get("editTarget")
    target = None
    if target_raw and target_raw.get("type"):
        target = EditTarget(
            day=_opt_int(target_raw.get("day"), "editTarget.day") or 0,
            edit_type=normalize_edit_type(target_raw["type"]),
            block=normalize_time_block(target_raw.get("block")),
        )
    days = tuple(day_from_dict(d) for d in raw["days"])
    return Itinerary(
        city=str(raw.get("city", "")),
        duration=_opt_int(raw.get("duration"), "duration") or len(days),
        start_date=_parse_date(raw.get("startDate"), "startDate"),
        pace=normalize_pace(raw.get("pace"), strict=True),
        days=days,
        total_pois=_opt_int(raw.get("totalPOIs"), "totalPOIs") or 0,
        total_activities=sum(d.total_activities for d in days),
        metadata=ItineraryMetadata(
            created_at=str(md_raw.get("createdAt", "")),
            version=_opt_int(md_raw.get("version"), "version") or 1,
            is_edit=bool(md_raw.get("isEdit", False)),
            edit_target=target,
        ),
    )


# ── Edit path ──────────────────────────────────────────────────────────────────

def instruction_from_dict(raw: dict[str, Any]) -> EditInstruction:
    if not isinstance(raw, dict):
        raise ItineraryValidationError("Edit instruction must be an object")
    params_raw = raw.get("editParams") or raw.get("params") or {}
    new_poi = params_raw.get("newPOI")
    poi_to_add = params_raw.get("poiToAdd")
    target_day = _opt_int(raw.get("targetDay"), "targetDay")
    if target_day is None:
        raise ItineraryValidationError("targetDay is required")
    return EditInstruction(
        edit_type=normalize_edit_type(raw.get("editType")),
        target_day=target_day,
        target_block=normalize_time_block(raw.get("targetBlock")),
        params=EditParams(
            new_poi=poi_from_dict(new_poi) if new_poi else None,
            poi_to_add=poi_from_dict(poi_to_add) if poi_to_add else None,
            activity_index=_opt_int(params_raw.get("activityIndex"), "activityIndex"),
            poi_id_to_remove=_opt_int(params_raw.get("poiIdToRemove"), "poiIdToRemove"),
            reduce_activities=bool(params_raw.get("reduceActivities", False)),
            increase_duration=_opt_int(params_raw.get("increaseDuration"), "increaseDuration"),
            target_travel_time=_opt_int(params_raw.get("targetTravelTime"), "targetTravelTime"),
        ),
    )


def feasibility_to_dict(result: FeasibilityResult) -> dict[str, Any]:
    return {"feasible": result.feasible, "issues": list(result.issues)}


def diff_to_dict(result: DiffResult) -> dict[str, Any]:
    return {
        "isValid":       result.is_valid,
        "changedDays":   list(result.changed_days),
        "unchangedDays": list(result.unchanged_days),
        "violations":    list(result.violations),
    }


def changes_to_dict(changes: EditChanges) -> dict[str, Any]:
    return {
        "dayModified":        changes.day_modified,
        "blocksModified":     [b.value for b in changes.blocks_modified],
        "editType":           changes.edit_type.value,
        "activitiesAdded":    list(changes.activities_added),
        "activitiesRemoved":  list(changes.activities_removed),
        "activitiesModified": list(changes.activities_modified),
        "travelTimeReduced":  changes.travel_time_reduced,
        "description":        changes.description,
    }


def edit_result_to_dict(result: EditResult) -> dict[str, Any]:
    return {
        "itinerary":   itinerary_to_dict(result.itinerary),
        "changes":     changes_to_dict(result.changes),
        "feasibility": feasibility_to_dict(result.feasibility),
        "diff":        diff_to_dict(result.diff),
    }
