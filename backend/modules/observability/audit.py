"""
modules/observability/audit.py
------------------------------
Audit-trail records for itinerary versions.

Each itinerary version is identified by the SHA-256 of its sorted-key JSON
wire form.  An ITINERARY_EDITED record carries the hash before and after
the edit, so the chain of versions for a trip can be checked offline by
modules.observability.replay.
"""

from __future__ import annotations

import hashlib
import json

from modules.observability.logger import (
    ITINERARY_BUILT,
    ITINERARY_EDITED,
    PERFORMANCE,
    StructuredLogger,
)
from schemas.edit import EditInstruction, EditResult
from schemas.itinerary import Itinerary
from schemas.serialization import changes_to_dict, itinerary_to_dict


def itinerary_hash(itinerary: Itinerary) -> str:
    """SHA-256 of the itinerary's wire JSON (sorted keys)."""
    raw = json.dumps(itinerary_to_dict(itinerary), sort_keys=True, default=str)
    return hashlib.sha256(raw.encode()).hexdigest()


def record_build(audit: StructuredLogger, trip_id: str, itinerary: Itinerary) -> str:
    digest = itinerary_hash(itinerary)
    audit.log(trip_id, ITINERARY_BUILT, {
        "city":             itinerary.city,
        "duration":         itinerary.duration,
        "pace":             itinerary.pace.value,
        "version":          itinerary.metadata.version,
        "total_activities": itinerary.total_activities,
        "after_hash":       digest,
    })
    return digest


def record_edit(
    audit: StructuredLogger,
    trip_id: str,
    before: Itinerary,
    instruction: EditInstruction,
    result: EditResult,
) -> str:
    digest = itinerary_hash(result.itinerary)
    audit.log(trip_id, ITINERARY_EDITED, {
        "edit_type":      instruction.edit_type.value,
        "target_day":     instruction.target_day,
        "target_block":   instruction.target_block.value if instruction.target_block else None,
        "before_version": before.metadata.version,
        "after_version":  result.itinerary.metadata.version,
        "before_hash":    itinerary_hash(before),
        "after_hash":     digest,
        "feasible":       result.feasibility.feasible,
        "violations":     list(result.diff.violations),
        "changes":        changes_to_dict(result.changes),
    })
    return digest


def record_performance(
    audit: StructuredLogger,
    trip_id: str,
    operation: str,
    elapsed_ms: float,
) -> None:
    audit.log(trip_id, PERFORMANCE, {
        "operation":  operation,
        "elapsed_ms": round(elapsed_ms, 3),
    })
