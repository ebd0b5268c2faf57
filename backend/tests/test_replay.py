from __future__ import annotations

import pytest

from conftest import ALBERT_HALL
from modules.editing.itinerary_editor import apply_edit
from modules.observability.audit import itinerary_hash, record_build, record_edit, record_performance
from modules.observability.logger import ITINERARY_EDITED, StructuredLogger
from modules.observability.replay import replay_trip
from schemas.edit import EditInstruction, EditParams
from schemas.itinerary import EditType, TimeBlock

TRIP = "trip_test"

EDITS = [
    EditInstruction(EditType.ADD, 2, TimeBlock.AFTERNOON, EditParams(poi_to_add=ALBERT_HALL)),
    EditInstruction(EditType.RELAX, 1, TimeBlock.MORNING, EditParams(reduce_activities=True)),
]


def _record_trip(audit, itinerary, edits=EDITS):
    record_build(audit, TRIP, itinerary)
    for instruction in edits:
        result = apply_edit(itinerary, instruction)
        record_edit(audit, TRIP, itinerary, instruction, result)
        itinerary = result.itinerary
    audit.close()
    return itinerary


def test_hash_is_stable(jaipur_itinerary):
    assert itinerary_hash(jaipur_itinerary) == itinerary_hash(jaipur_itinerary)
    assert len(itinerary_hash(jaipur_itinerary)) == 64


def test_recorded_trip_replays(tmp_path, jaipur_itinerary):
    audit = StructuredLogger(tmp_path)
    final = _record_trip(audit, jaipur_itinerary)

    summary = replay_trip(TRIP, logs_dir=tmp_path, verbose=False)
    assert summary.events == 3
    assert summary.edits == 2
    assert summary.version == 3
    assert summary.final_hash == itinerary_hash(final)


def test_edit_records_carry_versions(tmp_path, jaipur_itinerary):
    audit = StructuredLogger(tmp_path)
    _record_trip(audit, jaipur_itinerary)
    records = StructuredLogger(tmp_path).read(TRIP)
    edits = [r for r in records if r["event_type"] == ITINERARY_EDITED]
    assert records[0]["trip_id"] == TRIP

    assert [(e["payload"]["before_version"], e["payload"]["after_version"]) for e in edits] == [(1, 2), (2, 3)]
    assert edits[0]["payload"]["changes"]["activitiesAdded"] == [ALBERT_HALL.osm_id]
    assert edits[1]["payload"]["before_hash"] == edits[0]["payload"]["after_hash"]


def test_performance_events_are_skipped(tmp_path, jaipur_itinerary):
    audit = StructuredLogger(tmp_path)
    record_performance(audit, TRIP, "build_itinerary", 1.23456)
    _record_trip(audit, jaipur_itinerary, edits=[])
    assert replay_trip(TRIP, logs_dir=tmp_path, verbose=False).events == 1


def test_edit_against_stale_version_diverges(tmp_path, jaipur_itinerary):
    audit = StructuredLogger(tmp_path)
    record_build(audit, TRIP, jaipur_itinerary)
    first = apply_edit(jaipur_itinerary, EDITS[0])
    # second edit recorded against v1 instead of v2
    second = apply_edit(first.itinerary, EDITS[1])
    record_edit(audit, TRIP, jaipur_itinerary, EDITS[0], first)
    record_edit(audit, TRIP, jaipur_itinerary, EDITS[1], second)
    audit.close()

    with pytest.raises(RuntimeError, match="REPLAY_DIVERGENCE"):
        replay_trip(TRIP, logs_dir=tmp_path, verbose=False)


def test_skipped_version_diverges(tmp_path, jaipur_itinerary):
    audit = StructuredLogger(tmp_path)
    first = apply_edit(jaipur_itinerary, EDITS[0])
    second = apply_edit(first.itinerary, EDITS[1])
    record_build(audit, TRIP, jaipur_itinerary)
    record_edit(audit, TRIP, first.itinerary, EDITS[1], second)   # v2 -> v3 right after v1
    audit.close()

    with pytest.raises(RuntimeError, match="REPLAY_DIVERGENCE"):
        replay_trip(TRIP, logs_dir=tmp_path, verbose=False)


def test_missing_log(tmp_path):
    with pytest.raises(FileNotFoundError):
        replay_trip("nope", logs_dir=tmp_path, verbose=False)
