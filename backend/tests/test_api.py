from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.routes import itinerary as itinerary_routes
from api.server import app
from modules.observability.logger import StructuredLogger
from schemas.serialization import day_to_dict, itinerary_to_dict


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(itinerary_routes, "_audit", StructuredLogger(tmp_path))
    monkeypatch.setattr(itinerary_routes, "_store", {})
    return TestClient(app)


@pytest.fixture
def trip(client, poi_payload):
    resp = client.post("/v1/itinerary/build", json={
        "city": "Jaipur", "days": 3, "start_date": "2024-02-15", "pois": poi_payload,
    })
    assert resp.status_code == 200
    return resp.json()


def test_health(client):
    assert client.get("/v1/health").json() == {"status": "ok", "service": "itinerary-engine"}


def test_build(trip, tmp_path):
    it = trip["itinerary"]
    assert it["city"] == "Jaipur"
    assert it["pace"] == "moderate"
    assert it["totalActivities"] == 5
    assert [d["day"] for d in it["days"]] == [1, 2, 3]
    assert (tmp_path / f"{trip['trip_id']}.jsonl").exists()


def test_build_rejects_bad_input(client, poi_payload):
    resp = client.post("/v1/itinerary/build", json={
        "city": "Jaipur", "days": 3, "start_date": "2024-02-15", "pace": "sprint", "pois": poi_payload,
    })
    assert resp.status_code == 422
    assert "Pace must be one of" in resp.json()["detail"][0]

    resp = client.post("/v1/itinerary/build", json={
        "city": "Jaipur", "days": 3, "start_date": "15/02/2024", "pois": poi_payload,
    })
    assert resp.status_code == 422


def test_edit_then_get(client, trip):
    trip_id = trip["trip_id"]
    resp = client.post(f"/v1/itinerary/{trip_id}/edit", json={
        "edit_type": "relax", "target_day": 1, "target_block": "morning",
        "edit_params": {"reduceActivities": True},
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["itinerary"]["metadata"]["version"] == 2
    assert body["itinerary"]["metadata"]["editTarget"] == {"day": 1, "block": "morning", "type": "relax"}
    assert body["changes"]["activitiesRemoved"] == [456789123]
    assert body["feasibility"] == {"feasible": True, "issues": []}
    assert body["diff"]["isValid"] is True

    latest = client.get(f"/v1/itinerary/{trip_id}").json()
    assert latest["itinerary"]["metadata"]["version"] == 2


def test_invalid_edit_leaves_trip_untouched(client, trip):
    trip_id = trip["trip_id"]
    resp = client.post(f"/v1/itinerary/{trip_id}/edit", json={
        "edit_type": "remove", "target_day": 9,
    })
    assert resp.status_code == 422
    assert resp.json()["detail"] == ["Day 9 not found in itinerary (3 days)"]
    assert client.get(f"/v1/itinerary/{trip_id}").json()["itinerary"]["metadata"]["version"] == 1


def test_unknown_trip(client):
    assert client.get("/v1/itinerary/missing").status_code == 404
    resp = client.post("/v1/itinerary/missing/edit", json={"edit_type": "relax", "target_day": 1})
    assert resp.status_code == 404


def test_feasibility_endpoint(client, jaipur_itinerary):
    day = day_to_dict(jaipur_itinerary.get_day(1))
    assert client.post("/v1/itinerary/feasibility", json={"day": day, "pace": "moderate"}).json() == {
        "feasible": True, "issues": [],
    }
    resp = client.post("/v1/itinerary/feasibility", json={"day": day, "pace": "turbo"})
    assert resp.status_code == 422


def test_diff_endpoint(client, jaipur_itinerary):
    wire = itinerary_to_dict(jaipur_itinerary)
    body = client.post("/v1/itinerary/diff", json={
        "original": wire, "edited": wire, "target_day": 2,
    }).json()
    assert body == {"isValid": True, "changedDays": [], "unchangedDays": [1, 2, 3], "violations": []}


def test_evaluation_by_trip(client, trip):
    resp = client.post("/v1/evaluations/run", json={"eval_type": "grounding", "trip_id": trip["trip_id"]})
    assert resp.status_code == 200
    assert resp.json()["passed"] is True


def test_evaluation_inline(client, jaipur_itinerary):
    wire = itinerary_to_dict(jaipur_itinerary)
    resp = client.post("/v1/evaluations/run", json={"eval_type": "feasibility", "itinerary": wire})
    assert resp.json()["evalType"] == "feasibility"
    assert resp.json()["score"] == 1.0

    resp = client.post("/v1/evaluations/run", json={"eval_type": "vibes", "itinerary": wire})
    assert resp.status_code == 422


def test_audit_handles_are_released_per_request(client, poi_payload):
    payload = {"city": "Jaipur", "days": 3, "start_date": "2024-02-15", "pois": poi_payload}
    trip_ids = [client.post("/v1/itinerary/build", json=payload).json()["trip_id"] for _ in range(5)]
    client.post(f"/v1/itinerary/{trip_ids[0]}/edit", json={
        "edit_type": "remove", "target_day": 1, "target_block": "evening",
    })
    assert itinerary_routes._audit._handles == {}

    events = [r["event_type"] for r in itinerary_routes._audit.read(trip_ids[0])]
    assert events == ["ITINERARY_BUILT", "PERFORMANCE", "ITINERARY_EDITED", "PERFORMANCE"]
