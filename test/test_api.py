import importlib

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_preferences_store
from storage.preferences_store import PreferencesStore

WINDOW = {"start": "2026-01-05T00:00:00", "end": "2026-01-06T00:00:00"}
HIGH_VALUE_TASK = {"id": 1, "priority": 1, "impact": 9, "complexity": 5, "estimatedHours": 2, "category": "Work"}


def _import_app():
    # Import lazily so environment variables (if any) can be set before import.
    return importlib.import_module("api.main")


@pytest.fixture
def client(tmp_path):
    mod = _import_app()
    store = PreferencesStore(path=str(tmp_path / "prefs.json"))
    mod.app.dependency_overrides[get_preferences_store] = lambda: store
    yield TestClient(mod.app)
    mod.app.dependency_overrides.clear()


def test_schedule_endpoint(client):
    r = client.post("/schedule", json={"tasks": [HIGH_VALUE_TASK], "window": WINDOW})
    assert r.status_code == 200

    body = r.json()
    assert body["unscheduled"] == []
    (assignment,) = body["assignments"]
    assert assignment["slot"]["start"] == "2026-01-05T10:00:00"
    assert assignment["energy_match_score"] == 50
    assert assignment["confidence"] == 0.5
    assert assignment["task"]["estimated_hours"] == 2


def test_schedule_fully_booked(client):
    r = client.post(
        "/schedule",
        json={
            "tasks": [HIGH_VALUE_TASK, {"id": 2}],
            "busy_intervals": [{"title": "offsite", **WINDOW}],
            "window": WINDOW,
        },
    )
    assert r.status_code == 200
    assert r.json() == {"assignments": [], "unscheduled": [1, 2]}


def test_schedule_uses_stored_patterns(client):
    r = client.put("/preferences", json={"life_patterns": {"peak_hours": [8, 9]}})
    assert r.status_code == 200
    assert client.get("/preferences").json()["life_patterns"]["peak_hours"] == [8, 9]

    r = client.post("/schedule", json={"tasks": [HIGH_VALUE_TASK], "window": WINDOW})
    assert r.json()["assignments"][0]["slot"]["start"] == "2026-01-05T08:00:00"


def test_schedule_rejects_bad_bodies(client):
    assert client.post("/schedule", json={}).status_code == 422
    bad_window = {"start": WINDOW["end"], "end": WINDOW["start"]}
    assert client.post("/schedule", json={"tasks": [], "window": bad_window}).status_code == 422


def test_patterns_endpoint(client):
    events = [{"title": "Strategy brainstorm", "start": "2026-01-05T09:00:00", "end": "2026-01-05T10:00:00"}]
    r = client.post("/patterns", json={"events": events})
    assert r.status_code == 200
    assert r.json()["life_patterns"]["peak_hours"] == [9, 11]


def test_lifestyle_endpoint(client):
    tasks = [{"id": 1, "title": "Debug API code"}, {"id": 2, "title": "Review frontend feature"}]
    r = client.post("/lifestyle", json={"tasks": tasks, "reference_time": "2026-01-05T15:00:00"})
    assert r.status_code == 200
    body = r.json()
    assert body["profile"]["profession"] == "software developer"
    assert any(rec["type"] == "profession_optimization" for rec in body["recommendations"])


def test_lifestyle_without_tasks(client):
    r = client.post("/lifestyle", json={"tasks": []})
    assert r.json() == {"profile": None, "recommendations": []}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_metrics_count_schedule_requests(client):
    client.post("/schedule", json={"tasks": [HIGH_VALUE_TASK], "window": WINDOW})

    m = client.get("/metrics")
    assert m.status_code == 200
    assert "text/plain" in m.headers.get("content-type", "")

    body = m.text
    assert "planner_tasks_scheduled_total" in body
    assert "planner_request_latency_seconds" in body
    assert any(
        line.startswith('planner_requests_total{endpoint="/schedule",status="ok"}')
        for line in body.splitlines()
    )


ADMIN_TASK = {"id": 2, "category": "Admin", "complexity": 1}
WORK_DAY = {"title": "work", "start": "2026-01-05T09:00:00", "end": "2026-01-05T17:00:00"}


def test_schedule_null_block_minutes_keeps_whole_slots(client):
    body = {"tasks": [ADMIN_TASK], "busy_intervals": [WORK_DAY], "window": WINDOW}

    segmented = client.post("/schedule", json=body).json()["assignments"][0]["slot"]
    assert segmented["end"] == "2026-01-05T01:00:00"

    whole = client.post("/schedule", json={**body, "block_minutes": None}).json()["assignments"][0]
    assert whole["slot"]["start"] == "2026-01-05T00:00:00"
    assert whole["slot"]["end"] == "2026-01-05T09:00:00"
    assert whole["score"] == 0


def test_schedule_mixes_offset_and_naive_times(client):
    busy = {"title": "offsite", "start": "2026-01-05T00:00:00Z", "end": "2026-01-05T09:00:00Z"}
    r = client.post("/schedule", json={"tasks": [{"id": 1}], "busy_intervals": [busy], "window": WINDOW})
    assert r.status_code == 200
    assert r.json()["assignments"][0]["slot"]["start"] == "2026-01-05T10:00:00"


def test_lifestyle_with_offset_due_date_and_no_reference_time(client):
    tasks = [{"id": 1, "title": "Debug API code", "due_date": "2026-01-01T00:00:00Z"}]
    r = client.post("/lifestyle", json={"tasks": tasks})
    assert r.status_code == 200
    assert any(rec["type"] == "task_management" for rec in r.json()["recommendations"])


def test_integrated_lifestyle_profile(client):
    tasks = [
        {"id": 1, "title": "Debug API code", "createdAt": "2026-01-05T08:00:00"},
        {"id": 2, "title": "Review frontend feature", "createdAt": "2026-01-05T09:00:00Z"},
    ]
    events = [{"title": "Strategy brainstorm", "start": "2026-01-05T09:00:00", "end": "2026-01-05T10:00:00"}]
    r = client.post(
        "/lifestyle/profile",
        json={"tasks": tasks, "events": events, "reference_time": "2026-01-05T15:00:00"},
    )
    assert r.status_code == 200

    profile = r.json()["profile"]
    assert profile["profession"] == "software developer"
    assert profile["personality_type"] == "EarlyBird"
    assert profile["peak_hours"] == {"9": "peak"}
    assert profile["energy_cycles"] == ["Morning Peak"]


def test_integrated_profile_without_tasks(client):
    assert client.post("/lifestyle/profile", json={"tasks": []}).json() == {"profile": None}


def test_dashboard_endpoint(client):
    tasks = [
        {"id": 1, "title": "Ship release", "category": "Work", "priority": 1, "impact": 9},
        {"id": 2, "title": "Pay invoices", "category": "Admin", "priority": 2, "status": "completed"},
        {"id": 3, "title": "Fix login bug", "category": "Work", "priority": 1, "impact": 10, "progress": 85},
    ]
    r = client.post("/dashboard", json={"tasks": tasks})
    assert r.status_code == 200

    body = r.json()
    assert body["stats"]["total_tasks"] == 3
    assert body["stats"]["completion_rate"] == 33
    assert body["by_category"] == {"Work": [1, 3], "Admin": [2]}
    assert body["ranking"] == [3, 1, 2]
    assert body["recommendations"]["focus_area"] == ["Ship release", "Fix login bug"]
    assert body["recommendations"]["quick_wins"] == ["Fix login bug"]


def test_dashboard_with_no_tasks(client):
    r = client.post("/dashboard", json={"tasks": []})
    assert r.status_code == 200
    assert r.json()["stats"]["completion_rate"] == 0
    assert r.json()["ranking"] == []
