"""Habits API tests.

- GET /api/habits
- POST /api/habits
- GET /api/habits/<id>
- DELETE /api/habits/<id>
"""

from __future__ import annotations

import pytest

from personalsystems.domains.habits.models import Entry, Habit

pytestmark = pytest.mark.integration


def _create(client, headers, **overrides):
    payload = {"name": "Exercise", "frequency": "daily", "color": "#FF6B6B"}
    payload.update(overrides)
    return client.post("/api/habits", json=payload, headers=headers)


def test_requires_token(client):
    resp = client.get("/api/habits")
    assert resp.status_code == 401
    assert resp.get_json() == {"ok": False, "error": "unauthorized"}


def test_invalid_token_rejected(client):
    resp = client.get("/api/habits", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"


def test_list_habits_empty(client, headers):
    resp = client.get("/api/habits", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "habits": []}


def test_create_habit_and_list(client, headers):
    resp = _create(client, headers, target_duration_minutes=30)
    assert resp.status_code == 201
    habit = resp.get_json()["habit"]
    assert habit["name"] == "Exercise"
    assert habit["frequency"] == "daily"
    assert habit["target_duration_minutes"] == 30

    # The coming week is materialized on create.
    assert Entry.query.filter_by(habit_id=habit["id"]).count() == 7

    listed = client.get("/api/habits", headers=headers).get_json()["habits"]
    assert [h["id"] for h in listed] == [habit["id"]]
    assert listed[0]["streak"] == 0
    assert listed[0]["due_today"] is True
    assert listed[0]["completed_today"] is False


def test_upsert_same_id_updates(client, headers):
    habit = _create(client, headers, id="habit-1").get_json()["habit"]
    resp = _create(client, headers, id=habit["id"], name="Evening walk", frequency="weekends")
    assert resp.status_code == 200
    assert resp.get_json()["habit"]["name"] == "Evening walk"
    assert Habit.query.count() == 1


def test_list_newest_first(client, headers):
    _create(client, headers, id="old", name="Old", created_at="2024-01-01T00:00:00")
    _create(client, headers, id="new", name="New", created_at="2024-02-01T00:00:00")
    listed = client.get("/api/habits", headers=headers).get_json()["habits"]
    assert [h["id"] for h in listed] == ["new", "old"]


@pytest.mark.parametrize(
    "payload",
    [
        {"frequency": "daily"},
        {"name": "x", "frequency": "hourly"},
        {"name": "x", "frequency": "custom", "custom_days": [7]},
        {"name": "x", "frequency": "daily", "color": "red"},
    ],
)
def test_create_habit_validation(client, headers, payload):
    resp = client.post("/api/habits", json=payload, headers=headers)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["ok"] is False
    assert body["error"] == "validation_error"
    assert body["details"]


def test_habit_detail(client, headers):
    habit = _create(client, headers).get_json()["habit"]
    resp = client.get(f"/api/habits/{habit['id']}", headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()["habit"]
    assert body["total_completed"] == 0
    assert len(body["recent_entries"]) == 7


def test_habits_are_scoped_to_owner(client, headers, other_headers):
    habit = _create(client, headers).get_json()["habit"]

    assert client.get("/api/habits", headers=other_headers).get_json()["habits"] == []
    assert client.get(f"/api/habits/{habit['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/habits/{habit['id']}", headers=other_headers).status_code == 404
    assert _create(client, other_headers, id=habit["id"]).status_code == 404


def test_delete_habit_removes_its_entries(client, headers):
    habit = _create(client, headers).get_json()["habit"]
    for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
        resp = client.post(
            "/api/entries",
            json={"habit_id": habit["id"], "date": day, "completed": True},
            headers=headers,
        )
        assert resp.status_code == 201
    assert Entry.query.filter_by(habit_id=habit["id"]).count() == 10

    resp = client.delete(f"/api/habits/{habit['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True}
    assert Entry.query.count() == 0
    assert client.delete(f"/api/habits/{habit['id']}", headers=headers).status_code == 404
