"""AI endpoints with the completion API mocked out."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

pytestmark = pytest.mark.integration

CLIENT_POST = "personalsystems.domains.ai.services.client.requests.post"


def _reply(content, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = ""
    resp.json.return_value = {"choices": [{"message": {"content": content}}]}
    return resp


def test_analyze_plan(client, headers):
    content = (
        'Plan: {"summary": "Study week", "tasks": [{"title": "Chapter 1", '
        '"date": "2024-03-04", "time": "19:00", "duration_minutes": 60, "notes": "skim"}]}'
    )
    with patch(CLIENT_POST, return_value=_reply(content)):
        resp = client.post(
            "/api/ai/analyze-plan",
            json={"content": "Study for the exam", "start_date": "2024-03-04"},
            headers=headers,
        )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["summary"] == "Study week"
    assert body["tasks"][0] == {
        "title": "Chapter 1",
        "date": "2024-03-04",
        "time": "19:00",
        "duration_minutes": 60,
        "notes": "skim",
    }


def test_analyze_plan_requires_content(client, headers):
    resp = client.post("/api/ai/analyze-plan", json={}, headers=headers)
    assert resp.status_code == 400


def test_analyze_plan_parse_error(client, headers):
    with patch(CLIENT_POST, return_value=_reply("I cannot help with that.")):
        resp = client.post("/api/ai/analyze-plan", json={"content": "x"}, headers=headers)
    assert resp.status_code == 502
    assert resp.get_json() == {"ok": False, "error": "ai_parse_error"}


def test_upstream_failure_is_generic(client, headers):
    with patch(CLIENT_POST, return_value=_reply("", 500)):
        resp = client.post("/api/ai/analyze-plan", json={"content": "x"}, headers=headers)
    assert resp.status_code == 502
    assert resp.get_json() == {"ok": False, "error": "ai_unavailable"}


def test_missing_api_key(client, headers, app):
    app.config["AI_API_KEY"] = ""
    resp = client.post("/api/ai/analyze-plan", json={"content": "x"}, headers=headers)
    assert resp.status_code == 503


def test_habit_nudge_defaults_to_stored_habits(client, headers):
    habit = client.post(
        "/api/habits", json={"name": "Read", "frequency": "daily"}, headers=headers
    ).get_json()["habit"]
    content = (
        f'[{{"habit_name": "Read", "habit_id": "{habit["id"]}", '
        '"suggested_time": "21:00", "message": "Wind down with a book."}]'
    )
    with patch(CLIENT_POST, return_value=_reply(content)) as mock_post:
        resp = client.post("/api/ai/habit-nudge", json={"current_time": "18:30"}, headers=headers)

    assert resp.status_code == 200
    nudges = resp.get_json()["nudges"]
    assert nudges == [
        {
            "habit_name": "Read",
            "habit_id": habit["id"],
            "suggested_time": "21:00",
            "message": "Wind down with a book.",
        }
    ]
    prompt = mock_post.call_args.kwargs["json"]["messages"][1]["content"]
    assert "18:30" in prompt


def test_habit_nudge_with_explicit_habits(client, headers):
    payload = {
        "habits": [{"id": "a", "name": "Walk"}, {"id": "b", "name": "Stretch"}],
        "completed_today": ["Walk"],
        "current_time": "07:00",
    }
    content = (
        '[{"habit_name": "Walk", "habit_id": "a", "suggested_time": "08:00", "message": "again"},'
        ' {"habit_name": "Stretch", "habit_id": "b", "suggested_time": "08:00", "message": "go"}]'
    )
    with patch(CLIENT_POST, return_value=_reply(content)):
        resp = client.post("/api/ai/habit-nudge", json=payload, headers=headers)
    assert [n["habit_id"] for n in resp.get_json()["nudges"]] == ["b"]
