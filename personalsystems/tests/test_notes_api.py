"""Notes and ideas API tests."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration


def test_note_crud(client, headers):
    resp = client.post("/api/notes", json={"title": "Groceries", "content": "eggs"}, headers=headers)
    assert resp.status_code == 201
    note = resp.get_json()["note"]
    assert note["pinned"] is False

    resp = client.post(
        "/api/notes",
        json={"id": note["id"], "title": "Groceries", "content": "eggs, milk", "pinned": True},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["note"]["content"] == "eggs, milk"

    notes = client.get("/api/notes", headers=headers).get_json()["notes"]
    assert [n["id"] for n in notes] == [note["id"]]
    assert notes[0]["pinned"] is True

    assert client.delete(f"/api/notes/{note['id']}", headers=headers).status_code == 200
    assert client.get("/api/notes", headers=headers).get_json()["notes"] == []
    assert client.delete(f"/api/notes/{note['id']}", headers=headers).status_code == 404


def test_notes_most_recently_updated_first(client, headers):
    first = client.post("/api/notes", json={"title": "First"}, headers=headers).get_json()["note"]
    client.post("/api/notes", json={"title": "Second"}, headers=headers)
    client.post("/api/notes", json={"id": first["id"], "title": "First, edited"}, headers=headers)

    titles = [n["title"] for n in client.get("/api/notes", headers=headers).get_json()["notes"]]
    assert titles == ["First, edited", "Second"]


def test_note_requires_title(client, headers):
    resp = client.post("/api/notes", json={"content": "no title"}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_notes_scoped_to_owner(client, headers, other_headers):
    note = client.post("/api/notes", json={"title": "Mine"}, headers=headers).get_json()["note"]
    assert client.get("/api/notes", headers=other_headers).get_json()["notes"] == []
    assert client.delete(f"/api/notes/{note['id']}", headers=other_headers).status_code == 404
    resp = client.post("/api/notes", json={"id": note["id"], "title": "Theirs"}, headers=other_headers)
    assert resp.status_code == 404


def test_idea_crud(client, headers):
    resp = client.post(
        "/api/ideas",
        json={"title": "Side project", "description": "habit app", "category": "work"},
        headers=headers,
    )
    assert resp.status_code == 201
    idea = resp.get_json()["idea"]
    assert idea["category"] == "work"

    resp = client.post(
        "/api/ideas",
        json={"id": idea["id"], "title": "Side project", "category": " ", "pinned": True},
        headers=headers,
    )
    assert resp.status_code == 200
    updated = resp.get_json()["idea"]
    assert updated["category"] is None
    assert updated["pinned"] is True

    ideas = client.get("/api/ideas", headers=headers).get_json()["ideas"]
    assert len(ideas) == 1
    assert client.delete(f"/api/ideas/{idea['id']}", headers=headers).status_code == 200
    assert client.get("/api/ideas", headers=headers).get_json()["ideas"] == []
