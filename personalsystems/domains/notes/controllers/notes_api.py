"""Notes and ideas JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from personalsystems.core.utils.validation import jsonable_errors
from personalsystems.domains.notes.mappers import map_idea, map_note
from personalsystems.domains.notes.schemas.notes_schemas import IdeaUpsert, NoteUpsert
from personalsystems.domains.notes.services import notes_service

notes_api_bp = Blueprint("notes_api", __name__)
ideas_api_bp = Blueprint("ideas_api", __name__)


@notes_api_bp.get("")
@jwt_required()
def list_notes():
    user_id = int(get_jwt_identity())
    return jsonify({"ok": True, "notes": [map_note(n) for n in notes_service.list_notes(user_id)]})


@notes_api_bp.post("")
@jwt_required()
def upsert_note():
    payload = request.get_json(silent=True) or {}
    try:
        data = NoteUpsert.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    try:
        note, created = notes_service.upsert_note(user_id, **data.model_dump())
    except ValueError as exc:
        if str(exc) == "not_found":
            return jsonify({"ok": False, "error": "not_found"}), 404
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, "note": map_note(note)}), 201 if created else 200


@notes_api_bp.delete("/<note_id>")
@jwt_required()
def delete_note(note_id: str):
    user_id = int(get_jwt_identity())
    if not notes_service.delete_note(user_id, note_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@ideas_api_bp.get("")
@jwt_required()
def list_ideas():
    user_id = int(get_jwt_identity())
    return jsonify({"ok": True, "ideas": [map_idea(i) for i in notes_service.list_ideas(user_id)]})


@ideas_api_bp.post("")
@jwt_required()
def upsert_idea():
    payload = request.get_json(silent=True) or {}
    try:
        data = IdeaUpsert.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    try:
        idea, created = notes_service.upsert_idea(user_id, **data.model_dump())
    except ValueError as exc:
        if str(exc) == "not_found":
            return jsonify({"ok": False, "error": "not_found"}), 404
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, "idea": map_idea(idea)}), 201 if created else 200


@ideas_api_bp.delete("/<idea_id>")
@jwt_required()
def delete_idea(idea_id: str):
    user_id = int(get_jwt_identity())
    if not notes_service.delete_idea(user_id, idea_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
