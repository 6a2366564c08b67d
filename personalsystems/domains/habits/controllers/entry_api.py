"""Entry JSON API controllers: day/range queries, upserts, materialization."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from personalsystems.core.utils.validation import jsonable_errors, parse_iso_date
from personalsystems.domains.ai.schemas.ai_schemas import PlanTaskImport
from personalsystems.domains.habits import services as habit_services
from personalsystems.domains.habits.mappers import map_entry
from personalsystems.domains.habits.schemas.habit_schemas import EntryUpsert, MaterializeRequest

entry_api_bp = Blueprint("entry_api", __name__)


@entry_api_bp.get("/date/<day>")
@jwt_required()
def entries_for_date(day: str):
    try:
        target = parse_iso_date(day)
    except ValueError:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    user_id = int(get_jwt_identity())
    entries = habit_services.list_entries_for_date(user_id, target)
    return jsonify({"ok": True, "entries": [map_entry(e) for e in entries]})


@entry_api_bp.get("/range/<start>/<end>")
@jwt_required()
def entries_in_range(start: str, end: str):
    user_id = int(get_jwt_identity())
    try:
        entries = habit_services.list_entries_in_range(
            user_id, parse_iso_date(start), parse_iso_date(end)
        )
    except ValueError:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, "entries": [map_entry(e) for e in entries]})


@entry_api_bp.get("/habit/<habit_id>")
@jwt_required()
def entries_for_habit(habit_id: str):
    user_id = int(get_jwt_identity())
    entries = habit_services.list_entries_for_habit(user_id, habit_id)
    return jsonify({"ok": True, "entries": [map_entry(e) for e in entries]})


@entry_api_bp.post("")
@jwt_required()
def upsert_entry():
    payload = request.get_json(silent=True) or {}
    try:
        data = EntryUpsert.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    try:
        entry, created = habit_services.upsert_entry(user_id, **data.model_dump())
    except ValueError as exc:
        code = str(exc)
        if code == "not_found":
            return jsonify({"ok": False, "error": "not_found"}), 404
        if code == "duplicate":
            return jsonify({"ok": False, "error": "duplicate"}), 409
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, "entry": map_entry(entry)}), 201 if created else 200


@entry_api_bp.post("/materialize")
@jwt_required()
def materialize():
    payload = request.get_json(silent=True) or {}
    try:
        data = MaterializeRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    created = habit_services.materialize_for_date(user_id, data.date)
    return jsonify({"ok": True, "created": [map_entry(e) for e in created]})


@entry_api_bp.post("/tasks")
@jwt_required()
def import_tasks():
    payload = request.get_json(silent=True) or {}
    try:
        data = PlanTaskImport.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    entries = habit_services.import_plan_tasks(user_id, data.tasks)
    return jsonify({"ok": True, "entries": [map_entry(e) for e in entries]}), 201


@entry_api_bp.delete("/<entry_id>")
@jwt_required()
def delete_entry(entry_id: str):
    user_id = int(get_jwt_identity())
    deleted = habit_services.delete_entry(user_id, entry_id)
    if not deleted:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
