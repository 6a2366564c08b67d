"""Habits JSON API controllers (thin, schema-validated)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from personalsystems.core.utils.validation import jsonable_errors
from personalsystems.domains.habits import services as habit_services
from personalsystems.domains.habits.mappers import map_entry, map_habit, map_habit_summary
from personalsystems.domains.habits.schemas.habit_schemas import HabitUpsert

habit_api_bp = Blueprint("habit_api", __name__)


@habit_api_bp.get("")
@jwt_required()
def list_habits():
    user_id = int(get_jwt_identity())
    habits = habit_services.list_habits(user_id)
    return jsonify({"ok": True, "habits": [map_habit_summary(item) for item in habits]})


@habit_api_bp.post("")
@jwt_required()
def upsert_habit():
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitUpsert.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    try:
        habit, created = habit_services.upsert_habit(user_id, **data.model_dump())
    except ValueError as exc:
        if str(exc) == "not_found":
            return jsonify({"ok": False, "error": "not_found"}), 404
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, "habit": map_habit(habit)}), 201 if created else 200


@habit_api_bp.get("/<habit_id>")
@jwt_required()
def habit_detail(habit_id: str):
    user_id = int(get_jwt_identity())
    detail = habit_services.get_habit_detail(user_id, habit_id)
    if not detail:
        return jsonify({"ok": False, "error": "not_found"}), 404
    body = map_habit_summary(detail)
    body["total_completed"] = detail["total_completed"]
    body["recent_entries"] = [map_entry(e) for e in detail["recent_entries"]]
    return jsonify({"ok": True, "habit": body})


@habit_api_bp.delete("/<habit_id>")
@jwt_required()
def delete_habit(habit_id: str):
    user_id = int(get_jwt_identity())
    deleted = habit_services.delete_habit(user_id, habit_id)
    if not deleted:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
