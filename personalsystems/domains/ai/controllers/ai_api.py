"""AI plan and nudge endpoints."""

from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from personalsystems.core.utils.validation import jsonable_errors
from personalsystems.domains.ai.schemas.ai_schemas import AnalyzePlanRequest, HabitNudgeRequest
from personalsystems.domains.ai.services import ai_service
from personalsystems.domains.ai.services.client import (
    AIConfigurationError,
    AIResponseParseError,
    AIServiceError,
)
from personalsystems.domains.habits import services as habit_services
from personalsystems.domains.habits.models import Habit
from personalsystems.domains.habits.recurrence import due_habits
from personalsystems.extensions import limiter

ai_api_bp = Blueprint("ai_api", __name__)


def _ai_error(exc: AIServiceError):
    if isinstance(exc, AIConfigurationError):
        return jsonify({"ok": False, "error": "ai_not_configured"}), 503
    if isinstance(exc, AIResponseParseError):
        return jsonify({"ok": False, "error": "ai_parse_error"}), 502
    return jsonify({"ok": False, "error": "ai_unavailable"}), 502


@ai_api_bp.post("/analyze-plan")
@limiter.limit("20/minute")
@jwt_required()
def analyze_plan():
    payload = request.get_json(silent=True) or {}
    try:
        data = AnalyzePlanRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    try:
        result = ai_service.analyze_plan(data.content, data.start_date)
    except AIServiceError as exc:
        return _ai_error(exc)
    return jsonify({"ok": True, **result.model_dump(mode="json")})


@ai_api_bp.post("/habit-nudge")
@limiter.limit("20/minute")
@jwt_required()
def habit_nudge():
    payload = request.get_json(silent=True) or {}
    try:
        data = HabitNudgeRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    habits = data.habits
    if habits is None:
        stored = Habit.query.filter_by(user_id=user_id).order_by(Habit.created_at.desc()).all()
        habits = due_habits(stored, date.today())
    completed = data.completed_today
    if completed is None:
        completed = habit_services.completed_habit_names(user_id, date.today())
    try:
        nudges = ai_service.habit_nudges(habits, completed, data.current_time)
    except AIServiceError as exc:
        return _ai_error(exc)
    return jsonify({"ok": True, "nudges": [n.model_dump() for n in nudges]})
