"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from personalsystems.core.auth.auth_service import (
    authenticate_user,
    find_or_create_social_user,
    issue_token,
    register_user,
)
from personalsystems.core.auth.oauth import (
    OAuthConfigurationError,
    OAuthVerificationError,
    verify_facebook_token,
    verify_google_credential,
)
from personalsystems.core.auth.schemas import (
    FacebookAuthRequest,
    GoogleAuthRequest,
    LoginRequest,
    SignupRequest,
)
from personalsystems.core.users.models import User
from personalsystems.core.users.schemas import serialize_user
from personalsystems.core.utils.validation import jsonable_errors
from personalsystems.extensions import db, limiter

auth_bp = Blueprint("auth_api", __name__)


def _session_response(user: User, status: int = 200):
    return jsonify({"ok": True, "token": issue_token(user), "user": serialize_user(user)}), status


def _social_login(verify, credential: str):
    try:
        identity = verify(credential)
    except OAuthConfigurationError:
        return jsonify({"ok": False, "error": "oauth_not_configured"}), 503
    except OAuthVerificationError:
        return jsonify({"ok": False, "error": "oauth_failed"}), 502
    try:
        user = find_or_create_social_user(identity)
    except ValueError:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    return _session_response(user)


@auth_bp.post("/signup")
@limiter.limit("5/minute")
def signup():
    payload = request.get_json(silent=True) or {}
    try:
        data = SignupRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    try:
        user = register_user(data)
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 409
    return _session_response(user, 201)


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user = authenticate_user(data.email, data.password)
    if not user:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    return _session_response(user)


@auth_bp.post("/google")
@limiter.limit("10/minute")
def google_login():
    payload = request.get_json(silent=True) or {}
    try:
        data = GoogleAuthRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    return _social_login(verify_google_credential, data.credential)


@auth_bp.post("/facebook")
@limiter.limit("10/minute")
def facebook_login():
    payload = request.get_json(silent=True) or {}
    try:
        data = FacebookAuthRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    return _social_login(verify_facebook_token, data.access_token)


@auth_bp.get("/me")
@jwt_required()
def me():
    user = db.session.get(User, int(get_jwt_identity()))
    if not user or not user.is_active:
        return jsonify({"ok": False, "error": "unauthorized"}), 401
    return jsonify({"ok": True, "user": serialize_user(user)})
