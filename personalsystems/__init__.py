"""personalsystems application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from flask import Flask, jsonify
from sqlalchemy import text

from personalsystems.config import config_by_name
from personalsystems.extensions import db, init_extensions, jwt


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the personalsystems Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and ":memory:" not in db_uri:
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    configure_logging(app)
    init_extensions(app)
    _import_models()
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers()
    _register_commands(app)

    @app.get("/health")
    def health():
        return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}, 200

    @app.get("/api/health/db")
    def health_db():
        try:
            db.session.execute(text("SELECT 1"))
        except Exception as exc:
            app.logger.error("Database health check failed: %s", exc)
            db.session.rollback()
            return {"status": "disconnected"}, 500
        return {"status": "connected"}, 200

    return app


def configure_logging(app: Flask) -> None:
    """Apply LOG_LEVEL to the package logger and make sure it has a handler."""
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    package_logger = logging.getLogger("personalsystems")
    package_logger.setLevel(level)
    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        package_logger.addHandler(handler)
    app.logger.setLevel(level)


def _import_models() -> None:
    """Make every table known to the metadata before create_all/migrations."""
    from personalsystems.core.users import models as user_models  # noqa: F401
    from personalsystems.domains.habits import models as habit_models  # noqa: F401
    from personalsystems.domains.notes import models as notes_models  # noqa: F401


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from personalsystems.core.auth.controllers import auth_bp  # local import to avoid circulars
    from personalsystems.domains.ai.controllers.ai_api import ai_api_bp
    from personalsystems.domains.habits.controllers.entry_api import entry_api_bp
    from personalsystems.domains.habits.controllers.habit_api import habit_api_bp
    from personalsystems.domains.notes.controllers.notes_api import ideas_api_bp, notes_api_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(habit_api_bp, url_prefix="/api/habits")
    app.register_blueprint(entry_api_bp, url_prefix="/api/entries")
    app.register_blueprint(notes_api_bp, url_prefix="/api/notes")
    app.register_blueprint(ideas_api_bp, url_prefix="/api/ideas")
    app.register_blueprint(ai_api_bp, url_prefix="/api/ai")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        db.session.rollback()
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers() -> None:
    """JWT failures share the API error envelope."""

    def _unauthorized(*_args):
        return jsonify({"ok": False, "error": "unauthorized"}), 401

    jwt.unauthorized_loader(_unauthorized)
    jwt.invalid_token_loader(_unauthorized)
    jwt.expired_token_loader(_unauthorized)


def _register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Create all tables without running migrations."""
        db.create_all()
        click.echo("Database tables initialized")
