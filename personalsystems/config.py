"""Application configuration for personalsystems."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Dict, Type

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

load_dotenv()


def _truthy(value: str | None) -> bool:
    return (value or "").lower() in ("1", "true", "yes")


def _database_uri(default: str) -> str:
    uri = os.environ.get("DATABASE_URL", default)
    # Hosted Postgres providers still hand out the legacy scheme.
    if uri.startswith("postgres://"):
        uri = uri.replace("postgres://", "postgresql://", 1)
    return uri


def _engine_options_from_uri(uri: str) -> dict:
    url = make_url(uri)
    if url.get_backend_name() == "sqlite":
        return {"pool_pre_ping": True, "connect_args": {"timeout": 30}}
    if url.get_backend_name() in {"postgresql", "postgres"}:
        timeout = int(os.environ.get("DB_CONNECT_TIMEOUT_SECONDS", "10"))
        return {"pool_pre_ping": True, "connect_args": {"connect_timeout": timeout}}
    return {"pool_pre_ping": True}


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = _database_uri("sqlite:///instance/personalsystems.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.environ.get("JWT_ACCESS_DAYS", "30")))

    RATELIMIT_DEFAULT = "200/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _truthy(os.environ.get("RATELIMIT_ENABLED", "true"))

    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(1024 * 1024)))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Habit scheduling defaults
    DEFAULT_SCHEDULED_TIME = os.environ.get("DEFAULT_SCHEDULED_TIME", "09:00")
    MATERIALIZE_DAYS_AHEAD = int(os.environ.get("MATERIALIZE_DAYS_AHEAD", "7"))

    # Social sign-in
    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID", "")
    FACEBOOK_APP_ID = os.environ.get("FACEBOOK_APP_ID", "")
    FACEBOOK_APP_SECRET = os.environ.get("FACEBOOK_APP_SECRET", "")
    OAUTH_TIMEOUT_SECONDS = int(os.environ.get("OAUTH_TIMEOUT_SECONDS", "10"))

    # Completion API used for plan analysis and habit nudges
    AI_API_URL = os.environ.get("AI_API_URL", "https://api.openai.com/v1/chat/completions")
    AI_API_KEY = os.environ.get("AI_API_KEY", "")
    AI_MODEL = os.environ.get("AI_MODEL", "gpt-4o-mini")
    AI_TIMEOUT_SECONDS = int(os.environ.get("AI_TIMEOUT_SECONDS", "30"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)
    RATELIMIT_ENABLED = False
    JWT_SECRET_KEY = "testing-secret-key-with-enough-length"
    AI_API_KEY = "test-key"
    GOOGLE_CLIENT_ID = "test-google-client"
    FACEBOOK_APP_ID = ""


class ProductionConfig(BaseConfig):
    ENV = "production"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
