"""User model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from personalsystems.extensions import db

AUTH_PROVIDER_EMAIL = "email"
AUTH_PROVIDER_GOOGLE = "google"
AUTH_PROVIDER_FACEBOOK = "facebook"

PLAN_FREE = "free"
PLAN_PAID = "paid"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class User(db.Model, TimestampMixin):
    __tablename__ = "user"
    __table_args__ = (
        db.Index("ix_user_provider_identity", "auth_provider", "provider_user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    # Null for accounts that only ever signed in through Google/Facebook.
    password_hash: Mapped[str | None] = mapped_column(db.String(255))
    name: Mapped[str | None] = mapped_column(db.String(255))
    plan: Mapped[str] = mapped_column(db.String(16), nullable=False, default=PLAN_FREE)
    auth_provider: Mapped[str] = mapped_column(
        db.String(16), nullable=False, default=AUTH_PROVIDER_EMAIL
    )
    provider_user_id: Mapped[str | None] = mapped_column(db.String(255))
    marketing_consent: Mapped[bool] = mapped_column(default=False)
    is_active: Mapped[bool] = mapped_column(default=True)
