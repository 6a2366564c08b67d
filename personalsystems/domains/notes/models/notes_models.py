"""Freeform note and idea records."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from personalsystems.core.utils.ids import generate_id
from personalsystems.extensions import db


class Note(db.Model):
    __tablename__ = "notes"
    __table_args__ = (
        db.Index("ix_notes_user_updated_at", "user_id", "updated_at"),
    )

    id: Mapped[str] = mapped_column(db.String(255), primary_key=True, default=generate_id)
    user_id: Mapped[int | None] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=True)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    content: Mapped[str | None] = mapped_column(db.Text)
    pinned: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class Idea(db.Model):
    __tablename__ = "ideas"
    __table_args__ = (
        db.Index("ix_ideas_user_updated_at", "user_id", "updated_at"),
    )

    id: Mapped[str] = mapped_column(db.String(255), primary_key=True, default=generate_id)
    user_id: Mapped[int | None] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=True)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    category: Mapped[str | None] = mapped_column(db.String(100))
    pinned: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
