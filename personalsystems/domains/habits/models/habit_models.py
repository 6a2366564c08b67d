"""Habit and entry models."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from personalsystems.core.utils.ids import generate_id
from personalsystems.domains.habits.recurrence import Frequency
from personalsystems.extensions import db

ENTRY_KIND_HABIT = "habit"
ENTRY_KIND_TASK = "task"


class Habit(db.Model):
    __tablename__ = "habits"
    __table_args__ = (
        db.Index("ix_habits_user_created_at", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(db.String(255), primary_key=True, default=generate_id)
    user_id: Mapped[int | None] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    color: Mapped[str] = mapped_column(db.String(7), nullable=False)
    frequency: Mapped[str] = mapped_column(db.String(50), nullable=False, default=Frequency.DAILY.value)
    custom_days: Mapped[list | None] = mapped_column(db.JSON)
    target_duration_minutes: Mapped[int | None] = mapped_column(nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow)

    entries: Mapped[list["Entry"]] = relationship(
        "Entry",
        back_populates="habit",
        cascade="all, delete-orphan",
    )


class Entry(db.Model):
    """One occurrence on a calendar day.

    ``kind`` tags the variant: ``habit`` rows are occurrences of a recurring
    Habit, ``task`` rows are one-off plan tasks with no Habit behind them.
    """

    __tablename__ = "entries"
    __table_args__ = (
        db.Index("ix_entries_user_date", "user_id", "date"),
        db.Index("ix_entries_habit_date", "habit_id", "date"),
        db.Index(
            "ux_entries_user_habit_date",
            "user_id",
            "habit_id",
            "date",
            unique=True,
            sqlite_where=text("kind = 'habit'"),
            postgresql_where=text("kind = 'habit'"),
        ),
    )

    id: Mapped[str] = mapped_column(db.String(255), primary_key=True, default=generate_id)
    user_id: Mapped[int | None] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=True)
    kind: Mapped[str] = mapped_column(db.String(16), nullable=False, default=ENTRY_KIND_HABIT)
    habit_id: Mapped[str | None] = mapped_column(
        db.ForeignKey("habits.id", ondelete="CASCADE"),
        nullable=True,
    )
    title: Mapped[str | None] = mapped_column(db.String(255))
    duration_minutes: Mapped[int | None] = mapped_column(nullable=True)
    date: Mapped[dt.date] = mapped_column(db.Date, nullable=False)
    scheduled_time: Mapped[str] = mapped_column(db.String(5), nullable=False)
    actual_time: Mapped[str | None] = mapped_column(db.String(5))
    completed: Mapped[bool] = mapped_column(default=False, nullable=False)
    completed_at: Mapped[dt.datetime | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow)

    habit: Mapped[Habit | None] = relationship("Habit", back_populates="entries")
