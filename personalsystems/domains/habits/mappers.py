"""Habit and entry mappers for DTO responses."""

from __future__ import annotations

from personalsystems.domains.habits.models import Entry, Habit
from personalsystems.domains.habits.schemas.habit_schemas import EntryResponse, HabitResponse


def map_habit(habit: Habit, **stats) -> dict:
    return HabitResponse(
        id=habit.id,
        name=habit.name,
        color=habit.color,
        frequency=habit.frequency,
        custom_days=list(habit.custom_days or []),
        target_duration_minutes=habit.target_duration_minutes,
        created_at=habit.created_at,
        updated_at=habit.updated_at,
        **stats,
    ).model_dump(mode="json")


def map_habit_summary(item: dict) -> dict:
    return map_habit(
        item["habit"],
        streak=item["streak"],
        best_streak=item["best_streak"],
        due_today=item["due_today"],
        completed_today=item["completed_today"],
    )


def map_entry(entry: Entry) -> dict:
    return EntryResponse(
        id=entry.id,
        kind=entry.kind,
        habit_id=entry.habit_id,
        title=entry.title,
        duration_minutes=entry.duration_minutes,
        date=entry.date,
        scheduled_time=entry.scheduled_time,
        actual_time=entry.actual_time,
        completed=bool(entry.completed),
        completed_at=entry.completed_at,
        notes=entry.notes,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    ).model_dump(mode="json")
