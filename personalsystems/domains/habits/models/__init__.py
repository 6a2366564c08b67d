"""Habits domain models."""

from personalsystems.domains.habits.models.habit_models import (
    ENTRY_KIND_HABIT,
    ENTRY_KIND_TASK,
    Entry,
    Habit,
)

__all__ = ["Habit", "Entry", "ENTRY_KIND_HABIT", "ENTRY_KIND_TASK"]
