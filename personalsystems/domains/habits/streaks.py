"""Streak calculation over materialized entries."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set

from personalsystems.domains.habits.recurrence import as_day, is_due

# Hard floor for the backward walk, on top of the habit's creation date.
MAX_STREAK_LOOKBACK_DAYS = 3650


def completed_days(entries: Iterable, habit_id: str) -> Set[date]:
    return {
        as_day(entry.date)
        for entry in entries
        if entry.habit_id == habit_id
        and entry.completed
        and getattr(entry, "kind", "habit") != "task"
    }


def walk_floor(habit, today: date, done: Set[date] = frozenset()) -> date:
    """Earliest day a streak walk may look at.

    ``created_at`` is stored in UTC while ``today`` is local, so a completed
    day earlier than the creation date still lowers the floor.
    """
    floor = today - timedelta(days=MAX_STREAK_LOOKBACK_DAYS)
    created = getattr(habit, "created_at", None)
    if created is not None:
        start = as_day(created)
        if done:
            start = min(start, min(done))
        floor = max(floor, start)
    return floor


def calculate_streak(
    entries: Iterable, habit, today: Optional[date | datetime] = None
) -> int:
    """Count consecutive satisfied due days ending at ``today``.

    Days the habit is not due are skipped without breaking the streak. Today
    is still in progress: an unfinished due entry for today neither counts nor
    breaks.
    """
    today = as_day(today or date.today())
    done = completed_days(entries, habit.id)
    floor = walk_floor(habit, today, done)

    streak = 0
    day = today
    while day >= floor:
        if is_due(habit, day):
            if day in done:
                streak += 1
            elif day != today:
                break
        day -= timedelta(days=1)
    return streak


def best_streak(
    entries: Iterable, habit, today: Optional[date | datetime] = None
) -> int:
    """Longest run of satisfied due days inside the same window."""
    today = as_day(today or date.today())
    done = completed_days(entries, habit.id)

    best = 0
    run = 0
    day = walk_floor(habit, today, done)
    while day <= today:
        if is_due(habit, day):
            if day in done:
                run += 1
                best = max(best, run)
            elif day != today:
                run = 0
        day += timedelta(days=1)
    return best
