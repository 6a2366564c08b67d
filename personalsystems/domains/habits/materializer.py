"""Create missing entries for habits that are due on a day."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, List, Optional

from personalsystems.core.utils.ids import generate_id
from personalsystems.domains.habits.recurrence import as_day, is_due

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULED_TIME = "09:00"

Persist = Callable[[dict], Any]


def has_entry_for(entries: Iterable, habit_id: str, day: date) -> bool:
    return any(
        entry.habit_id == habit_id and as_day(entry.date) == day for entry in entries
    )


def new_entry_fields(
    habit_id: str, day: date, scheduled_time: str = DEFAULT_SCHEDULED_TIME
) -> dict:
    return {
        "id": generate_id(),
        "kind": "habit",
        "habit_id": habit_id,
        "date": day,
        "scheduled_time": scheduled_time,
        "actual_time": None,
        "completed": False,
        "completed_at": None,
        "notes": None,
    }


def ensure_entries(
    habits: Iterable,
    day: date | datetime,
    existing_entries: Iterable,
    persist: Persist,
    *,
    scheduled_time: str = DEFAULT_SCHEDULED_TIME,
) -> List:
    """Make sure every habit due on ``day`` has an entry for it.

    ``persist`` is called once per missing entry with the new entry's fields
    and must return the stored record; failures propagate. Returns only the
    newly created records.
    """
    target = as_day(day)
    known = list(existing_entries)
    created: List = []
    for habit in habits:
        if not is_due(habit, target):
            continue
        if has_entry_for(known, habit.id, target):
            continue
        entry = persist(new_entry_fields(habit.id, target, scheduled_time))
        logger.debug("Materialized entry for habit %s on %s", habit.id, target)
        known.append(entry)
        created.append(entry)
    return created


def ensure_week(
    habits: Iterable,
    start: date | datetime,
    existing_entries: Iterable,
    persist: Persist,
    *,
    days: int = 7,
    scheduled_time: Optional[str] = None,
) -> List:
    """Run :func:`ensure_entries` for ``start`` and the following days."""
    habits = list(habits)
    known = list(existing_entries)
    first = as_day(start)
    created: List = []
    for offset in range(max(days, 0)):
        batch = ensure_entries(
            habits,
            first + timedelta(days=offset),
            known,
            persist,
            scheduled_time=scheduled_time or DEFAULT_SCHEDULED_TIME,
        )
        known.extend(batch)
        created.extend(batch)
    return created
