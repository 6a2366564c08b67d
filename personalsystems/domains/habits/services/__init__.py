"""Habit services: CRUD, entry materialization, and streak aggregates."""

from __future__ import annotations

import logging
import random
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError

from personalsystems.domains.habits.materializer import (
    DEFAULT_SCHEDULED_TIME,
    ensure_entries,
    ensure_week,
)
from personalsystems.domains.habits.models import (
    ENTRY_KIND_HABIT,
    ENTRY_KIND_TASK,
    Entry,
    Habit,
)
from personalsystems.domains.habits.recurrence import Frequency, is_due
from personalsystems.domains.habits.streaks import best_streak, calculate_streak
from personalsystems.extensions import db

logger = logging.getLogger(__name__)

COLORS = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
)

HABIT_FIELDS = ("name", "color", "frequency", "custom_days", "target_duration_minutes")
ENTRY_FIELDS = (
    "date",
    "scheduled_time",
    "actual_time",
    "completed",
    "completed_at",
    "notes",
    "title",
    "duration_minutes",
)


def _default_time() -> str:
    return current_app.config.get("DEFAULT_SCHEDULED_TIME", DEFAULT_SCHEDULED_TIME)


def _days_ahead() -> int:
    return int(current_app.config.get("MATERIALIZE_DAYS_AHEAD", 7))


# --- habits ---


def get_habit(user_id: int, habit_id: str) -> Optional[Habit]:
    return Habit.query.filter_by(id=habit_id, user_id=user_id).first()


def upsert_habit(
    user_id: int,
    *,
    name: str,
    id: Optional[str] = None,
    color: Optional[str] = None,
    frequency: Frequency | str = Frequency.DAILY,
    custom_days: Optional[List[int]] = None,
    target_duration_minutes: Optional[int] = None,
    created_at: Optional[datetime] = None,
    today: Optional[date] = None,
) -> Tuple[Habit, bool]:
    """Create or replace a habit keyed by id.

    New habits get entries for the coming week. Returns ``(habit, created)``.
    """
    name_norm = (name or "").strip()
    if not name_norm:
        raise ValueError("validation_error")
    frequency_value = Frequency(frequency).value

    habit = db.session.get(Habit, id) if id else None
    if habit is not None and habit.user_id != user_id:
        raise ValueError("not_found")

    fields = {
        "name": name_norm,
        "color": color or (habit.color if habit else random.choice(COLORS)),
        "frequency": frequency_value,
        "custom_days": list(custom_days or []),
        "target_duration_minutes": target_duration_minutes,
    }

    if habit is not None:
        for key in HABIT_FIELDS:
            setattr(habit, key, fields[key])
        db.session.commit()
        return habit, False

    habit = Habit(user_id=user_id, **fields)
    if id:
        habit.id = id
    if created_at:
        habit.created_at = created_at
    db.session.add(habit)
    db.session.flush()

    start = today or date.today()
    existing = _habit_entries_between(user_id, [habit.id], start, start + timedelta(days=_days_ahead()))
    created = ensure_week(
        [habit],
        start,
        existing,
        _persist_for(user_id),
        days=_days_ahead(),
        scheduled_time=_default_time(),
    )
    db.session.commit()
    logger.info("Created habit %s for user %s with %d entries", habit.id, user_id, len(created))
    return habit, True


def delete_habit(user_id: int, habit_id: str) -> bool:
    habit = get_habit(user_id, habit_id)
    if not habit:
        return False
    # Reload so entries added since the collection was read are cascaded too.
    db.session.expire(habit, ["entries"])
    db.session.delete(habit)
    db.session.commit()
    return True


def list_habits(user_id: int, today: Optional[date] = None) -> List[dict]:
    """Habits newest first, each with streak figures and today's status."""
    today = today or date.today()
    habits = (
        Habit.query.filter_by(user_id=user_id)
        .order_by(Habit.created_at.desc())
        .all()
    )
    entries_by_habit = _entries_by_habit(user_id, [h.id for h in habits])
    return [_habit_summary(habit, entries_by_habit.get(habit.id, []), today) for habit in habits]


def get_habit_detail(user_id: int, habit_id: str, today: Optional[date] = None) -> Optional[dict]:
    habit = get_habit(user_id, habit_id)
    if not habit:
        return None
    today = today or date.today()
    entries = _entries_by_habit(user_id, [habit.id]).get(habit.id, [])
    summary = _habit_summary(habit, entries, today)
    summary["total_completed"] = sum(1 for e in entries if e.completed)
    summary["recent_entries"] = sorted(entries, key=lambda e: e.date, reverse=True)[:30]
    return summary


def completed_habit_names(user_id: int, day: date) -> List[str]:
    rows = (
        db.session.query(Habit.name)
        .join(Entry, Entry.habit_id == Habit.id)
        .filter(
            Entry.user_id == user_id,
            Entry.kind == ENTRY_KIND_HABIT,
            Entry.date == day,
            Entry.completed.is_(True),
        )
        .all()
    )
    return sorted({row.name for row in rows})


# --- entries ---


def list_entries_for_date(user_id: int, day: date) -> List[Entry]:
    return (
        Entry.query.filter_by(user_id=user_id, date=day)
        .order_by(Entry.scheduled_time.asc())
        .all()
    )


def list_entries_in_range(user_id: int, start: date, end: date) -> List[Entry]:
    if start > end:
        raise ValueError("invalid_range")
    return (
        Entry.query.filter_by(user_id=user_id)
        .filter(Entry.date >= start, Entry.date <= end)
        .order_by(Entry.date.asc(), Entry.scheduled_time.asc())
        .all()
    )


def list_entries_for_habit(user_id: int, habit_id: str) -> List[Entry]:
    return (
        Entry.query.filter_by(user_id=user_id, habit_id=habit_id)
        .order_by(Entry.date.desc())
        .all()
    )


def upsert_entry(user_id: int, **fields) -> Tuple[Entry, bool]:
    """Create or update an entry keyed by id. Returns ``(entry, created)``."""
    entry_id = fields.pop("id", None)
    kind = fields.pop("kind", ENTRY_KIND_HABIT) or ENTRY_KIND_HABIT
    habit_id = fields.pop("habit_id", None)

    if habit_id:
        owner = db.session.query(Habit.user_id).filter(Habit.id == habit_id).scalar()
        if owner != user_id:
            raise ValueError("not_found")

    entry = db.session.get(Entry, entry_id) if entry_id else None
    if entry is not None and entry.user_id != user_id:
        raise ValueError("not_found")

    values = {key: fields[key] for key in ENTRY_FIELDS if key in fields}
    if values.get("completed") and not values.get("completed_at"):
        if entry is not None and entry.completed and entry.completed_at:
            values["completed_at"] = entry.completed_at
        else:
            values["completed_at"] = datetime.utcnow()
    if "completed" in values and not values["completed"]:
        values["completed_at"] = None

    created = entry is None
    if created:
        entry = Entry(user_id=user_id, kind=kind, habit_id=habit_id)
        if entry_id:
            entry.id = entry_id
        db.session.add(entry)
    for key, value in values.items():
        setattr(entry, key, value)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValueError("duplicate")
    return entry, created


def delete_entry(user_id: int, entry_id: str) -> bool:
    entry = Entry.query.filter_by(id=entry_id, user_id=user_id).first()
    if not entry:
        return False
    db.session.delete(entry)
    db.session.commit()
    return True


def materialize_for_date(user_id: int, day: Optional[date] = None) -> List[Entry]:
    """Ensure each habit due on ``day`` has an entry; return the new ones."""
    day = day or date.today()
    habits = Habit.query.filter_by(user_id=user_id).all()
    if not habits:
        return []
    existing = Entry.query.filter_by(user_id=user_id, date=day, kind=ENTRY_KIND_HABIT).all()
    created = ensure_entries(
        habits, day, existing, _persist_for(user_id), scheduled_time=_default_time()
    )
    if not created:
        return []
    try:
        db.session.commit()
    except IntegrityError:
        # Another request materialized the same day first; keep its rows.
        db.session.rollback()
        logger.warning("Concurrent materialization for user %s on %s", user_id, day)
        return []
    return created


def import_plan_tasks(user_id: int, tasks: Iterable) -> List[Entry]:
    """Store plan tasks as one-off entries with no habit behind them."""
    entries = []
    for task in tasks:
        entry = Entry(
            user_id=user_id,
            kind=ENTRY_KIND_TASK,
            habit_id=None,
            title=task.title.strip(),
            date=task.date,
            scheduled_time=task.time,
            duration_minutes=task.duration_minutes,
            notes=(task.notes or "").strip() or None,
            completed=False,
        )
        db.session.add(entry)
        entries.append(entry)
    db.session.commit()
    return entries


# --- helpers ---


def _persist_for(user_id: int):
    def _persist(fields: dict) -> Entry:
        entry = Entry(user_id=user_id, **fields)
        db.session.add(entry)
        return entry

    return _persist


def _entries_by_habit(user_id: int, habit_ids: List[str]) -> Dict[str, List[Entry]]:
    grouped: Dict[str, List[Entry]] = defaultdict(list)
    if not habit_ids:
        return grouped
    rows = (
        Entry.query.filter_by(user_id=user_id, kind=ENTRY_KIND_HABIT)
        .filter(Entry.habit_id.in_(habit_ids))
        .all()
    )
    for entry in rows:
        grouped[entry.habit_id].append(entry)
    return grouped


def _habit_entries_between(
    user_id: int, habit_ids: List[str], start: date, end: date
) -> List[Entry]:
    return (
        Entry.query.filter_by(user_id=user_id, kind=ENTRY_KIND_HABIT)
        .filter(Entry.habit_id.in_(habit_ids))
        .filter(Entry.date >= start, Entry.date <= end)
        .all()
    )


def _habit_summary(habit: Habit, entries: List[Entry], today: date) -> dict:
    completed_today = any(e.date == today and e.completed for e in entries)
    return {
        "habit": habit,
        "streak": calculate_streak(entries, habit, today),
        "best_streak": best_streak(entries, habit, today),
        "due_today": is_due(habit, today),
        "completed_today": completed_today,
    }
