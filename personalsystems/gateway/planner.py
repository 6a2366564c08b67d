"""Client-side day planning on top of the storage gateway."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from personalsystems.domains.habits.materializer import ensure_entries, ensure_week
from personalsystems.domains.habits.streaks import calculate_streak
from personalsystems.gateway.gateway import StorageGateway
from personalsystems.gateway.records import EntryRecord, HabitRecord

logger = logging.getLogger(__name__)


class DayPlanner:
    """Holds the loaded habits and entries and keeps them materialized."""

    def __init__(self, gateway: StorageGateway, *, days_ahead: int = 7):
        self.gateway = gateway
        self.days_ahead = days_ahead
        self.habits: List[HabitRecord] = []
        self.entries: List[EntryRecord] = []

    def _persist(self, fields: dict) -> EntryRecord:
        return self.gateway.upsert_entry(EntryRecord(**fields))

    def load_habits(self) -> List[HabitRecord]:
        self.habits = self.gateway.list_habits()
        return self.habits

    def add_habit(self, habit: HabitRecord, today: Optional[date] = None) -> List[EntryRecord]:
        """Store ``habit`` and materialize it for today and the following days."""
        saved = self.gateway.upsert_habit(habit)
        self.habits.insert(0, saved)
        start = today or date.today()
        existing = self.gateway.list_entries_in_range(
            start, start + timedelta(days=self.days_ahead - 1)
        )
        if self.gateway.last_read_failed:
            logger.warning("Skipping materialization for %s: entries could not be read", saved.id)
            return []
        created = ensure_week([saved], start, existing, self._persist, days=self.days_ahead)
        self.entries.extend(created)
        return created

    def load_range(self, start: date, end: date, today: Optional[date] = None) -> List[EntryRecord]:
        """Load entries for ``start..end``, filling in today's missing habit entries."""
        today = today or date.today()
        self.entries = self.gateway.list_entries_in_range(start, end)
        if self.gateway.last_read_failed:
            logger.warning("Skipping materialization for %s: entries could not be read", today)
            return self.entries
        if start <= today <= end and self.habits:
            created = ensure_entries(self.habits, today, self.entries, self._persist)
            if created:
                logger.info("Materialized %d entries for %s", len(created), today)
                self.entries.extend(created)
        return self.entries

    def toggle_complete(self, entry: EntryRecord, now: Optional[datetime] = None) -> EntryRecord:
        completing = not entry.completed
        updated = entry.model_copy(
            update={
                "completed": completing,
                "completed_at": (now or datetime.utcnow()) if completing else None,
            }
        )
        return self._replace(self.gateway.upsert_entry(updated))

    def reschedule(self, entry: EntryRecord, scheduled_time: str) -> EntryRecord:
        updated = entry.model_copy(update={"scheduled_time": scheduled_time})
        return self._replace(self.gateway.upsert_entry(updated))

    def streaks(self, today: Optional[date] = None) -> Dict[str, int]:
        return {
            habit.id: calculate_streak(self.entries, habit, today) for habit in self.habits
        }

    def _replace(self, entry: EntryRecord) -> EntryRecord:
        self.entries = [entry if e.id == entry.id else e for e in self.entries]
        if all(e.id != entry.id for e in self.entries):
            self.entries.append(entry)
        return entry
