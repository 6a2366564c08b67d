"""Storage gateway: one interface over the REST API and the local file store."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from personalsystems.gateway.connectivity import ConnectivityState
from personalsystems.gateway.local import (
    ENTRIES_KEY,
    HABITS_KEY,
    IDEAS_KEY,
    NOTES_KEY,
    LocalStore,
)
from personalsystems.gateway.records import EntryRecord, HabitRecord, IdeaRecord, NoteRecord
from personalsystems.gateway.remote import GatewayError, RemoteStore

logger = logging.getLogger(__name__)


def _by_updated_desc(items: list) -> list:
    return sorted(items, key=lambda r: r.updated_at or r.created_at or datetime.min, reverse=True)


def _by_schedule(entries: List[EntryRecord]) -> List[EntryRecord]:
    return sorted(entries, key=lambda e: (e.date, e.scheduled_time))


class StorageGateway:
    """Route each operation to the API when it is reachable, else to the local store.

    Remote read failures are logged and read as empty (habits fall back to
    the local copy). ``last_read_failed`` tells callers the last read was
    such a stand-in. Writes the API rejects raise :class:`GatewayError`;
    writes that cannot reach it land in the local store. Nothing is
    reconciled between the two.
    """

    def __init__(
        self,
        remote: RemoteStore,
        local: LocalStore,
        connectivity: Optional[ConnectivityState] = None,
    ):
        self.remote = remote
        self.local = local
        self.connectivity = connectivity or ConnectivityState(remote.probe)
        # Set by each read; True when the last read failed and returned a stand-in.
        self.last_read_failed = False

    @property
    def online(self) -> bool:
        return self.connectivity.check()

    # --- habits ---

    def list_habits(self) -> List[HabitRecord]:
        self.last_read_failed = False
        if self.online:
            try:
                return [HabitRecord.from_wire(h) for h in self.remote.list_habits()]
            except GatewayError as exc:
                logger.error("Error fetching habits: %s", exc)
                self.last_read_failed = True
        habits = [HabitRecord.from_wire(h) for h in self.local.get(HABITS_KEY)]
        return sorted(habits, key=lambda h: h.created_at, reverse=True)

    def upsert_habit(self, habit: HabitRecord) -> HabitRecord:
        if self.online:
            try:
                return HabitRecord.from_wire(self.remote.upsert_habit(habit.to_wire()))
            except GatewayError as exc:
                self._raise_unless_unreachable(exc)
        self.local.upsert(HABITS_KEY, habit.to_wire())
        return habit

    def delete_habit(self, habit_id: str) -> None:
        if self.online:
            try:
                return self.remote.delete_habit(habit_id)
            except GatewayError as exc:
                self._raise_unless_unreachable(exc)
        self.local.delete(HABITS_KEY, habit_id)

    # --- entries ---

    def list_entries_by_date(self, day: date) -> List[EntryRecord]:
        self.last_read_failed = False
        if self.online:
            try:
                return [EntryRecord.from_wire(e) for e in self.remote.list_entries_by_date(day)]
            except GatewayError as exc:
                logger.error("Error fetching entries for %s: %s", day, exc)
                self.last_read_failed = True
                return []
        entries = [EntryRecord.from_wire(e) for e in self.local.get(ENTRIES_KEY)]
        return _by_schedule([e for e in entries if e.date == day])

    def list_entries_in_range(self, start: date, end: date) -> List[EntryRecord]:
        self.last_read_failed = False
        if self.online:
            try:
                return [
                    EntryRecord.from_wire(e) for e in self.remote.list_entries_in_range(start, end)
                ]
            except GatewayError as exc:
                logger.error("Error fetching entries %s..%s: %s", start, end, exc)
                self.last_read_failed = True
                return []
        entries = [EntryRecord.from_wire(e) for e in self.local.get(ENTRIES_KEY)]
        return _by_schedule([e for e in entries if start <= e.date <= end])

    def upsert_entry(self, entry: EntryRecord) -> EntryRecord:
        if self.online:
            try:
                return EntryRecord.from_wire(self.remote.upsert_entry(entry.to_wire()))
            except GatewayError as exc:
                self._raise_unless_unreachable(exc)
        self.local.upsert(ENTRIES_KEY, entry.to_wire())
        return entry

    def delete_entry(self, entry_id: str) -> None:
        if self.online:
            try:
                return self.remote.delete_entry(entry_id)
            except GatewayError as exc:
                self._raise_unless_unreachable(exc)
        self.local.delete(ENTRIES_KEY, entry_id)

    # --- notes ---

    def list_notes(self) -> List[NoteRecord]:
        return self._list_items("notes", NOTES_KEY, NoteRecord)

    def upsert_note(self, note: NoteRecord) -> NoteRecord:
        return self._upsert_item("notes", "note", NOTES_KEY, note)

    def delete_note(self, note_id: str) -> None:
        self._delete_item("notes", NOTES_KEY, note_id)

    # --- ideas ---

    def list_ideas(self) -> List[IdeaRecord]:
        return self._list_items("ideas", IDEAS_KEY, IdeaRecord)

    def upsert_idea(self, idea: IdeaRecord) -> IdeaRecord:
        return self._upsert_item("ideas", "idea", IDEAS_KEY, idea)

    def delete_idea(self, idea_id: str) -> None:
        self._delete_item("ideas", IDEAS_KEY, idea_id)

    # --- helpers ---

    def _list_items(self, name: str, key: str, record_cls):
        self.last_read_failed = False
        if self.online:
            try:
                return [record_cls.from_wire(i) for i in self.remote.list_collection(name)]
            except GatewayError as exc:
                logger.error("Error fetching %s: %s", name, exc)
                self.last_read_failed = True
                return []
        return _by_updated_desc([record_cls.from_wire(i) for i in self.local.get(key)])

    def _raise_unless_unreachable(self, exc: GatewayError) -> None:
        """Re-raise API rejections; a transport failure means write locally instead."""
        if exc.status_code is not None:
            raise exc
        logger.warning("Backend unreachable, writing locally: %s", exc)

    def _upsert_item(self, name: str, wire_key: str, key: str, record):
        if self.online:
            try:
                return type(record).from_wire(
                    self.remote.upsert_item(name, wire_key, record.to_wire())
                )
            except GatewayError as exc:
                self._raise_unless_unreachable(exc)
        now = datetime.utcnow()
        stored = record.model_copy(
            update={"created_at": record.created_at or now, "updated_at": now}
        )
        self.local.upsert(key, stored.to_wire())
        return stored

    def _delete_item(self, name: str, key: str, item_id: str) -> None:
        if self.online:
            try:
                return self.remote.delete_item(name, item_id)
            except GatewayError as exc:
                self._raise_unless_unreachable(exc)
        self.local.delete(key, item_id)
