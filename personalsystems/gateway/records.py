"""Wire records exchanged with the REST API and the local store.

Field names are snake_case on the wire and on disk; there is one model per
entity and nothing else reads or writes those payloads.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from personalsystems.core.utils.ids import generate_id
from personalsystems.domains.habits.recurrence import Frequency


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json")

    @classmethod
    def from_wire(cls, payload: dict):
        return cls.model_validate(payload)


class HabitRecord(_Record):
    id: str = Field(default_factory=generate_id)
    name: str
    color: Optional[str] = None
    frequency: Frequency = Frequency.DAILY
    custom_days: List[int] = Field(default_factory=list)
    target_duration_minutes: Optional[int] = None
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)


class EntryRecord(_Record):
    id: str = Field(default_factory=generate_id)
    kind: str = "habit"
    habit_id: Optional[str] = None
    title: Optional[str] = None
    duration_minutes: Optional[int] = None
    date: dt.date
    scheduled_time: str = "09:00"
    actual_time: Optional[str] = None
    completed: bool = False
    completed_at: Optional[dt.datetime] = None
    notes: Optional[str] = None


class NoteRecord(_Record):
    id: str = Field(default_factory=generate_id)
    title: str
    content: Optional[str] = None
    pinned: bool = False
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class IdeaRecord(_Record):
    id: str = Field(default_factory=generate_id)
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    pinned: bool = False
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
