"""Habit and entry DTOs and schemas."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from personalsystems.domains.habits.recurrence import Frequency

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class HabitUpsert(BaseModel):
    id: Optional[str] = Field(default=None, min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    frequency: Frequency = Frequency.DAILY
    custom_days: Optional[List[int]] = None
    target_duration_minutes: Optional[int] = Field(default=None, ge=1, le=24 * 60)
    created_at: Optional[dt.datetime] = None

    @field_validator("custom_days")
    @classmethod
    def validate_custom_days(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        if v is None:
            return None
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("custom_days must be weekday indices 0 (Sunday) to 6 (Saturday)")
        return sorted(set(v))


class EntryUpsert(BaseModel):
    id: Optional[str] = Field(default=None, min_length=1, max_length=255)
    kind: str = Field(default="habit", pattern=r"^(habit|task)$")
    habit_id: Optional[str] = Field(default=None, max_length=255)
    title: Optional[str] = Field(default=None, max_length=255)
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    date: dt.date
    scheduled_time: str = Field(default="09:00", pattern=HHMM_PATTERN)
    actual_time: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    completed: bool = False
    completed_at: Optional[dt.datetime] = None
    notes: Optional[str] = Field(default=None, max_length=4096)

    @model_validator(mode="after")
    def check_variant(self) -> "EntryUpsert":
        if self.kind == "habit" and not self.habit_id:
            raise ValueError("habit entries require habit_id")
        if self.kind == "task" and not (self.title or "").strip():
            raise ValueError("task entries require a title")
        return self


class MaterializeRequest(BaseModel):
    date: Optional[dt.date] = None


class HabitResponse(BaseModel):
    id: str
    name: str
    color: str
    frequency: str
    custom_days: List[int]
    target_duration_minutes: Optional[int]
    created_at: Optional[dt.datetime]
    updated_at: Optional[dt.datetime]
    streak: int = 0
    best_streak: int = 0
    due_today: bool = False
    completed_today: bool = False


class EntryResponse(BaseModel):
    id: str
    kind: str
    habit_id: Optional[str]
    title: Optional[str]
    duration_minutes: Optional[int]
    date: dt.date
    scheduled_time: str
    actual_time: Optional[str]
    completed: bool
    completed_at: Optional[dt.datetime]
    notes: Optional[str]
    created_at: Optional[dt.datetime]
    updated_at: Optional[dt.datetime]
