"""AI request/response schemas."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field

from personalsystems.domains.habits.schemas.habit_schemas import HHMM_PATTERN
from personalsystems.domains.habits.recurrence import Frequency


class PlanTask(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    date: dt.date
    time: str = Field(default="09:00", pattern=HHMM_PATTERN)
    duration_minutes: int = Field(default=30, ge=1, le=1440)
    notes: Optional[str] = None


class PlanResult(BaseModel):
    summary: str = ""
    tasks: List[PlanTask] = Field(default_factory=list)


class HabitNudge(BaseModel):
    habit_name: str
    habit_id: str
    suggested_time: str = Field(pattern=HHMM_PATTERN)
    message: str


class AnalyzePlanRequest(BaseModel):
    content: str = Field(min_length=1, max_length=20000)
    start_date: Optional[dt.date] = None


class NudgeHabit(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=255)
    frequency: Frequency = Frequency.DAILY
    custom_days: List[int] = Field(default_factory=list)
    target_duration_minutes: Optional[int] = None


class HabitNudgeRequest(BaseModel):
    habits: Optional[List[NudgeHabit]] = None
    completed_today: Optional[List[str]] = None
    current_time: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)


class PlanTaskImport(BaseModel):
    tasks: List[PlanTask] = Field(min_length=1, max_length=100)
