"""Recurrence rules: decide whether a habit is due on a calendar day.

Weekdays are numbered Sunday-first (0=Sunday .. 6=Saturday), matching the
way calendars are displayed to users, not ISO numbering.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Iterable, List

WEEKDAYS = frozenset({1, 2, 3, 4, 5})
WEEKEND = frozenset({0, 6})


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    CUSTOM = "custom"


def as_day(value: date | datetime) -> date:
    """Truncate a datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def weekday_index(day: date | datetime) -> int:
    return as_day(day).isoweekday() % 7


def is_due(habit, day: date | datetime) -> bool:
    """True when the habit's rule selects ``day``.

    ``habit`` only needs ``frequency`` and ``custom_days`` attributes, so ORM
    rows and gateway records both work.
    """
    weekday = weekday_index(day)
    frequency = getattr(habit, "frequency", None)
    if isinstance(frequency, Frequency):
        frequency = frequency.value

    if frequency == Frequency.DAILY.value:
        return True
    if frequency == Frequency.WEEKDAYS.value:
        return weekday in WEEKDAYS
    if frequency == Frequency.WEEKENDS.value:
        return weekday in WEEKEND
    if frequency == Frequency.CUSTOM.value:
        return weekday in set(getattr(habit, "custom_days", None) or ())
    return False


def due_habits(habits: Iterable, day: date | datetime) -> List:
    return [habit for habit in habits if is_due(habit, day)]
