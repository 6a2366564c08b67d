"""Recurrence rules: which days a habit is due on."""

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from personalsystems.domains.habits.recurrence import (
    Frequency,
    due_habits,
    is_due,
    weekday_index,
)

pytestmark = pytest.mark.unit

# 2024-01-07 is a Sunday.
SUNDAY = date(2024, 1, 7)
WEEK = [SUNDAY + timedelta(days=i) for i in range(7)]


def _habit(frequency, custom_days=None):
    return SimpleNamespace(id="h", frequency=frequency, custom_days=custom_days)


def test_weekday_index_is_sunday_first():
    assert [weekday_index(d) for d in WEEK] == [0, 1, 2, 3, 4, 5, 6]


def test_daily_always_due():
    habit = _habit("daily")
    assert all(is_due(habit, d) for d in WEEK)


def test_weekdays_monday_to_friday():
    habit = _habit("weekdays")
    assert [is_due(habit, d) for d in WEEK] == [False, True, True, True, True, True, False]


def test_weekends_saturday_and_sunday():
    habit = _habit(Frequency.WEEKENDS)
    assert [is_due(habit, d) for d in WEEK] == [True, False, False, False, False, False, True]


def test_custom_days_membership():
    habit = _habit("custom", [1, 3, 5])
    assert [d for d in WEEK if is_due(habit, d)] == [WEEK[1], WEEK[3], WEEK[5]]


def test_custom_empty_set_never_due():
    habit = _habit("custom", [])
    assert not any(is_due(habit, d) for d in WEEK)


def test_unknown_frequency_not_due():
    assert is_due(_habit("fortnightly"), SUNDAY) is False


def test_datetime_is_truncated_to_day():
    from datetime import datetime

    assert is_due(_habit("weekdays"), datetime(2024, 1, 8, 23, 59)) is True


def test_due_habits_filters():
    daily = _habit("daily")
    weekend = _habit("weekends")
    assert due_habits([daily, weekend], WEEK[2]) == [daily]
