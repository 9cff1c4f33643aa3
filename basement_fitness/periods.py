"""Calendar bucket keys for habit progress.

All keys are derived from the local calendar date; the time of day is ignored.
Week numbers follow a simple year + week scheme (weeks start on Sunday and
week 1 is the one containing January 1st). It is not ISO-8601 and is only
meant for bucketing progress, not for exchanging dates with other systems.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Union

from .models import HabitGoal, HabitPeriod

DateLike = Union[date, datetime]


def _as_date(t: DateLike) -> date:
    if isinstance(t, datetime):
        return t.date()
    return t


def day_key(t: DateLike) -> str:
    return _as_date(t).isoformat()


def week_key(t: DateLike) -> str:
    d = _as_date(t)
    jan1 = date(d.year, 1, 1)
    # sunday = 0
    jan1_weekday = (jan1.weekday() + 1) % 7
    days_since_jan1 = (d - jan1).days
    week = (days_since_jan1 + jan1_weekday) // 7 + 1
    return f"{d.year}-W{week:02d}"


def month_key(t: DateLike) -> str:
    d = _as_date(t)
    return f"{d.year}-{d.month:02d}"


_KEYERS = {
    HabitPeriod.DAILY: day_key,
    HabitPeriod.WEEKLY: week_key,
    HabitPeriod.MONTHLY: month_key,
}


def period_key(goal: HabitGoal, now: DateLike) -> str:
    return _KEYERS[goal.period](now)
