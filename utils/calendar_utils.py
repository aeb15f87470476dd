"""
Calendar utilities
Pure date arithmetic shared by recurrence, aggregation and month grids.

All dates are naive and interpreted in the local calendar. Weeks start on
Monday regardless of locale, and week buckets use ISO week numbering.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import NamedTuple

from .enums import Granularity
from .logger import Logger

DEFAULT_DAYS_IN_MONTH = 30


class DayKey(NamedTuple):
    year: int
    month: int
    day: int


class WeekKey(NamedTuple):
    year: int
    week: int


class MonthKey(NamedTuple):
    year: int
    month: int


class YearAndWeek(NamedTuple):
    """Week bucket carrying its month, ordered by (year, month, week) for pickers."""

    year: int
    month: int
    week: int

    @property
    def key(self) -> WeekKey:
        return WeekKey(self.year, self.week)

    @property
    def start_date(self) -> date:
        """Monday of the ISO week."""
        return date.fromisocalendar(self.year, self.week, 1)


BucketKey = DayKey | WeekKey | MonthKey


def as_datetime(value: date | datetime) -> datetime:
    """Promote a plain date to midnight of that day."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def weekday_index(value: date | datetime) -> int:
    """Monday=1 ... Sunday=7, independent of locale."""
    return value.isoweekday()


def days_in_month(value: date | datetime) -> int:
    """Length of the month containing ``value``."""
    try:
        return calendar.monthrange(value.year, value.month)[1]
    except (AttributeError, TypeError, ValueError) as e:
        Logger().warning(f"Could not compute month length for {value!r}: {e}")
        return DEFAULT_DAYS_IN_MONTH


def leading_blank_cells(value: date | datetime) -> int:
    """Empty grid cells before day 1 of the month: 0 for Monday ... 6 for Sunday."""
    first_day = date(value.year, value.month, 1)
    return first_day.weekday()


def days_of_month(value: date | datetime) -> list[date]:
    """Every calendar day of the month containing ``value``."""
    first_day = date(value.year, value.month, 1)
    return [first_day + timedelta(days=offset) for offset in range(days_in_month(value))]


def same_day(a: date | datetime, b: date | datetime) -> bool:
    return as_date(a) == as_date(b)


def without_seconds(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def bucket_key(value: date | datetime, granularity: Granularity) -> BucketKey:
    """Comparable key grouping ``value`` into its day, ISO week, or month."""
    if granularity is Granularity.DAY:
        return DayKey(value.year, value.month, value.day)
    if granularity is Granularity.WEEK:
        iso = as_date(value).isocalendar()
        return WeekKey(iso[0], iso[1])
    if granularity is Granularity.MONTH:
        return MonthKey(value.year, value.month)
    raise ValueError(f"Unsupported granularity: {granularity!r}")


def year_and_week(value: date | datetime) -> YearAndWeek:
    iso = as_date(value).isocalendar()
    return YearAndWeek(year=iso[0], month=value.month, week=iso[1])


def month_name(month: int) -> str:
    if not 1 <= month <= 12:
        return "Invalid month"
    return calendar.month_name[month]


def bucket_label(key: DayKey | WeekKey | MonthKey | YearAndWeek) -> str:
    """Display label for a bucket, as shown in timeframe pickers."""
    if isinstance(key, YearAndWeek):
        return f"{month_name(key.month)} - Week {key.week}, {key.year}"
    if isinstance(key, WeekKey):
        return f"Week {key.week}, {key.year}"
    if isinstance(key, MonthKey):
        return f"{month_name(key.month)} {key.year}"
    if isinstance(key, DayKey):
        return date(key.year, key.month, key.day).isoformat()
    raise TypeError(f"Not a bucket key: {key!r}")
