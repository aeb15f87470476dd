"""
Tests for session aggregation and timeframe rollups.
"""

from datetime import date, datetime, timedelta

import pytest

from models.session import Interval, Session
from utils.calendar_utils import MonthKey, YearAndWeek
from utils.enums import Granularity, Timeframe
from utils.time_format import format_compact

from ..aggregation import (
    completed_session_for,
    distinct_buckets,
    filter_sessions,
    is_completed,
    resolve_task_name,
    rollup,
    sessions_on,
    sorted_rollup,
    total_duration,
)
from .conftest import create_test_session, create_test_task


@pytest.fixture
def tasks():
    return create_test_task("Read"), create_test_task("Write")


@pytest.fixture
def january_sessions(tasks):
    read, write = tasks
    return [
        create_test_session(read, datetime(2024, 1, 8, 21, 0), minutes=30),  # Mon, week 2
        create_test_session(read, datetime(2024, 1, 10, 21, 0), minutes=15),  # Wed, week 2
        create_test_session(write, datetime(2024, 1, 10, 22, 0), minutes=60),
        create_test_session(write, datetime(2024, 1, 16, 7, 0), minutes=45),  # Tue, week 3
        create_test_session(read, datetime(2024, 2, 1, 7, 0), minutes=10),
    ]


class TestDurations:
    """Session totals."""

    def test_total_duration_sums_intervals(self):
        day = datetime(2024, 1, 1)
        session = Session(
            task_id="run",
            completion_date=day,
            intervals=[
                Interval(start=day.replace(hour=9), end=day.replace(hour=9, minute=30)),
                Interval(start=day.replace(hour=10), end=day.replace(hour=10, minute=20)),
            ],
        )

        assert total_duration(session) == timedelta(minutes=50)
        assert format_compact(total_duration(session)) == "50m"

    def test_empty_session_has_zero_duration(self):
        assert total_duration(Session(task_id="t", completion_date=datetime(2024, 1, 1))) == timedelta()


class TestCompletion:
    """Completion lookups by task and day."""

    def test_sessions_on(self, january_sessions):
        assert len(sessions_on(january_sessions, date(2024, 1, 10))) == 2

    def test_completed_session_for(self, tasks, january_sessions):
        read, write = tasks

        found = completed_session_for(january_sessions, read.id, date(2024, 1, 10))

        assert found is january_sessions[1]
        assert completed_session_for(january_sessions, write.id, date(2024, 1, 8)) is None

    def test_first_duplicate_wins(self, tasks):
        read, _ = tasks
        first = create_test_session(read, datetime(2024, 1, 8, 8, 0), minutes=5)
        second = create_test_session(read, datetime(2024, 1, 8, 20, 0), minutes=50)

        assert completed_session_for([first, second], read.id, date(2024, 1, 8)) is first

    def test_is_completed(self, tasks, january_sessions):
        read, write = tasks

        assert is_completed(read, january_sessions, date(2024, 1, 8))
        assert not is_completed(write, january_sessions, date(2024, 1, 8))


class TestRollup:
    """Per-task totals inside a timeframe bucket."""

    def test_daily_rollup(self, tasks, january_sessions):
        read, write = tasks

        totals = rollup(january_sessions, Timeframe.DAILY, date(2024, 1, 10))

        assert totals == {read.id: timedelta(minutes=15), write.id: timedelta(minutes=60)}

    def test_weekly_rollup_uses_monday_weeks(self, tasks, january_sessions):
        read, write = tasks

        totals = rollup(january_sessions, Timeframe.WEEKLY, date(2024, 1, 14))

        assert totals == {read.id: timedelta(minutes=45), write.id: timedelta(minutes=60)}

    def test_monthly_rollup(self, tasks, january_sessions):
        read, write = tasks

        totals = rollup(january_sessions, Timeframe.MONTHLY, date(2024, 1, 1))

        assert totals == {read.id: timedelta(minutes=45), write.id: timedelta(minutes=105)}

    def test_all_time_rollup_matches_grand_total(self, january_sessions):
        totals = rollup(january_sessions, Timeframe.ALL_TIME, date(1999, 1, 1))

        assert sum(totals.values(), timedelta()) == sum(
            (s.total_duration for s in january_sessions), timedelta()
        )

    def test_zero_totals_are_dropped(self, tasks):
        read, _ = tasks
        empty = create_test_session(read, datetime(2024, 1, 8), minutes=0)

        assert rollup([empty], Timeframe.DAILY, date(2024, 1, 8)) == {}

    def test_filter_sessions(self, january_sessions):
        assert filter_sessions(january_sessions, Timeframe.MONTHLY, date(2024, 2, 20)) == [
            january_sessions[4]
        ]

    def test_sorted_rollup(self):
        totals = {
            "b": timedelta(minutes=10),
            "a": timedelta(minutes=10),
            "c": timedelta(minutes=30),
        }

        assert [task_id for task_id, _ in sorted_rollup(totals)] == ["c", "a", "b"]


class TestBucketsAndNames:
    """Picker buckets and task name resolution."""

    def test_distinct_week_buckets(self, january_sessions):
        assert distinct_buckets(january_sessions, Granularity.WEEK) == [
            YearAndWeek(2024, 1, 2),
            YearAndWeek(2024, 1, 3),
            YearAndWeek(2024, 2, 5),
        ]

    def test_distinct_month_buckets(self, january_sessions):
        assert distinct_buckets(january_sessions, Granularity.MONTH) == [
            MonthKey(2024, 1),
            MonthKey(2024, 2),
        ]

    def test_resolve_task_name(self, tasks):
        read, write = tasks

        assert resolve_task_name([read, write], write.id) == "Write"
        assert resolve_task_name([read], write.id) == "Unknown"
