"""
Unit tests for calendar_utils.py module.
"""

from datetime import date, datetime

import pytest

from ..calendar_utils import (
    DayKey,
    MonthKey,
    WeekKey,
    YearAndWeek,
    as_datetime,
    bucket_key,
    bucket_label,
    days_in_month,
    days_of_month,
    leading_blank_cells,
    month_name,
    same_day,
    weekday_index,
    without_seconds,
    year_and_week,
)
from ..enums import Granularity


class TestMonthArithmetic:
    """Month length and grid offsets."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (date(2024, 2, 10), 29),
            (date(2023, 2, 10), 28),
            (date(2024, 4, 30), 30),
            (datetime(2024, 12, 31, 23, 59), 31),
        ],
    )
    def test_days_in_month(self, value, expected):
        assert days_in_month(value) == expected

    def test_days_in_month_falls_back_on_bad_input(self):
        assert days_in_month(object()) == 30

    def test_leading_blank_cells(self):
        # January 2024 starts on a Monday, September 2024 on a Sunday
        assert leading_blank_cells(date(2024, 1, 15)) == 0
        assert leading_blank_cells(date(2024, 9, 15)) == 6

    def test_days_of_month(self):
        days = days_of_month(date(2024, 2, 14))

        assert len(days) == 29
        assert days[0] == date(2024, 2, 1)
        assert days[-1] == date(2024, 2, 29)


class TestDayHelpers:
    """Weekday index, same-day and truncation helpers."""

    def test_weekday_index_is_monday_first(self):
        assert weekday_index(date(2024, 1, 1)) == 1
        assert weekday_index(datetime(2024, 1, 7, 12, 0)) == 7

    def test_same_day_ignores_time(self):
        assert same_day(datetime(2024, 1, 3, 0, 0), datetime(2024, 1, 3, 23, 59))
        assert same_day(date(2024, 1, 3), datetime(2024, 1, 3, 8, 0))
        assert not same_day(datetime(2024, 1, 3, 23, 59), datetime(2024, 1, 4, 0, 0))

    def test_as_datetime_promotes_dates_to_midnight(self):
        assert as_datetime(date(2024, 1, 3)) == datetime(2024, 1, 3, 0, 0)
        moment = datetime(2024, 1, 3, 9, 30)
        assert as_datetime(moment) is moment

    def test_without_seconds(self):
        assert without_seconds(datetime(2024, 1, 3, 9, 30, 59, 999)) == datetime(2024, 1, 3, 9, 30)


class TestBuckets:
    """Bucket keys and their labels."""

    def test_bucket_key_granularities(self):
        moment = datetime(2024, 3, 14, 10, 0)

        assert bucket_key(moment, Granularity.DAY) == DayKey(2024, 3, 14)
        assert bucket_key(moment, Granularity.WEEK) == WeekKey(2024, 11)
        assert bucket_key(moment, Granularity.MONTH) == MonthKey(2024, 3)

    def test_iso_week_crosses_year_boundary(self):
        # 2024-12-30 (Monday) belongs to ISO week 1 of 2025
        assert bucket_key(date(2024, 12, 30), Granularity.WEEK) == WeekKey(2025, 1)
        assert bucket_key(date(2025, 1, 2), Granularity.WEEK) == WeekKey(2025, 1)

    def test_week_bucket_is_shared_monday_to_sunday(self):
        monday = bucket_key(date(2024, 1, 8), Granularity.WEEK)
        sunday = bucket_key(date(2024, 1, 14), Granularity.WEEK)
        next_monday = bucket_key(date(2024, 1, 15), Granularity.WEEK)

        assert monday == sunday
        assert monday != next_monday

    def test_bucket_key_rejects_unknown_granularity(self):
        with pytest.raises(ValueError):
            bucket_key(date(2024, 1, 1), "fortnight")

    def test_year_and_week(self):
        yw = year_and_week(date(2024, 3, 14))

        assert yw == YearAndWeek(2024, 3, 11)
        assert yw.key == WeekKey(2024, 11)
        assert yw.start_date == date(2024, 3, 11)

    def test_month_name(self):
        assert month_name(1) == "January"
        assert month_name(13) == "Invalid month"
        assert month_name(0) == "Invalid month"

    @pytest.mark.parametrize(
        "key,expected",
        [
            (YearAndWeek(2024, 3, 11), "March - Week 11, 2024"),
            (WeekKey(2024, 11), "Week 11, 2024"),
            (MonthKey(2024, 3), "March 2024"),
            (DayKey(2024, 3, 14), "2024-03-14"),
        ],
    )
    def test_bucket_label(self, key, expected):
        assert bucket_label(key) == expected
