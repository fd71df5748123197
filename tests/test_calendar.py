"""Tests for month and weekday helpers."""

from datetime import date

from shiftroster.domain.calendar import (
    add_days,
    days_between,
    days_in_month,
    first_of_month,
    last_of_month,
    month_days,
    month_key,
    next_month,
    previous_month,
    weekday_index,
    weeks_in_month,
)


class TestMonthBounds:
    """Tests for first/last day and day counts."""

    def test_first_of_month(self):
        assert first_of_month(date(2024, 3, 17)) == date(2024, 3, 1)

    def test_days_in_leap_february(self):
        assert days_in_month(date(2024, 2, 1)) == 29
        assert days_in_month(date(2023, 2, 1)) == 28

    def test_last_of_month(self):
        assert last_of_month(date(2024, 4, 10)) == date(2024, 4, 30)
        assert last_of_month(date(2024, 12, 1)) == date(2024, 12, 31)

    def test_month_days_are_consecutive(self):
        days = month_days(date(2024, 6, 15))
        assert len(days) == 30
        assert days[0] == date(2024, 6, 1)
        assert days[-1] == date(2024, 6, 30)
        assert all(days_between(a, b) == 1 for a, b in zip(days, days[1:]))


class TestMonthNavigation:
    """Tests for moving between months across year boundaries."""

    def test_previous_month_wraps_year(self):
        assert previous_month(date(2024, 1, 20)) == date(2023, 12, 1)

    def test_next_month_wraps_year(self):
        assert next_month(date(2024, 12, 31)) == date(2025, 1, 1)

    def test_next_month_from_mid_month(self):
        assert next_month(date(2024, 1, 31)) == date(2024, 2, 1)


class TestWeekdayIndex:
    """Weekday masks are Sunday-first."""

    def test_sunday_is_zero(self):
        assert weekday_index(date(2024, 3, 3)) == 0  # Sunday

    def test_monday_is_one(self):
        assert weekday_index(date(2024, 3, 4)) == 1

    def test_saturday_is_six(self):
        assert weekday_index(date(2024, 3, 9)) == 6


class TestWeeksInMonth:
    def test_28_day_february_spans_four_weeks(self):
        assert weeks_in_month(date(2023, 2, 1)) == 4

    def test_leap_february_spans_five_weeks(self):
        assert weeks_in_month(date(2024, 2, 1)) == 5

    def test_31_day_month_spans_five_weeks(self):
        assert weeks_in_month(date(2024, 1, 1)) == 5


class TestMonthKey:
    def test_month_is_zero_based(self):
        assert month_key(date(2024, 1, 15)) == "2024-0"
        assert month_key(date(2023, 12, 1)) == "2023-11"

    def test_add_days_negative(self):
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)
