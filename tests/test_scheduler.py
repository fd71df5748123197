"""Tests for the MonthlyScheduler history owner."""

import logging
from datetime import date

import pytest

from shiftroster.domain.models import ScheduleHistory
from shiftroster.domain.presets import create_sample_roster, default_rules, hospital_standard
from shiftroster.scheduling.scheduler import MonthlyScheduler

MARCH = date(2024, 3, 1)
APRIL = date(2024, 4, 1)


class TestMonthlyScheduler:
    @pytest.fixture
    def scheduler(self):
        return MonthlyScheduler(create_sample_roster(15), default_rules())

    def test_schedule_for_generates_once(self, scheduler):
        first = scheduler.schedule_for(date(2024, 3, 20))
        second = scheduler.schedule_for(MARCH)
        assert first is second
        assert scheduler.history.keys() == ["2024-2"]

    def test_regenerate_replaces_entry(self, scheduler):
        first = scheduler.schedule_for(MARCH)
        second = scheduler.regenerate(MARCH)
        assert second is not first
        assert scheduler.history.get(MARCH) is second
        assert len(scheduler.history) == 1

    def test_generate_range_stores_each_month(self, scheduler):
        schedules = scheduler.generate_range(date(2024, 11, 1), 3)
        assert [s.month for s in schedules] == [
            date(2024, 11, 1),
            date(2024, 12, 1),
            date(2025, 1, 1),
        ]
        assert scheduler.history.keys() == ["2024-10", "2024-11", "2025-0"]

    def test_range_uses_previous_month(self, scheduler):
        march, april = scheduler.generate_range(MARCH, 2)
        last_nights = [
            s for s in march.shifts if s.date == date(2024, 3, 31) and s.type_index == 1
        ][0].assigned_staff
        first_days = [s for s in april.shifts if s.date <= date(2024, 4, 2)]
        for staff_id in last_nights:
            assert all(staff_id not in s.assigned_staff for s in first_days)

    def test_update_rules_clears_history(self, scheduler, caplog):
        scheduler.generate_range(MARCH, 2)
        with caplog.at_level(logging.INFO, logger="shiftroster"):
            schedule = scheduler.update_rules(hospital_standard(), APRIL)

        assert scheduler.history.keys() == ["2024-3"]
        assert schedule.rules is scheduler.rules
        assert "discarded 2 stored schedule(s)" in caplog.text

    def test_update_roster_applies_on_regenerate(self, scheduler):
        scheduler.schedule_for(MARCH)
        scheduler.update_roster(create_sample_roster(6))
        assert len(scheduler.schedule_for(MARCH).staff) == 15
        assert len(scheduler.regenerate(MARCH).staff) == 6

    def test_existing_history_is_used(self):
        history = ScheduleHistory()
        scheduler = MonthlyScheduler(create_sample_roster(15), default_rules(), history)
        scheduler.schedule_for(MARCH)
        assert MARCH in history

    def test_stats_and_fairness(self, scheduler):
        stats = scheduler.stats_for(MARCH)
        assert len(stats) == 15
        assert sum(s.total_shifts for s in stats) == 31 * 5

        metrics = scheduler.fairness_for(MARCH)
        assert metrics.avg_hours == pytest.approx(31 * 5 * 12 / 15)
        assert 0 <= metrics.fairness_score <= 100
