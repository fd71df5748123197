"""Tests for monthly schedule generation and cross-month lookback."""

from datetime import date, time

import pytest

from shiftroster.domain.models import (
    Schedule,
    ScheduleHistory,
    ScheduleRuleSet,
    ShiftInstance,
    ShiftTypeDefinition,
    StaffMember,
)
from shiftroster.domain.presets import (
    create_sample_roster,
    default_rules,
    three_shift_rotation,
    weekday_only,
)
from shiftroster.scheduling.generator import (
    ScheduleGenerator,
    build_month_shifts,
    generate,
    lookback_days,
    lookback_shifts,
)
from shiftroster.validation.rules import RuleSetError

MARCH = date(2024, 3, 1)
APRIL = date(2024, 4, 1)
DAY = 0
NIGHT = 1


def night_on(d: date, staff: list[str]) -> ShiftInstance:
    return ShiftInstance(
        id=ShiftInstance.make_id(NIGHT, d),
        date=d,
        type_index=NIGHT,
        required_staff=2,
        assigned_staff=list(staff),
    )


def history_with(shifts: list[ShiftInstance], month: date = MARCH, rules=None) -> ScheduleHistory:
    rules = rules or default_rules()
    return ScheduleHistory([
        Schedule(month=month, shifts=shifts, rules=rules, staff=create_sample_roster(15))
    ])


class TestBuildMonthShifts:
    """Tests for shift instantiation."""

    def test_every_day_every_type(self):
        shifts = build_month_shifts(MARCH, default_rules())
        assert len(shifts) == 62
        assert shifts[0].id == "shift-0-2024-03-01"
        assert shifts[1].id == "shift-1-2024-03-01"
        assert all(not s.assigned_staff for s in shifts)

    def test_date_then_type_order(self):
        shifts = build_month_shifts(MARCH, three_shift_rotation())
        keys = [(s.date, s.type_index) for s in shifts]
        assert keys == sorted(keys)

    def test_required_staff_copied_from_definition(self):
        shifts = build_month_shifts(MARCH, default_rules())
        assert {s.required_staff for s in shifts if s.type_index == DAY} == {3}
        assert {s.required_staff for s in shifts if s.type_index == NIGHT} == {2}

    def test_global_weekday_mask(self):
        shifts = build_month_shifts(MARCH, weekday_only())
        assert len(shifts) == 21 * 2
        assert all(s.date.weekday() < 5 for s in shifts)

    def test_per_type_override(self):
        rules = default_rules()
        rules.shift_types[NIGHT].active_days_of_week = [False] * 6 + [True]  # Saturdays
        shifts = build_month_shifts(MARCH, rules)
        nights = [s.date.day for s in shifts if s.type_index == NIGHT]
        assert nights == [2, 9, 16, 23, 30]
        assert sum(1 for s in shifts if s.type_index == DAY) == 31

    def test_all_false_override_means_never(self):
        rules = default_rules()
        rules.shift_types[NIGHT].active_days_of_week = [False] * 7
        shifts = build_month_shifts(MARCH, rules)
        assert all(s.type_index == DAY for s in shifts)

    def test_mid_month_date_normalized(self):
        schedule = generate(date(2024, 3, 17), create_sample_roster(15), default_rules())
        assert schedule.month == MARCH
        assert schedule.shifts[0].date == MARCH


class TestGenerate:
    """Tests for full-month generation."""

    @pytest.fixture
    def roster(self):
        return create_sample_roster(15)

    def test_deterministic(self, roster):
        first = generate(MARCH, roster, default_rules())
        second = generate(MARCH, roster, default_rules())
        assert first.assignment_table() == second.assignment_table()

    def test_roster_order_does_not_matter(self, roster):
        forward = generate(MARCH, roster, default_rules())
        backward = generate(MARCH, list(reversed(roster)), default_rules())
        assert forward.assignment_table() == backward.assignment_table()

    def test_schedule_carries_inputs(self, roster):
        rules = default_rules()
        schedule = generate(MARCH, roster, rules)
        assert schedule.rules is rules
        assert [s.id for s in schedule.staff] == [s.id for s in roster]
        assert schedule.month_key == "2024-2"

    def test_fully_staffed_with_large_roster(self, roster):
        schedule = generate(MARCH, roster, default_rules())
        assert schedule.understaffed_shifts() == []

    def test_empty_roster_leaves_everything_open(self):
        schedule = generate(MARCH, [], default_rules())
        assert len(schedule.shifts) == 62
        assert all(s.assigned_staff == [] for s in schedule.shifts)

    def test_small_roster_underfills_without_error(self):
        roster = create_sample_roster(3)
        schedule = generate(MARCH, roster, default_rules())
        assert schedule.understaffed_shifts()
        for shift in schedule.shifts:
            assert len(shift.assigned_staff) <= shift.required_staff

    def test_zero_required_staff(self, roster):
        rules = default_rules()
        rules.shift_types[NIGHT].required_staff = 0
        schedule = generate(MARCH, roster, rules)
        assert all(s.assigned_staff == [] for s in schedule.shifts if s.type_index == NIGHT)

    def test_custom_fairness_policy_is_used(self, roster):
        from shiftroster.domain.policies import DefaultFairnessPolicy

        generator = ScheduleGenerator(DefaultFairnessPolicy(lookback_days=0))
        schedule = generator.generate(MARCH, roster, default_rules())
        assert len(schedule.shifts) == 62


class TestInvalidRules:
    """Structurally invalid rule sets fail before assignment."""

    def test_empty_shift_types(self):
        with pytest.raises(RuleSetError, match="At least one shift type"):
            generate(MARCH, create_sample_roster(5), ScheduleRuleSet(shift_types=[]))

    def test_short_mask(self):
        rules = default_rules()
        rules.active_days_of_week = [True] * 5
        with pytest.raises(RuleSetError) as excinfo:
            generate(MARCH, create_sample_roster(5), rules)
        assert "7 entries" in str(excinfo.value)

    def test_error_is_a_value_error(self):
        rules = default_rules()
        rules.shift_duration_hours = 0
        with pytest.raises(ValueError):
            generate(MARCH, create_sample_roster(5), rules)

    def test_lookback_type_out_of_range(self):
        history = ScheduleHistory([
            Schedule(
                month=MARCH,
                shifts=[
                    ShiftInstance(
                        id=ShiftInstance.make_id(2, date(2024, 3, 31)),
                        date=date(2024, 3, 31),
                        type_index=2,
                        required_staff=2,
                        assigned_staff=["S001"],
                    )
                ],
                rules=three_shift_rotation(),
                staff=create_sample_roster(5),
            )
        ])
        with pytest.raises(RuleSetError, match="Lookback shift type index 2"):
            generate(APRIL, create_sample_roster(5), default_rules(), history)


class TestLookback:
    """Tests for carrying the previous month's tail into generation."""

    def test_window_defaults_to_seven_days(self):
        assert lookback_days(default_rules()) == 7

    def test_window_grows_with_rest_rules(self):
        rules = default_rules()
        rules.shift_types[NIGHT].min_days_off = 10
        assert lookback_days(rules) == 10
        assert lookback_days(default_rules(), rules) == 10

    def test_only_tail_of_previous_month_is_copied(self):
        march = build_month_shifts(MARCH, default_rules())
        history = history_with(march)
        carried = lookback_shifts(APRIL, default_rules(), history)
        assert sorted({s.date.day for s in carried}) == [25, 26, 27, 28, 29, 30, 31]
        assert all(not any(c is s for s in march) for c in carried)

    def test_no_history_no_lookback(self):
        assert lookback_shifts(APRIL, default_rules(), None) == []
        assert lookback_shifts(APRIL, default_rules(), ScheduleHistory()) == []

    def test_night_rest_carries_into_next_month(self):
        roster = create_sample_roster(15)
        history = history_with([night_on(date(2024, 3, 31), ["S001", "S002"])])
        schedule = generate(APRIL, roster, default_rules(), history)

        for shift in schedule.shifts:
            if shift.date in (date(2024, 4, 1), date(2024, 4, 2)):
                assert "S001" not in shift.assigned_staff
                assert "S002" not in shift.assigned_staff

    def test_without_history_first_staff_work_day_one(self):
        schedule = generate(APRIL, create_sample_roster(15), default_rules())
        assert "S001" in schedule.shifts[0].assigned_staff

    def test_history_is_not_mutated(self):
        roster = create_sample_roster(15)
        march = generate(MARCH, roster, default_rules())
        history = ScheduleHistory([march])
        before = march.assignment_table()

        generate(APRIL, roster, default_rules(), history)

        assert march.assignment_table() == before
        assert history.get(MARCH) is march
        assert len(history) == 1

    def test_generated_month_in_sequence_respects_boundary(self):
        roster = create_sample_roster(15)
        march = generate(MARCH, roster, default_rules())
        april = generate(APRIL, roster, default_rules(), ScheduleHistory([march]))

        last_night = [s for s in march.shifts if s.date == date(2024, 3, 31) and s.type_index == NIGHT][0]
        early_april = [s for s in april.shifts if s.date <= date(2024, 4, 2)]
        for staff_id in last_night.assigned_staff:
            assert all(staff_id not in s.assigned_staff for s in early_april)


class TestSameDayDoubles:
    def test_doubles_only_where_allowed(self):
        rules = ScheduleRuleSet(
            shift_types=[
                ShiftTypeDefinition("Morning", time(7), time(15), 2, max_consecutive=7, allow_same_day_with={1}),
                ShiftTypeDefinition("Evening", time(15), time(23), 2, max_consecutive=7),
            ],
            target_hours_per_week=40,
            shift_duration_hours=8,
        )
        roster = [StaffMember(id=f"S{i}", name=f"Staff {i}") for i in range(1, 4)]
        schedule = generate(MARCH, roster, rules)
        # Three people cannot cover four slots a day without doubling up
        doubles = 0
        for d in {s.date for s in schedule.shifts}:
            morning, evening = schedule.shifts_on(d)
            doubles += len(set(morning.assigned_staff) & set(evening.assigned_staff))
        assert doubles > 0
