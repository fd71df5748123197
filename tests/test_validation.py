"""Tests for schedule and rule-set validation."""

from datetime import date, time

import pytest

from shiftroster.domain.models import (
    Schedule,
    ScheduleHistory,
    ScheduleRuleSet,
    ShiftInstance,
    ShiftTypeDefinition,
    StaffMember,
    UnavailabilityConstraint,
)
from shiftroster.domain.presets import create_sample_roster, default_rules
from shiftroster.validation.rules import RuleSetError, ensure_valid_rule_set, validate_rule_set
from shiftroster.validation.validator import (
    ScheduleValidator,
    ValidationErrorType,
)

MARCH = date(2024, 3, 1)
DAY = 0
NIGHT = 1


def make_shift(type_index: int, d: date, staff: list[str], required: int = 3) -> ShiftInstance:
    return ShiftInstance(
        id=ShiftInstance.make_id(type_index, d),
        date=d,
        type_index=type_index,
        required_staff=required,
        assigned_staff=list(staff),
    )


def march(day: int) -> date:
    return date(2024, 3, day)


class TestScheduleValidator:
    """Tests for ScheduleValidator."""

    @pytest.fixture
    def validator(self):
        return ScheduleValidator()

    @pytest.fixture
    def roster(self):
        return create_sample_roster(5)

    def schedule(self, shifts, roster, month=MARCH):
        return Schedule(month=month, shifts=shifts, rules=default_rules(), staff=roster)

    def test_valid_schedule(self, validator, roster):
        shifts = [
            make_shift(DAY, march(1), ["S001", "S002", "S003"]),
            make_shift(NIGHT, march(1), ["S004", "S005"], required=2),
        ]
        result = validator.validate(self.schedule(shifts, roster))
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_understaffing_is_a_warning(self, validator, roster):
        shifts = [make_shift(DAY, march(1), ["S001"])]
        result = validator.validate(self.schedule(shifts, roster))
        assert result.is_valid
        assert len(result.warnings) == 1
        assert "understaffed (1/3)" in result.warnings[0]

    def test_overstaffed(self, validator, roster):
        shifts = [make_shift(NIGHT, march(1), ["S001", "S002", "S003"], required=2)]
        result = validator.validate(self.schedule(shifts, roster))
        assert result.errors_of_type(ValidationErrorType.OVERSTAFFED)

    def test_duplicate_staff(self, validator, roster):
        shifts = [make_shift(DAY, march(1), ["S001", "S001"])]
        result = validator.validate(self.schedule(shifts, roster))
        assert result.errors_of_type(ValidationErrorType.DUPLICATE_ASSIGNMENT)

    def test_unknown_staff(self, validator, roster):
        shifts = [make_shift(DAY, march(1), ["S999"])]
        result = validator.validate(self.schedule(shifts, roster))
        errors = result.errors_of_type(ValidationErrorType.UNKNOWN_STAFF)
        assert errors[0].staff_id == "S999"

    def test_unknown_shift_type(self, validator, roster):
        shifts = [make_shift(7, march(1), ["S001"])]
        result = validator.validate(self.schedule(shifts, roster))
        assert result.errors_of_type(ValidationErrorType.UNKNOWN_SHIFT_TYPE)

    def test_unavailable_staff(self, validator, roster):
        roster[0].constraints = [UnavailabilityConstraint(date=march(1))]
        shifts = [make_shift(DAY, march(1), ["S001"])]
        result = validator.validate(self.schedule(shifts, roster))
        error = result.errors_of_type(ValidationErrorType.STAFF_UNAVAILABLE)[0]
        assert error.shift_date == march(1)
        assert "S001" in str(error)

    def test_same_day_not_allowed(self, validator, roster):
        shifts = [
            make_shift(DAY, march(1), ["S001"]),
            make_shift(NIGHT, march(1), ["S001"], required=2),
        ]
        result = validator.validate(self.schedule(shifts, roster))
        assert result.errors_of_type(ValidationErrorType.SAME_DAY_NOT_ALLOWED)

    def test_min_rest_violated(self, validator, roster):
        shifts = [
            make_shift(NIGHT, march(1), ["S001"], required=2),
            make_shift(DAY, march(3), ["S001"]),
        ]
        result = validator.validate(self.schedule(shifts, roster))
        error = result.errors_of_type(ValidationErrorType.MIN_REST_VIOLATED)[0]
        assert error.details == {"type_index": NIGHT, "days_ago": 2}

    def test_consecutive_nights(self, validator, roster):
        shifts = [
            make_shift(NIGHT, march(1), ["S001"], required=2),
            make_shift(NIGHT, march(2), ["S001"], required=2),
        ]
        result = validator.validate(self.schedule(shifts, roster))
        assert result.errors_of_type(ValidationErrorType.CONSECUTIVE_NOT_ALLOWED)

    def test_max_consecutive_exceeded(self, validator, roster):
        shifts = [make_shift(DAY, march(d), ["S001"]) for d in range(1, 6)]
        result = validator.validate(self.schedule(shifts, roster))
        errors = result.errors_of_type(ValidationErrorType.MAX_CONSECUTIVE_EXCEEDED)
        assert [e.shift_date for e in errors] == [march(5)]

    def test_rest_checked_across_month_boundary(self, validator, roster):
        previous = Schedule(
            month=date(2024, 2, 1),
            shifts=[make_shift(NIGHT, date(2024, 2, 29), ["S001"], required=2)],
            rules=default_rules(),
            staff=roster,
        )
        history = ScheduleHistory([previous])
        current = self.schedule([make_shift(DAY, march(1), ["S001"])], roster)

        assert validator.validate(current).is_valid
        result = validator.validate(current, history)
        assert result.errors_of_type(ValidationErrorType.MIN_REST_VIOLATED)

    def test_previous_month_violations_not_reported(self, validator, roster):
        previous = Schedule(
            month=date(2024, 2, 1),
            shifts=[
                make_shift(NIGHT, date(2024, 2, 10), ["S001"], required=2),
                make_shift(NIGHT, date(2024, 2, 11), ["S001"], required=2),
            ],
            rules=default_rules(),
            staff=roster,
        )
        result = validator.validate(self.schedule([], roster), ScheduleHistory([previous]))
        assert result.is_valid


class TestRuleSetValidation:
    """Tests for structural rule-set checks."""

    def test_default_rules_are_valid(self):
        assert validate_rule_set(default_rules()) == []
        ensure_valid_rule_set(default_rules())

    def test_every_problem_is_listed(self):
        rules = ScheduleRuleSet(
            shift_types=[
                ShiftTypeDefinition(
                    "Broken",
                    time(7),
                    time(19),
                    required_staff=-1,
                    min_days_off=-1,
                    max_consecutive=-2,
                    active_days_of_week=[True],
                    allow_same_day_with={3},
                )
            ],
            target_hours_per_week=0,
        )
        problems = validate_rule_set(rules)
        assert len(problems) == 6
        with pytest.raises(RuleSetError) as excinfo:
            ensure_valid_rule_set(rules)
        assert excinfo.value.problems == problems
        assert str(excinfo.value).startswith("Invalid rule set: ")

    def test_empty_shift_types(self):
        assert validate_rule_set(ScheduleRuleSet(shift_types=[])) == [
            "At least one shift type is required"
        ]
