"""Validation module for verifying schedule correctness.

This module re-checks a finished schedule against every assignment rule,
independently of the engine that produced it. Generated schedules should
always pass; hand-edited or imported ones may not.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from shiftroster.domain.calendar import add_days
from shiftroster.domain.models import Schedule, ScheduleHistory, ShiftInstance


class ValidationErrorType(Enum):
    """Types of validation errors."""

    UNKNOWN_STAFF = "unknown_staff"
    UNKNOWN_SHIFT_TYPE = "unknown_shift_type"
    STAFF_UNAVAILABLE = "staff_unavailable"
    DUPLICATE_ASSIGNMENT = "duplicate_assignment"
    OVERSTAFFED = "overstaffed"
    SAME_DAY_NOT_ALLOWED = "same_day_not_allowed"
    MIN_REST_VIOLATED = "min_rest_violated"
    CONSECUTIVE_NOT_ALLOWED = "consecutive_not_allowed"
    MAX_CONSECUTIVE_EXCEEDED = "max_consecutive_exceeded"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    staff_id: Optional[str] = None
    shift_date: Optional[date] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.staff_id:
            parts.append(f"Staff {self.staff_id}:")
        parts.append(self.message)
        if self.shift_date is not None:
            parts.append(f"({self.shift_date.isoformat()})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a schedule."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def errors_of_type(self, error_type: ValidationErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.error_type == error_type]


class ScheduleValidator:
    """Validates monthly schedules against the assignment rules.

    Rest and consecutive rules are checked across the month boundary when
    the previous month is available in ``history``; violations inside the
    previous month itself are not reported.

    Example:
        >>> validator = ScheduleValidator()
        >>> result = validator.validate(schedule, history)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(
        self,
        schedule: Schedule,
        history: Optional[ScheduleHistory] = None,
    ) -> ValidationResult:
        """Validate a complete schedule.

        Args:
            schedule: The schedule to validate.
            history: Optional history supplying the previous month.

        Returns:
            ValidationResult with is_valid flag, errors, and understaffing warnings.
        """
        result = ValidationResult(is_valid=True)
        rules = schedule.rules
        staff_by_id = {s.id: s for s in schedule.staff}

        previous: list[ShiftInstance] = []
        if history is not None:
            prior = history.previous(schedule.month)
            if prior is not None:
                previous = prior.shifts

        for shift in schedule.shifts:
            self._validate_shift(shift, schedule, staff_by_id, result)

        # staff_id -> date -> type indices, in schedule order within a day
        worked: dict[str, dict[date, list[int]]] = defaultdict(lambda: defaultdict(list))
        for shift in previous + schedule.shifts:
            if rules.shift_type(shift.type_index) is None:
                continue
            for staff_id in dict.fromkeys(shift.assigned_staff):
                worked[staff_id][shift.date].append(shift.type_index)

        month_dates = {s.date for s in schedule.shifts}
        for staff_id, by_date in worked.items():
            self._validate_same_day(staff_id, by_date, month_dates, schedule, result)
            self._validate_rest(staff_id, by_date, month_dates, schedule, result)
            self._validate_consecutive(staff_id, by_date, month_dates, schedule, result)

        return result

    def _validate_shift(
        self,
        shift: ShiftInstance,
        schedule: Schedule,
        staff_by_id: dict,
        result: ValidationResult,
    ) -> None:
        shift_type = schedule.rules.shift_type(shift.type_index)
        if shift_type is None:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.UNKNOWN_SHIFT_TYPE,
                    message=f"Shift {shift.id} references unknown type {shift.type_index}",
                    shift_date=shift.date,
                )
            )
            return

        if len(set(shift.assigned_staff)) != len(shift.assigned_staff):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DUPLICATE_ASSIGNMENT,
                    message=f"Shift {shift.id} lists the same staff member twice",
                    shift_date=shift.date,
                )
            )

        if len(shift.assigned_staff) > shift.required_staff:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.OVERSTAFFED,
                    message=(
                        f"Shift {shift.id} has {len(shift.assigned_staff)} staff "
                        f"(requires {shift.required_staff})"
                    ),
                    shift_date=shift.date,
                )
            )
        elif shift.is_understaffed:
            result.add_warning(
                f"{shift_type.label} on {shift.date.isoformat()} is understaffed "
                f"({len(shift.assigned_staff)}/{shift.required_staff})"
            )

        for staff_id in shift.assigned_staff:
            staff = staff_by_id.get(staff_id)
            if staff is None:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_STAFF,
                        message=f"Unknown staff ID on shift {shift.id}",
                        staff_id=staff_id,
                        shift_date=shift.date,
                    )
                )
            elif staff.is_unavailable_on(shift.date):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.STAFF_UNAVAILABLE,
                        message=f"Assigned to {shift_type.label} while unavailable",
                        staff_id=staff_id,
                        shift_date=shift.date,
                    )
                )

    def _validate_same_day(
        self,
        staff_id: str,
        by_date: dict[date, list[int]],
        month_dates: set[date],
        schedule: Schedule,
        result: ValidationResult,
    ) -> None:
        rules = schedule.rules
        for d, type_indices in by_date.items():
            if d not in month_dates or len(type_indices) < 2:
                continue
            ordered = sorted(type_indices)
            for i, earlier in enumerate(ordered):
                for later in ordered[i + 1:]:
                    if not rules.shift_types[earlier].allows_same_day(later):
                        result.add_error(
                            ValidationError(
                                error_type=ValidationErrorType.SAME_DAY_NOT_ALLOWED,
                                message=(
                                    f"Works {rules.shift_types[earlier].label} and "
                                    f"{rules.shift_types[later].label} on the same day"
                                ),
                                staff_id=staff_id,
                                shift_date=d,
                            )
                        )

    def _validate_rest(
        self,
        staff_id: str,
        by_date: dict[date, list[int]],
        month_dates: set[date],
        schedule: Schedule,
        result: ValidationResult,
    ) -> None:
        rules = schedule.rules
        for d in sorted(by_date):
            if d not in month_dates:
                continue
            for type_index, shift_type in enumerate(rules.shift_types):
                for days_ago in range(1, shift_type.min_days_off + 1):
                    if type_index in by_date.get(add_days(d, -days_ago), []):
                        result.add_error(
                            ValidationError(
                                error_type=ValidationErrorType.MIN_REST_VIOLATED,
                                message=(
                                    f"Worked {days_ago} day(s) after {shift_type.label}; "
                                    f"{shift_type.min_days_off} day(s) off required"
                                ),
                                staff_id=staff_id,
                                shift_date=d,
                                details={"type_index": type_index, "days_ago": days_ago},
                            )
                        )
                        break

    def _validate_consecutive(
        self,
        staff_id: str,
        by_date: dict[date, list[int]],
        month_dates: set[date],
        schedule: Schedule,
        result: ValidationResult,
    ) -> None:
        rules = schedule.rules
        for type_index, shift_type in enumerate(rules.shift_types):
            limit = max(shift_type.max_consecutive, 1)
            run = 0
            for d in sorted(by_date):
                if type_index not in by_date[d]:
                    run = 0
                    continue
                if type_index in by_date.get(add_days(d, -1), []):
                    run += 1
                else:
                    run = 1
                if run > limit and d in month_dates:
                    if shift_type.max_consecutive == 0:
                        error_type = ValidationErrorType.CONSECUTIVE_NOT_ALLOWED
                        message = f"Consecutive {shift_type.label} shifts"
                    else:
                        error_type = ValidationErrorType.MAX_CONSECUTIVE_EXCEEDED
                        message = (
                            f"{run} consecutive {shift_type.label} shifts "
                            f"(max {shift_type.max_consecutive})"
                        )
                    result.add_error(
                        ValidationError(
                            error_type=error_type,
                            message=message,
                            staff_id=staff_id,
                            shift_date=d,
                        )
                    )
