"""Eligibility checks for assigning a staff member to a shift.

Checks run in a fixed order and the first failure wins:
1. Absolute unavailability on the shift date
2. Already assigned to this exact shift
3. Same-day combination rules
4. Minimum rest after any shift type with min_days_off
5. Consecutive cap for the candidate's own shift type

A failed check is an ordinary result carrying a human-readable reason,
never an exception.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from typing import Optional

from shiftroster.domain.calendar import add_days
from shiftroster.domain.models import (
    EligibilityResult,
    ScheduleRuleSet,
    ShiftInstance,
    StaffMember,
)


class EligibilityChecker:
    """Decides whether a staff member may legally take a shift instance.

    Example:
        >>> checker = EligibilityChecker(rules)
        >>> result = checker.check(staff, shift, all_shifts)
        >>> if not result.eligible:
        ...     print(result.reason)
    """

    def __init__(self, rules: ScheduleRuleSet):
        self.rules = rules

    def check(
        self,
        staff: StaffMember,
        shift: ShiftInstance,
        all_shifts: Iterable[ShiftInstance],
    ) -> EligibilityResult:
        """Run every check against the shifts the staff member already holds.

        Args:
            staff: Candidate staff member.
            shift: Shift instance being filled.
            all_shifts: Current-month shifts plus the prior-month lookback slice,
                with assignment lists already populated.

        Returns:
            EligibilityResult with a reason when not eligible.
        """
        if staff.is_unavailable_on(shift.date):
            return EligibilityResult.rejected("Staff member is unavailable on this date")

        if shift.is_assigned(staff.id):
            return EligibilityResult.rejected("Already assigned to this shift")

        current_type = self.rules.shift_type(shift.type_index)
        if current_type is None:
            return EligibilityResult.rejected("Invalid shift configuration")

        worked = self._worked_types_by_date(staff.id, shift, all_shifts)

        reason = self._check_same_day(shift, worked)
        if reason is None:
            reason = self._check_min_rest(shift.date, worked)
        if reason is None:
            reason = self._check_consecutive(shift, worked)

        if reason is not None:
            return EligibilityResult.rejected(reason)
        return EligibilityResult.ok()

    def _worked_types_by_date(
        self,
        staff_id: str,
        shift: ShiftInstance,
        all_shifts: Iterable[ShiftInstance],
    ) -> dict[date, list[int]]:
        """Map each date to the shift types the staff member works that day.

        The candidate instance itself is excluded.
        """
        worked: dict[date, list[int]] = defaultdict(list)
        for other in all_shifts:
            if other.id == shift.id:
                continue
            if other.is_assigned(staff_id):
                worked[other.date].append(other.type_index)
        return worked

    def _label(self, type_index: int) -> str:
        shift_type = self.rules.shift_type(type_index)
        if shift_type is None:
            return f"Shift {type_index}"
        return shift_type.label

    def _check_same_day(
        self,
        shift: ShiftInstance,
        worked: dict[date, list[int]],
    ) -> Optional[str]:
        for existing_index in worked.get(shift.date, []):
            existing_type = self.rules.shift_type(existing_index)
            if existing_type is None or not existing_type.allows_same_day(
                shift.type_index
            ):
                return (
                    f"Same-day shifts not allowed: {self._label(existing_index)} "
                    f"-> {self._label(shift.type_index)}"
                )
        return None

    def _check_min_rest(
        self,
        shift_date: date,
        worked: dict[date, list[int]],
    ) -> Optional[str]:
        for type_index, shift_type in enumerate(self.rules.shift_types):
            min_days = shift_type.min_days_off
            if min_days <= 0:
                continue
            for days_ago in range(1, min_days + 1):
                if type_index in worked.get(add_days(shift_date, -days_ago), []):
                    return (
                        f"Minimum {min_days} day(s) off required after "
                        f"{shift_type.label} (worked {days_ago} day(s) ago)"
                    )
        return None

    def _check_consecutive(
        self,
        shift: ShiftInstance,
        worked: dict[date, list[int]],
    ) -> Optional[str]:
        shift_type = self.rules.shift_types[shift.type_index]
        yesterday = add_days(shift.date, -1)

        if shift_type.max_consecutive == 0:
            if shift.type_index in worked.get(yesterday, []):
                return f"Consecutive {shift_type.label} shifts not allowed"
            return None

        run = count_consecutive_ending_on(yesterday, worked, shift.type_index)
        if run >= shift_type.max_consecutive:
            return (
                f"Maximum {shift_type.max_consecutive} consecutive "
                f"{shift_type.label} shifts reached"
            )
        return None


def count_consecutive_ending_on(
    end_date: date,
    worked: dict[date, list[int]],
    type_index: int,
) -> int:
    """Length of the unbroken daily run of ``type_index`` ending on ``end_date``."""
    count = 0
    current = end_date
    while type_index in worked.get(current, []):
        count += 1
        current = add_days(current, -1)
    return count


def can_assign(
    staff: StaffMember,
    shift: ShiftInstance,
    all_shifts: Iterable[ShiftInstance],
    rules: ScheduleRuleSet,
) -> EligibilityResult:
    """Check whether ``staff`` may be assigned to ``shift``.

    Convenience wrapper around :class:`EligibilityChecker` for one-off
    checks, such as explaining why a manual edit would break the rules.
    """
    return EligibilityChecker(rules).check(staff, shift, all_shifts)


def hours_worked(
    staff_id: str,
    shifts: Iterable[ShiftInstance],
    hours_per_shift: float,
) -> float:
    """Hours credited to a staff member: assigned shift count x hours per shift."""
    return sum(1 for s in shifts if s.is_assigned(staff_id)) * hours_per_shift
