"""Monthly schedule generation.

This module provides the ScheduleGenerator class that builds a month of
shift instances from a rule set and fills them in date order, carrying
rest and consecutive-shift rules across the month boundary using the
trailing days of the previous month's schedule.
"""

import logging
from datetime import date
from typing import Optional

from shiftroster.domain.calendar import (
    add_days,
    first_of_month,
    last_of_month,
    month_days,
    weekday_index,
)
from shiftroster.domain.models import (
    Schedule,
    ScheduleHistory,
    ScheduleRuleSet,
    ShiftInstance,
    StaffMember,
)
from shiftroster.domain.policies import FairnessPolicy
from shiftroster.scheduling.assignment import AssignmentEngine
from shiftroster.validation.rules import RuleSetError, ensure_valid_rule_set

logger = logging.getLogger(__name__)

MIN_LOOKBACK_DAYS = 7


def build_month_shifts(month: date, rules: ScheduleRuleSet) -> list[ShiftInstance]:
    """Create the empty shift instances for every active (day, type) in the month.

    Instances come out in date order, then type-index order.
    """
    shifts = []
    for day in month_days(month):
        weekday = weekday_index(day)
        for type_index, shift_type in enumerate(rules.shift_types):
            if not rules.active_days_for(type_index)[weekday]:
                continue
            shifts.append(
                ShiftInstance(
                    id=ShiftInstance.make_id(type_index, day),
                    date=day,
                    type_index=type_index,
                    required_staff=shift_type.required_staff,
                )
            )
    return shifts


def lookback_days(
    rules: ScheduleRuleSet,
    previous_rules: Optional[ScheduleRuleSet] = None,
) -> int:
    """Trailing days of the previous month needed to evaluate rest rules."""
    window = max(MIN_LOOKBACK_DAYS, rules.max_min_days_off)
    if previous_rules is not None:
        window = max(window, previous_rules.max_min_days_off)
    return window


def lookback_shifts(
    month: date,
    rules: ScheduleRuleSet,
    history: Optional[ScheduleHistory],
) -> list[ShiftInstance]:
    """Copies of the previous month's shifts within the lookback window.

    Copies keep generation from touching the stored schedule.

    Raises:
        RuleSetError: If a lookback shift references a type index the current
            rule set does not define.
    """
    if history is None:
        return []
    previous = history.previous(month)
    if previous is None:
        return []

    window = lookback_days(rules, previous.rules)
    cutoff = add_days(last_of_month(previous.month), -window)
    carried = [s.copy() for s in previous.shifts if s.date > cutoff]

    out_of_range = sorted(
        {s.type_index for s in carried if rules.shift_type(s.type_index) is None}
    )
    if out_of_range:
        raise RuleSetError(
            [
                f"Lookback shift type index {index} is not defined "
                f"(rule set has {len(rules.shift_types)} shift types)"
                for index in out_of_range
            ]
        )
    return carried


class ScheduleGenerator:
    """Generates complete monthly schedules.

    The generator is a pure function of its inputs: it reads history but
    never stores into it. Persisting the result is the caller's job.

    Example:
        >>> generator = ScheduleGenerator()
        >>> schedule = generator.generate(date(2024, 3, 1), roster, rules, history)
        >>> history.put(schedule)
    """

    def __init__(self, fairness_policy: Optional[FairnessPolicy] = None):
        self.fairness_policy = fairness_policy

    def generate(
        self,
        month: date,
        roster: list[StaffMember],
        rules: ScheduleRuleSet,
        history: Optional[ScheduleHistory] = None,
    ) -> Schedule:
        """Generate the schedule for the month containing ``month``.

        Args:
            month: Any date within the target month.
            roster: Staff available for assignment.
            rules: Rule set to schedule under.
            history: Previously generated months, for cross-month lookback.

        Returns:
            The completed Schedule. Shifts nobody could fill are left short.

        Raises:
            RuleSetError: If the rule set (or a lookback shift) is structurally
                invalid.
        """
        ensure_valid_rule_set(rules)
        month = first_of_month(month)

        shifts = build_month_shifts(month, rules)
        carried = lookback_shifts(month, rules, history)
        all_shifts = carried + shifts

        sorted_roster = sorted(roster, key=lambda s: s.id)
        engine = AssignmentEngine(rules, self.fairness_policy)

        for shift in shifts:
            engine.assign_shift(shift, sorted_roster, all_shifts, month)

        understaffed = sum(1 for s in shifts if s.is_understaffed)
        logger.info(
            "Generated %s: %d shifts, %d staff, %d lookback shifts, %d understaffed",
            month.strftime("%Y-%m"),
            len(shifts),
            len(roster),
            len(carried),
            understaffed,
        )

        return Schedule(month=month, shifts=shifts, rules=rules, staff=list(roster))


def generate(
    month: date,
    roster: list[StaffMember],
    rules: ScheduleRuleSet,
    history: Optional[ScheduleHistory] = None,
) -> Schedule:
    """Generate a monthly schedule with the default fairness policy."""
    return ScheduleGenerator().generate(month, roster, rules, history)
