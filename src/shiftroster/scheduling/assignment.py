"""Greedy assignment of staff to a single shift instance.

This module implements the per-shift step of schedule generation:
1. Measure each staff member's standing (hours so far, shift-type balance)
2. Keep only staff who pass the eligibility checks
3. Rank them by hours deficit, then type deficit, then shift count, then ID
4. Pick the required number, preferring people who have not recently
   worked together

Choices are final: a later shift never revisits an earlier assignment.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from functools import cmp_to_key
from itertools import combinations
from typing import Optional

from shiftroster.domain.calendar import add_days, month_days, weekday_index
from shiftroster.domain.models import (
    ScheduleRuleSet,
    ShiftInstance,
    StaffMember,
)
from shiftroster.domain.policies import DefaultFairnessPolicy, FairnessPolicy
from shiftroster.scheduling.eligibility import EligibilityChecker

logger = logging.getLogger(__name__)

PairKey = tuple[str, str]


@dataclass
class StaffStanding:
    """A staff member's fairness standing at the moment a shift is filled.

    Attributes:
        staff: The staff member.
        total_shifts: Shifts held so far (lookback slice plus this run).
        current_hours: total_shifts x shift duration.
        hours_deficit: Prorated monthly target minus current hours.
        type_counts: Shifts held so far per type index.
        type_deficit: How far below its ideal share the candidate type is.
    """

    staff: StaffMember
    total_shifts: int = 0
    current_hours: float = 0.0
    hours_deficit: float = 0.0
    type_counts: Counter = field(default_factory=Counter)
    type_deficit: float = 0.0


def target_hours_for_month(rules: ScheduleRuleSet, month: date) -> float:
    """Prorated monthly target: weekly target x (active days in month / 7)."""
    active_days = sum(
        1 for d in month_days(month) if rules.active_days_of_week[weekday_index(d)]
    )
    return rules.target_hours_per_week * (active_days / 7)


def pair_key(a: str, b: str) -> PairKey:
    return (a, b) if a <= b else (b, a)


def build_pair_counts(shifts: list[ShiftInstance]) -> Counter:
    """Count how often each unordered pair of staff shared a shift."""
    counts: Counter = Counter()
    for shift in shifts:
        for a, b in combinations(shift.assigned_staff, 2):
            counts[pair_key(a, b)] += 1
    return counts


def recent_shifts(
    all_shifts: list[ShiftInstance],
    before: date,
    days: int,
) -> list[ShiftInstance]:
    """Shifts dated within ``days`` days before ``before`` (exclusive of it)."""
    cutoff = add_days(before, -days)
    return [s for s in all_shifts if cutoff <= s.date < before]


def select_with_variety(
    ranked: list[StaffMember],
    required: int,
    pair_counts: Counter,
) -> list[StaffMember]:
    """Pick ``required`` staff, avoiding pairs who recently worked together.

    The top-ranked candidate is always taken first. Each further slot goes
    to the remaining candidate with the lowest summed pair count against
    those already chosen; ties keep ranking order.
    """
    if required <= 0:
        return []
    if len(ranked) <= required:
        return list(ranked)

    remaining = list(ranked)
    selected = [remaining.pop(0)]

    while len(selected) < required and remaining:
        best_index = 0
        lowest_score = None
        for index, candidate in enumerate(remaining):
            score = sum(
                pair_counts.get(pair_key(candidate.id, chosen.id), 0)
                for chosen in selected
            )
            if lowest_score is None or score < lowest_score:
                lowest_score = score
                best_index = index
        selected.append(remaining.pop(best_index))

    return selected


class AssignmentEngine:
    """Fills shift instances one at a time using fairness heuristics.

    Example:
        >>> engine = AssignmentEngine(rules)
        >>> for shift in shifts:
        ...     engine.assign_shift(shift, roster, all_shifts, month)
    """

    def __init__(
        self,
        rules: ScheduleRuleSet,
        fairness_policy: Optional[FairnessPolicy] = None,
    ):
        self.rules = rules
        self.fairness_policy = fairness_policy or DefaultFairnessPolicy()
        self.checker = EligibilityChecker(rules)

    def assign_shift(
        self,
        shift: ShiftInstance,
        roster: list[StaffMember],
        all_shifts: list[ShiftInstance],
        target_month: date,
    ) -> list[str]:
        """Choose staff for ``shift`` and record them on it.

        Args:
            shift: The shift instance to fill; its assigned_staff is replaced.
            roster: Candidate staff, in a stable order.
            all_shifts: Cumulative shifts (lookback plus this month) that later
                calls will see. ``shift`` is appended if not already present.
            target_month: Month being generated, for the prorated hours target.

        Returns:
            IDs of the staff assigned, possibly fewer than required.
        """
        monthly_target = target_hours_for_month(self.rules, target_month)

        standings = [
            self.standing_for(staff, shift, all_shifts, monthly_target)
            for staff in roster
        ]
        eligible = [
            standing
            for standing in standings
            if self.checker.check(standing.staff, shift, all_shifts).eligible
        ]
        ranked = self.rank(eligible)

        window = self.fairness_policy.variety_lookback_days()
        pair_counts = build_pair_counts(recent_shifts(all_shifts, shift.date, window))
        chosen = select_with_variety(
            [standing.staff for standing in ranked],
            shift.required_staff,
            pair_counts,
        )

        shift.assigned_staff = [staff.id for staff in chosen]
        if not any(existing is shift for existing in all_shifts):
            all_shifts.append(shift)

        if shift.is_understaffed:
            logger.debug(
                "Shift %s filled %d of %d (%d eligible)",
                shift.id,
                len(shift.assigned_staff),
                shift.required_staff,
                len(eligible),
            )
        return list(shift.assigned_staff)

    def standing_for(
        self,
        staff: StaffMember,
        shift: ShiftInstance,
        all_shifts: list[ShiftInstance],
        monthly_target: float,
    ) -> StaffStanding:
        """Measure a staff member's hours and shift-type balance so far."""
        type_counts: Counter = Counter(
            s.type_index for s in all_shifts if s.is_assigned(staff.id)
        )
        total_shifts = sum(type_counts.values())
        current_hours = total_shifts * self.rules.shift_duration_hours

        if total_shifts > 0:
            ideal_ratio = (
                self.rules.shift_types[shift.type_index].required_staff
                / self.rules.total_required_staff
                if self.rules.total_required_staff
                else 0.0
            )
            current_ratio = type_counts[shift.type_index] / total_shifts
            type_deficit = (ideal_ratio - current_ratio) * 100
        else:
            type_deficit = self.fairness_policy.new_staff_type_bonus()

        return StaffStanding(
            staff=staff,
            total_shifts=total_shifts,
            current_hours=current_hours,
            hours_deficit=monthly_target - current_hours,
            type_counts=type_counts,
            type_deficit=type_deficit,
        )

    def rank(self, standings: list[StaffStanding]) -> list[StaffStanding]:
        """Order candidates by priority, most deserving first.

        Hours deficit and type deficit only decide the order when the gap
        exceeds the policy thresholds; smaller gaps fall through to the next
        criterion.
        """
        hours_gap = self.fairness_policy.hours_gap_threshold()
        type_gap = self.fairness_policy.type_gap_threshold()

        def compare(a: StaffStanding, b: StaffStanding) -> int:
            hours_diff = b.hours_deficit - a.hours_deficit
            if abs(hours_diff) > hours_gap:
                return 1 if hours_diff > 0 else -1

            type_diff = b.type_deficit - a.type_deficit
            if abs(type_diff) > type_gap:
                return 1 if type_diff > 0 else -1

            if a.total_shifts != b.total_shifts:
                return a.total_shifts - b.total_shifts

            if a.staff.id != b.staff.id:
                return -1 if a.staff.id < b.staff.id else 1
            return 0

        return sorted(standings, key=cmp_to_key(compare))


def assign_shift(
    shift: ShiftInstance,
    roster: list[StaffMember],
    all_shifts: list[ShiftInstance],
    rules: ScheduleRuleSet,
    target_month: date,
) -> list[str]:
    """Fill one shift instance using the default fairness policy."""
    return AssignmentEngine(rules).assign_shift(shift, roster, all_shifts, target_month)
