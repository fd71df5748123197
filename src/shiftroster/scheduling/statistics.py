"""Per-staff statistics for a completed schedule.

Statistics are read-only: they are derived from a schedule for display
and export, and never feed back into generation.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import date

from shiftroster.domain.calendar import weeks_in_month
from shiftroster.domain.models import (
    FairnessMetrics,
    ScheduleRuleSet,
    ShiftInstance,
    StaffMember,
    StaffStats,
)


def longest_daily_streak(dates: Iterable[date]) -> int:
    """Longest run of consecutive calendar days among ``dates``."""
    ordered = sorted(set(dates))
    if not ordered:
        return 0

    longest = current = 1
    for previous, d in zip(ordered, ordered[1:]):
        if (d - previous).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def compute_staff_stats(
    staff: StaffMember,
    shifts: list[ShiftInstance],
    rules: ScheduleRuleSet,
    month: date,
) -> StaffStats:
    """Aggregate one staff member's shifts for the month."""
    own = [s for s in shifts if s.is_assigned(staff.id)]
    counts = Counter(s.type_index for s in own)
    total_hours = len(own) * rules.shift_duration_hours
    worked_dates = {s.date for s in own}

    return StaffStats(
        staff_id=staff.id,
        staff_name=staff.name,
        total_shifts=len(own),
        shift_counts=dict(sorted(counts.items())),
        day_shifts=counts.get(0, 0),
        night_shifts=counts.get(1, 0),
        total_hours=total_hours,
        average_hours_per_week=total_hours / weeks_in_month(month),
        consecutive_shift_streak=longest_daily_streak(worked_dates),
        days_worked=len(worked_dates),
    )


def compute_stats(
    roster: list[StaffMember],
    shifts: list[ShiftInstance],
    rules: ScheduleRuleSet,
    month: date,
) -> list[StaffStats]:
    """Statistics for every roster member, in roster order."""
    return [compute_staff_stats(staff, shifts, rules, month) for staff in roster]


def fairness_metrics(stats: list[StaffStats], rules: ScheduleRuleSet) -> FairnessMetrics:
    """Population-wide spread of hours across the roster."""
    return FairnessMetrics.calculate(
        {s.staff_id: s.total_hours for s in stats},
        {s.staff_id: s.average_hours_per_week for s in stats},
        rules.shift_duration_hours,
    )
