"""Domain models for the scheduling system.

This module contains all core data structures used throughout the scheduling
system: shift type definitions, rule sets, staff, shift instances, monthly
schedules, the schedule history store, and statistics outputs.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

from shiftroster.domain.calendar import first_of_month, month_key, previous_month

ALL_DAYS_ACTIVE = [True] * 7


@dataclass
class ShiftTypeDefinition:
    """A recurring category of work period, referenced by its index in a rule set.

    Attributes:
        label: Display label (e.g., "Night Shift").
        start_time: Time of day the shift starts.
        end_time: Time of day the shift ends (may be before start for overnight).
        required_staff: Number of staff each instance needs.
        abbreviation: Optional short label used in calendar cells.
        day_after_label: Optional marker shown on the day after working this shift.
        active_days_of_week: Optional Sunday-first mask overriding the global one.
            None means "inherit"; an all-False list means "never".
        min_days_off: Rest days mandatory immediately after working this type.
        max_consecutive: Max consecutive days of this type (0 = never two in a row).
        allow_same_day_with: Type indices that may be worked the same day.
    """

    label: str
    start_time: time
    end_time: time
    required_staff: int
    abbreviation: Optional[str] = None
    day_after_label: Optional[str] = None
    active_days_of_week: Optional[list[bool]] = None
    min_days_off: int = 0
    max_consecutive: int = 0
    allow_same_day_with: set[int] = field(default_factory=set)

    @property
    def short_label(self) -> str:
        """Abbreviation if set, otherwise the upper-cased first letter of the label."""
        if self.abbreviation:
            return self.abbreviation
        return self.label[:1].upper()

    def allows_same_day(self, other_index: int) -> bool:
        return other_index in self.allow_same_day_with


@dataclass
class ScheduleRuleSet:
    """Rules governing which shifts exist and how staff may be assigned.

    Attributes:
        shift_types: Ordered shift type definitions (position = type index).
        active_days_of_week: Global Sunday-first weekday mask.
        target_hours_per_week: Hours each staff member should work per week.
        shift_duration_hours: Hours credited per shift, uniform across types.
    """

    shift_types: list[ShiftTypeDefinition]
    active_days_of_week: list[bool] = field(
        default_factory=lambda: list(ALL_DAYS_ACTIVE)
    )
    target_hours_per_week: float = 36
    shift_duration_hours: float = 12

    def active_days_for(self, type_index: int) -> list[bool]:
        """Resolve the weekday mask for a shift type (override or global)."""
        override = self.shift_types[type_index].active_days_of_week
        if override is not None:
            return override
        return self.active_days_of_week

    def shift_type(self, type_index: int) -> Optional[ShiftTypeDefinition]:
        """Look up a shift type, returning None for an out-of-range index."""
        if 0 <= type_index < len(self.shift_types):
            return self.shift_types[type_index]
        return None

    @property
    def total_required_staff(self) -> int:
        return sum(st.required_staff for st in self.shift_types)

    @property
    def max_min_days_off(self) -> int:
        return max((st.min_days_off for st in self.shift_types), default=0)


@dataclass(frozen=True)
class UnavailabilityConstraint:
    """An absolute date on which a staff member cannot work."""

    date: date
    reason: Optional[str] = None


@dataclass
class StaffMember:
    """Someone who can be assigned to shifts.

    Attributes:
        id: Stable, unique identifier (opaque comparable key).
        name: Display name.
        email: Optional contact address.
        constraints: Date-stamped unavailability constraints.
    """

    id: str
    name: str
    email: Optional[str] = None
    constraints: list[UnavailabilityConstraint] = field(default_factory=list)

    def is_unavailable_on(self, d: date) -> bool:
        return any(c.date == d for c in self.constraints)


@dataclass
class ShiftInstance:
    """One concrete occurrence of a shift type on a calendar date.

    Attributes:
        id: Identifier derived from type index and date.
        date: Calendar date of the shift.
        type_index: Index of the ShiftTypeDefinition in the rule set.
        required_staff: Staff needed, copied from the definition at generation.
        assigned_staff: Assigned staff IDs (unique; order not meaningful).
    """

    id: str
    date: date
    type_index: int
    required_staff: int
    assigned_staff: list[str] = field(default_factory=list)

    @staticmethod
    def make_id(type_index: int, shift_date: date) -> str:
        return f"shift-{type_index}-{shift_date.isoformat()}"

    def is_assigned(self, staff_id: str) -> bool:
        return staff_id in self.assigned_staff

    @property
    def is_understaffed(self) -> bool:
        return len(self.assigned_staff) < self.required_staff

    def copy(self) -> "ShiftInstance":
        """Copy with an independent assignment list."""
        return ShiftInstance(
            id=self.id,
            date=self.date,
            type_index=self.type_index,
            required_staff=self.required_staff,
            assigned_staff=list(self.assigned_staff),
        )


@dataclass
class Schedule:
    """Complete schedule for one calendar month.

    Attributes:
        month: First day of the scheduled month.
        shifts: Every shift instance of the month, in date then type order.
        rules: The rule set the schedule was generated with.
        staff: The roster used for generation.
    """

    month: date
    shifts: list[ShiftInstance]
    rules: ScheduleRuleSet
    staff: list[StaffMember]

    @property
    def month_key(self) -> str:
        return month_key(self.month)

    def shifts_on(self, d: date) -> list[ShiftInstance]:
        return [s for s in self.shifts if s.date == d]

    def shifts_for(self, staff_id: str) -> list[ShiftInstance]:
        return [s for s in self.shifts if s.is_assigned(staff_id)]

    def understaffed_shifts(self) -> list[ShiftInstance]:
        return [s for s in self.shifts if s.is_understaffed]

    def assignment_table(self) -> dict[str, list[str]]:
        """Map shift ID to its assigned staff, for comparisons and export."""
        return {s.id: list(s.assigned_staff) for s in self.shifts}


class ScheduleHistory:
    """Store of generated schedules keyed by month.

    Used only to supply lookback shifts across a month boundary. Entries are
    replaced whole; the store is cleared when the rule set changes.
    """

    def __init__(self, schedules: Optional[list[Schedule]] = None):
        self._schedules: dict[str, Schedule] = {}
        for schedule in schedules or []:
            self.put(schedule)

    def get(self, month: date) -> Optional[Schedule]:
        return self._schedules.get(month_key(month))

    def put(self, schedule: Schedule) -> None:
        """Store a schedule, replacing any existing entry for its month."""
        self._schedules[schedule.month_key] = schedule

    def previous(self, month: date) -> Optional[Schedule]:
        """Schedule for the month before ``month``, if stored."""
        return self.get(previous_month(month))

    def clear(self) -> None:
        self._schedules.clear()

    def keys(self) -> list[str]:
        return list(self._schedules)

    def __contains__(self, month: date) -> bool:
        return month_key(first_of_month(month)) in self._schedules

    def __len__(self) -> int:
        return len(self._schedules)


@dataclass
class EligibilityResult:
    """Outcome of checking whether a staff member may take a shift."""

    eligible: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "EligibilityResult":
        return cls(eligible=True)

    @classmethod
    def rejected(cls, reason: str) -> "EligibilityResult":
        return cls(eligible=False, reason=reason)

    def __bool__(self) -> bool:
        return self.eligible


@dataclass
class StaffStats:
    """Per-staff aggregates derived from a completed schedule.

    Attributes:
        staff_id: ID of the staff member.
        staff_name: Display name.
        total_shifts: Number of shift instances worked.
        shift_counts: Shifts worked per type index.
        day_shifts: Count of type 0 shifts.
        night_shifts: Count of type 1 shifts.
        total_hours: total_shifts x shift duration.
        average_hours_per_week: total_hours spread over the weeks of the month.
        consecutive_shift_streak: Longest run of consecutive days worked.
        days_worked: Distinct dates worked.
    """

    staff_id: str
    staff_name: str
    total_shifts: int = 0
    shift_counts: dict[int, int] = field(default_factory=dict)
    day_shifts: int = 0
    night_shifts: int = 0
    total_hours: float = 0.0
    average_hours_per_week: float = 0.0
    consecutive_shift_streak: int = 0
    days_worked: int = 0


@dataclass
class FairnessMetrics:
    """Metrics for evaluating how evenly hours are spread across staff.

    Attributes:
        hours_per_staff: Dict mapping staff ID to total hours.
        avg_hours: Average hours across all staff.
        avg_hours_per_week: Average weekly hours across all staff.
        hours_std_dev: Standard deviation of hours.
        min_hours: Minimum hours assigned to any staff member.
        max_hours: Maximum hours assigned to any staff member.
        fairness_score: Overall fairness score (0-100, higher is fairer).
    """

    hours_per_staff: dict[str, float] = field(default_factory=dict)
    avg_hours: float = 0.0
    avg_hours_per_week: float = 0.0
    hours_std_dev: float = 0.0
    min_hours: float = 0.0
    max_hours: float = 0.0
    fairness_score: float = 100.0

    @classmethod
    def calculate(
        cls,
        hours: dict[str, float],
        weekly_hours: dict[str, float],
        shift_duration_hours: float,
    ) -> "FairnessMetrics":
        """Calculate fairness metrics from per-staff hour totals.

        The score drops linearly with the standard deviation and reaches 0
        once the spread is two shifts wide.
        """
        if not hours:
            return cls()

        values = list(hours.values())
        avg = sum(values) / len(values)
        variance = sum((h - avg) ** 2 for h in values) / len(values)
        std_dev = variance ** 0.5

        max_acceptable = 2 * shift_duration_hours
        score = max(0.0, 100.0 - (std_dev / max_acceptable) * 100.0)

        weekly = list(weekly_hours.values())
        return cls(
            hours_per_staff=dict(hours),
            avg_hours=avg,
            avg_hours_per_week=sum(weekly) / len(weekly) if weekly else 0.0,
            hours_std_dev=std_dev,
            min_hours=min(values),
            max_hours=max(values),
            fairness_score=score,
        )
