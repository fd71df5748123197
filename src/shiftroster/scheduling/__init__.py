"""Scheduling engine for generating monthly staff schedules."""

from shiftroster.scheduling.assignment import (
    AssignmentEngine,
    StaffStanding,
    assign_shift,
    select_with_variety,
)
from shiftroster.scheduling.eligibility import (
    EligibilityChecker,
    can_assign,
    hours_worked,
)
from shiftroster.scheduling.generator import ScheduleGenerator, generate
from shiftroster.scheduling.scheduler import MonthlyScheduler
from shiftroster.scheduling.statistics import (
    compute_staff_stats,
    compute_stats,
    fairness_metrics,
)

__all__ = [
    # Entry points
    "generate",
    "can_assign",
    "compute_stats",
    # Core components
    "AssignmentEngine",
    "EligibilityChecker",
    "ScheduleGenerator",
    "StaffStanding",
    "assign_shift",
    "hours_worked",
    "select_with_variety",
    # History owner
    "MonthlyScheduler",
    # Statistics
    "compute_staff_stats",
    "fairness_metrics",
]
