"""Main scheduler interface.

This module provides the high-level MonthlyScheduler class that owns the
schedule history and coordinates generation, month navigation, and
invalidation when the rules change.
"""

import logging
from datetime import date
from typing import Optional

from shiftroster.domain.calendar import first_of_month, month_key, next_month
from shiftroster.domain.models import (
    FairnessMetrics,
    Schedule,
    ScheduleHistory,
    ScheduleRuleSet,
    StaffMember,
    StaffStats,
)
from shiftroster.scheduling.generator import ScheduleGenerator
from shiftroster.scheduling.statistics import compute_stats, fairness_metrics

logger = logging.getLogger(__name__)


class MonthlyScheduler:
    """High-level scheduler for generating and keeping monthly schedules.

    The scheduler is the single owner of the history store. Regenerating a
    month replaces its history entry whole; changing the rules discards all
    history, since schedules made under the old rules may break the new ones.

    Not thread-safe: generation mutates shift assignments in place.

    Example:
        >>> scheduler = MonthlyScheduler(roster, default_rules())
        >>> march = scheduler.schedule_for(date(2024, 3, 1))
        >>> april = scheduler.regenerate(date(2024, 4, 1))  # sees March's tail
    """

    def __init__(
        self,
        roster: list[StaffMember],
        rules: ScheduleRuleSet,
        history: Optional[ScheduleHistory] = None,
        generator: Optional[ScheduleGenerator] = None,
    ):
        """Initialize scheduler.

        Args:
            roster: Staff available for assignment.
            rules: Rule set to schedule under.
            history: Existing history to continue from (default: empty).
            generator: Schedule generator (default: default fairness policy).
        """
        self.roster = list(roster)
        self.rules = rules
        self.history = history if history is not None else ScheduleHistory()
        self.generator = generator or ScheduleGenerator()

    def regenerate(self, month: date) -> Schedule:
        """Generate ``month`` from scratch and replace its history entry."""
        month = first_of_month(month)
        schedule = self.generator.generate(month, self.roster, self.rules, self.history)
        self.history.put(schedule)
        logger.info("Stored schedule %s in history", month_key(month))
        return schedule

    def schedule_for(self, month: date) -> Schedule:
        """Return the stored schedule for ``month``, generating it if missing."""
        existing = self.history.get(first_of_month(month))
        if existing is not None:
            return existing
        return self.regenerate(month)

    def generate_range(self, start_month: date, months: int) -> list[Schedule]:
        """Regenerate ``months`` consecutive months starting at ``start_month``.

        Each month is stored before the next is generated, so rest rules
        carry across every boundary in the range.
        """
        schedules = []
        month = first_of_month(start_month)
        for _ in range(months):
            schedules.append(self.regenerate(month))
            month = next_month(month)
        return schedules

    def update_rules(self, rules: ScheduleRuleSet, month: date) -> Schedule:
        """Switch to a new rule set, discard all history, and regenerate ``month``."""
        dropped = len(self.history)
        self.rules = rules
        self.history.clear()
        logger.info("Rules changed; discarded %d stored schedule(s)", dropped)
        return self.regenerate(month)

    def update_roster(self, roster: list[StaffMember]) -> None:
        """Replace the roster. Stored schedules stay until regenerated."""
        self.roster = list(roster)

    def stats_for(self, month: date) -> list[StaffStats]:
        """Per-staff statistics for ``month`` (generated if missing)."""
        schedule = self.schedule_for(month)
        return compute_stats(schedule.staff, schedule.shifts, schedule.rules, schedule.month)

    def fairness_for(self, month: date) -> FairnessMetrics:
        """Population-wide hour spread for ``month``."""
        schedule = self.schedule_for(month)
        return fairness_metrics(self.stats_for(month), schedule.rules)
