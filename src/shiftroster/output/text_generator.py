"""Plain-text output for monthly schedules.

This module renders a schedule as text:
- A legend of shift types
- The staff x day calendar grid
- Per-staff statistics and the fairness summary
- Understaffed shifts
"""

from pathlib import Path
from typing import Optional, Union

from shiftroster.domain.models import Schedule, ScheduleHistory
from shiftroster.output.grid import DAY_OFF_MARK, UNAVAILABLE_MARK, build_month_grid
from shiftroster.scheduling.statistics import compute_stats, fairness_metrics

NAME_WIDTH = 20


class TextGenerator:
    """Generates a plain-text calendar and statistics report.

    Example:
        >>> generator = TextGenerator()
        >>> print(generator.generate_to_string(schedule))
    """

    def __init__(self, cell_width: int = 4):
        self.cell_width = cell_width

    def generate(
        self,
        schedule: Schedule,
        output_path: Union[str, Path],
        history: Optional[ScheduleHistory] = None,
    ) -> str:
        """Generate the report and save to file.

        Args:
            schedule: The month to render.
            output_path: Path to save the text file.
            history: Optional history for day-after labels on the 1st.

        Returns:
            The generated text content.
        """
        content = self._generate_content(schedule, history)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        schedule: Schedule,
        history: Optional[ScheduleHistory] = None,
    ) -> str:
        """Generate the report and return as string."""
        return self._generate_content(schedule, history)

    def _generate_content(
        self,
        schedule: Schedule,
        history: Optional[ScheduleHistory],
    ) -> str:
        rules = schedule.rules
        lines = []

        # Header
        lines.append("=" * 80)
        lines.append(f"SHIFT SCHEDULE - {schedule.month.strftime('%B %Y')}")
        lines.append("=" * 80)
        lines.append("")
        lines.append(f"Staff: {len(schedule.staff)}")
        lines.append(f"Shift Instances: {len(schedule.shifts)}")
        lines.append(
            f"Target: {rules.target_hours_per_week:g} h/week, "
            f"{rules.shift_duration_hours:g} h per shift"
        )
        lines.append("")

        # Legend
        lines.append("Legend:")
        for index, shift_type in enumerate(rules.shift_types):
            entry = (
                f"  {shift_type.short_label:<4} {shift_type.label} "
                f"({shift_type.start_time.strftime('%H:%M')}-"
                f"{shift_type.end_time.strftime('%H:%M')}, needs {shift_type.required_staff})"
            )
            if shift_type.day_after_label:
                entry += f", next day: {shift_type.day_after_label}"
            lines.append(entry)
        lines.append(f"  {UNAVAILABLE_MARK:<4} Unavailable")
        lines.append(f"  {DAY_OFF_MARK:<4} Day off")
        lines.append("")

        lines.extend(self._grid_lines(schedule, history))
        lines.append("")
        lines.extend(self._stats_lines(schedule))
        lines.append("")
        lines.extend(self._understaffed_lines(schedule))

        return "\n".join(lines) + "\n"

    def _grid_lines(
        self,
        schedule: Schedule,
        history: Optional[ScheduleHistory],
    ) -> list[str]:
        grid = build_month_grid(schedule, history)
        w = self.cell_width

        lines = ["-" * 80, "CALENDAR", "-" * 80]
        lines.append(" " * NAME_WIDTH + "".join(f"{d.strftime('%a')[:2]:>{w}}" for d in grid.days))
        lines.append(" " * NAME_WIDTH + "".join(f"{d.day:>{w}}" for d in grid.days))
        for row in grid.rows:
            name = row.staff.name[: NAME_WIDTH - 1]
            cells = "".join(f"{cell.text[:w - 1]:>{w}}" for cell in row.cells)
            lines.append(f"{name:<{NAME_WIDTH}}{cells}")
        return lines

    def _stats_lines(self, schedule: Schedule) -> list[str]:
        rules = schedule.rules
        stats = compute_stats(schedule.staff, schedule.shifts, rules, schedule.month)
        type_headers = "".join(f"{st.short_label:>5}" for st in rules.shift_types)

        lines = ["-" * 80, "STATISTICS", "-" * 80]
        lines.append(
            f"{'Name':<{NAME_WIDTH}}{'Shifts':>7}{type_headers}"
            f"{'Hours':>8}{'Avg/Wk':>8}{'Streak':>8}"
        )
        for s in stats:
            counts = "".join(
                f"{s.shift_counts.get(i, 0):>5}" for i in range(len(rules.shift_types))
            )
            lines.append(
                f"{s.staff_name[:NAME_WIDTH - 1]:<{NAME_WIDTH}}{s.total_shifts:>7}{counts}"
                f"{s.total_hours:>8.1f}{s.average_hours_per_week:>8.1f}"
                f"{s.consecutive_shift_streak:>8}"
            )

        metrics = fairness_metrics(stats, rules)
        lines.append("")
        lines.append("Fairness Metrics:")
        lines.append(f"  Avg Hours: {metrics.avg_hours:.1f}")
        lines.append(f"  Avg Hours/Week: {metrics.avg_hours_per_week:.1f}")
        lines.append(f"  Std Dev: {metrics.hours_std_dev:.1f}")
        lines.append(f"  Range: {metrics.min_hours:.1f} - {metrics.max_hours:.1f}")
        lines.append(f"  Fairness Score: {metrics.fairness_score:.1f}/100")
        return lines

    def _understaffed_lines(self, schedule: Schedule) -> list[str]:
        understaffed = schedule.understaffed_shifts()
        lines = ["-" * 80, f"UNDERSTAFFED SHIFTS ({len(understaffed)})", "-" * 80]
        for shift in understaffed:
            label = schedule.rules.shift_types[shift.type_index].label
            lines.append(
                f"  {shift.date.isoformat()} {label}: "
                f"{len(shift.assigned_staff)}/{shift.required_staff}"
            )
        if not understaffed:
            lines.append("  None")
        return lines
