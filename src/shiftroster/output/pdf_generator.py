"""PDF generation for schedule output.

This module creates printable PDF schedules showing:
- The staff x day calendar grid, colored per shift type
- A legend of shift types and cell markers
- A statistics summary page with per-staff hours and fairness metrics
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from shiftroster.domain.models import Schedule, ScheduleHistory
from shiftroster.output.grid import (
    CELL_COLORS,
    DAY_OFF_MARK,
    UNAVAILABLE_MARK,
    CellKind,
    MonthGrid,
    build_month_grid,
    shift_color,
)
from shiftroster.scheduling.statistics import compute_stats, fairness_metrics


def _load_canvas():
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas, landscape(letter)


class PDFGenerator:
    """Generates printable monthly schedule PDFs.

    The generator creates schedule PDFs that include:
    - The calendar grid, paginated by staff rows
    - Shift abbreviations, unavailability and day-after markers
    - A summary page with statistics

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(schedule, "schedule.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        row_height: float = 16,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.row_height = row_height

    def generate(
        self,
        schedule: Schedule,
        output_path: Union[str, Path],
        history: Optional[ScheduleHistory] = None,
        include_summary: bool = True,
    ) -> None:
        """Generate PDF schedule and save to file.

        Args:
            schedule: The month to render.
            output_path: Path to save the PDF.
            history: Optional history for day-after labels on the 1st.
            include_summary: Whether to include the statistics page.
        """
        canvas, pagesize = _load_canvas()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw(c, schedule, history, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        schedule: Schedule,
        history: Optional[ScheduleHistory] = None,
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer.

        Returns:
            BytesIO buffer containing PDF data.
        """
        canvas, pagesize = _load_canvas()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw(c, schedule, history, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(
        self,
        c,
        schedule: Schedule,
        history: Optional[ScheduleHistory],
        include_summary: bool,
    ) -> None:
        c.setTitle(f"Shift Schedule {schedule.month.strftime('%B %Y')}")
        grid = build_month_grid(schedule, history)
        self._draw_schedule_pages(c, schedule, grid)
        if include_summary:
            self._draw_summary_page(c, schedule)

    def _draw_schedule_pages(self, c, schedule: Schedule, grid: MonthGrid) -> None:
        """Draw the calendar grid, as many staff rows per page as fit."""
        header_height = 60
        footer_height = 50
        day_header_height = 24
        usable_height = (
            self.page_height - 2 * self.margin - header_height - footer_height - day_header_height
        )
        rows_per_page = max(1, int(usable_height / self.row_height))

        name_width = 110
        grid_left = self.margin + name_width
        cell_width = (self.page_width - self.margin - grid_left) / len(grid.days)

        # An empty roster still gets one page with the header
        row_chunks = [
            grid.rows[i : i + rows_per_page] for i in range(0, len(grid.rows), rows_per_page)
        ] or [[]]
        total_pages = len(row_chunks)

        for page_num, rows in enumerate(row_chunks, 1):
            self._draw_header(c, schedule)

            top = self.page_height - self.margin - header_height
            self._draw_day_header(c, grid, grid_left, top, cell_width, day_header_height)

            y = top - day_header_height
            for row in rows:
                y -= self.row_height
                c.setFillColorRGB(0, 0, 0)
                c.setFont("Helvetica", 8)
                c.drawString(self.margin, y + 4, row.staff.name[:22])

                for col, cell in enumerate(row.cells):
                    x = grid_left + col * cell_width
                    c.setFillColorRGB(*cell.color)
                    c.setStrokeColorRGB(0.8, 0.8, 0.8)
                    c.rect(x, y, cell_width, self.row_height, fill=1, stroke=1)

                    if cell.kind == CellKind.SHIFT:
                        c.setFillColorRGB(1, 1, 1)
                    elif cell.kind == CellKind.OFF:
                        c.setFillColorRGB(0.6, 0.6, 0.6)
                    else:
                        c.setFillColorRGB(0.5, 0.1, 0.1)
                    c.setFont("Helvetica-Bold", 7)
                    c.drawCentredString(x + cell_width / 2, y + 5, cell.text)

            self._draw_legend(c, schedule, self.margin, self.margin + 20)

            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica", 9)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_num} of {total_pages}",
            )

            c.showPage()

    def _draw_header(self, c, schedule: Schedule) -> None:
        """Draw page header with month and rule summary."""
        rules = schedule.rules
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Shift Schedule - {schedule.month.strftime('%B %Y')}",
        )

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Staff: {len(schedule.staff)}   "
            f"Target: {rules.target_hours_per_week:g} h/week   "
            f"Shift length: {rules.shift_duration_hours:g} h",
        )

    def _draw_day_header(
        self,
        c,
        grid: MonthGrid,
        x: float,
        y: float,
        cell_width: float,
        height: float,
    ) -> None:
        """Draw weekday initials and day numbers above the grid."""
        c.setFillColorRGB(0, 0, 0)
        for col, d in enumerate(grid.days):
            cx = x + col * cell_width + cell_width / 2
            c.setFont("Helvetica", 6)
            c.drawCentredString(cx, y - 9, d.strftime("%a")[:2])
            c.setFont("Helvetica-Bold", 8)
            c.drawCentredString(cx, y - 19, str(d.day))

    def _draw_legend(self, c, schedule: Schedule, x: float, y: float) -> None:
        """Draw legend for shift types and cell markers."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            (shift_color(index), st.short_label, st.label)
            for index, st in enumerate(schedule.rules.shift_types)
        ]
        items.append((CELL_COLORS["unavailable"], UNAVAILABLE_MARK, "Unavailable"))
        items.append((CELL_COLORS["off"], DAY_OFF_MARK, "Day off"))

        c.setFont("Helvetica", 7)
        current_x = x + 45
        for color, mark, label in items:
            c.setFillColorRGB(*color)
            c.rect(current_x, y - 2, 14, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawCentredString(current_x + 7, y, mark[:3])
            c.drawString(current_x + 17, y, label[:16])
            current_x += 95

    def _draw_summary_page(self, c, schedule: Schedule) -> None:
        """Draw summary page with per-staff statistics."""
        rules = schedule.rules
        stats = compute_stats(schedule.staff, schedule.shifts, rules, schedule.month)
        metrics = fairness_metrics(stats, rules)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Schedule Summary - {schedule.month.strftime('%B %Y')}",
        )

        y = self.page_height - self.margin - 60
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        c.setFont("Helvetica", 10)
        overview = [
            f"Shift Instances: {len(schedule.shifts)}",
            f"Understaffed Shifts: {len(schedule.understaffed_shifts())}",
            f"Avg Hours: {metrics.avg_hours:.1f} ({metrics.avg_hours_per_week:.1f}/week)",
            f"Range: {metrics.min_hours:.1f} - {metrics.max_hours:.1f}",
            f"Fairness Score: {metrics.fairness_score:.1f}/100",
        ]
        for line in overview:
            c.drawString(self.margin + 20, y, line)
            y -= 15

        y -= 15
        columns = [("Name", 0), ("Shifts", 150), ("Hours", 200), ("Avg/Wk", 250), ("Streak", 300)]
        for index, st in enumerate(rules.shift_types):
            columns.append((st.short_label, 360 + index * 40))

        c.setFont("Helvetica-Bold", 9)
        for title, offset in columns:
            c.drawString(self.margin + offset, y, title)
        y -= 14

        c.setFont("Helvetica", 9)
        for s in stats:
            if y < self.margin + 20:
                c.showPage()
                y = self.page_height - self.margin - 20
                c.setFont("Helvetica", 9)
            values = [
                s.staff_name[:26],
                str(s.total_shifts),
                f"{s.total_hours:.0f}",
                f"{s.average_hours_per_week:.1f}",
                str(s.consecutive_shift_streak),
            ]
            values.extend(str(s.shift_counts.get(i, 0)) for i in range(len(rules.shift_types)))
            for (_, offset), value in zip(columns, values):
                c.drawString(self.margin + offset, y, value)
            y -= 13

        c.showPage()
