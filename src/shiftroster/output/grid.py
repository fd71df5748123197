"""Staff x day calendar grid shared by the text and PDF renderers.

The grid only decides what each cell shows; it performs no scheduling
logic. A cell is, in priority order:

- ``X`` when the staff member is unavailable that day,
- the short labels of the shifts worked, comma-joined in type order,
- the ``day_after_label`` of a shift worked the previous day,
- ``-`` for a day off.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from shiftroster.domain.calendar import add_days, month_days
from shiftroster.domain.models import Schedule, ScheduleHistory, ShiftInstance, StaffMember

UNAVAILABLE_MARK = "X"
DAY_OFF_MARK = "-"

# Fill colors per shift type index (RGB tuples, 0-1 scale); cycles for larger rule sets
SHIFT_COLORS = [
    (0.23, 0.51, 0.96),  # Blue
    (0.55, 0.36, 0.96),  # Purple
    (0.06, 0.73, 0.51),  # Green
    (0.96, 0.62, 0.04),  # Amber
    (0.93, 0.28, 0.60),  # Pink
    (0.02, 0.71, 0.83),  # Cyan
]

CELL_COLORS = {
    "unavailable": (0.99, 0.89, 0.89),  # Light red
    "double": (0.99, 0.79, 0.79),  # Red
    "day_after": (0.98, 0.98, 0.98),
    "off": (0.95, 0.95, 0.95),  # Light gray
}


def shift_color(type_index: int) -> tuple[float, float, float]:
    return SHIFT_COLORS[type_index % len(SHIFT_COLORS)]


class CellKind(Enum):
    SHIFT = "shift"
    DOUBLE = "double"
    UNAVAILABLE = "unavailable"
    DAY_AFTER = "day_after"
    OFF = "off"


@dataclass
class GridCell:
    """What one staff member's calendar cell shows on one day."""

    text: str
    kind: CellKind
    type_indices: list[int] = field(default_factory=list)

    @property
    def color(self) -> tuple[float, float, float]:
        if self.kind == CellKind.SHIFT:
            return shift_color(self.type_indices[0])
        return CELL_COLORS[self.kind.value]


@dataclass
class GridRow:
    staff: StaffMember
    cells: list[GridCell]


@dataclass
class MonthGrid:
    """Calendar grid for one month: one row per staff member, one column per day."""

    month: date
    days: list[date]
    rows: list[GridRow]

    def cell(self, staff_id: str, d: date) -> GridCell:
        """Look up a single cell by staff ID and date."""
        for row in self.rows:
            if row.staff.id == staff_id:
                return row.cells[self.days.index(d)]
        raise KeyError(staff_id)


def build_month_grid(
    schedule: Schedule,
    history: Optional[ScheduleHistory] = None,
) -> MonthGrid:
    """Build the calendar grid for a schedule.

    Args:
        schedule: The month to render.
        history: Optional history; the previous month's last day supplies
            the day-after label for the 1st.

    Returns:
        MonthGrid with rows in roster order.
    """
    rules = schedule.rules
    days = month_days(schedule.month)

    shifts: list[ShiftInstance] = list(schedule.shifts)
    if history is not None:
        prior = history.previous(schedule.month)
        if prior is not None:
            eve = add_days(days[0], -1)
            shifts = [s for s in prior.shifts if s.date == eve] + shifts

    # staff_id -> date -> type indices worked
    worked: dict[str, dict[date, list[int]]] = {}
    for shift in shifts:
        if rules.shift_type(shift.type_index) is None:
            continue
        for staff_id in shift.assigned_staff:
            worked.setdefault(staff_id, {}).setdefault(shift.date, []).append(shift.type_index)

    rows = []
    for staff in schedule.staff:
        by_date = worked.get(staff.id, {})
        cells = []
        for d in days:
            cells.append(_cell_for(staff, d, by_date, schedule))
        rows.append(GridRow(staff=staff, cells=cells))

    return MonthGrid(month=schedule.month, days=days, rows=rows)


def _cell_for(
    staff: StaffMember,
    d: date,
    by_date: dict[date, list[int]],
    schedule: Schedule,
) -> GridCell:
    rules = schedule.rules
    if staff.is_unavailable_on(d):
        return GridCell(UNAVAILABLE_MARK, CellKind.UNAVAILABLE)

    today = sorted(by_date.get(d, []))
    if today:
        text = ",".join(rules.shift_types[i].short_label for i in today)
        kind = CellKind.SHIFT if len(today) == 1 else CellKind.DOUBLE
        return GridCell(text, kind, today)

    for type_index in sorted(by_date.get(add_days(d, -1), [])):
        label = rules.shift_types[type_index].day_after_label
        if label:
            return GridCell(label, CellKind.DAY_AFTER, [type_index])

    return GridCell(DAY_OFF_MARK, CellKind.OFF)
