"""Date helpers for month-based scheduling.

Weekday masks throughout the system are Sunday-first (index 0 = Sunday,
6 = Saturday), while Python's ``date.weekday()`` is Monday-first. Always go
through :func:`weekday_index` when indexing a mask.
"""

import calendar
from datetime import date, timedelta


def first_of_month(d: date) -> date:
    """Normalize any date to the first day of its month."""
    return d.replace(day=1)


def days_in_month(month: date) -> int:
    """Number of calendar days in the month containing ``month``."""
    return calendar.monthrange(month.year, month.month)[1]


def last_of_month(month: date) -> date:
    """Last calendar day of the month containing ``month``."""
    return month.replace(day=days_in_month(month))


def month_days(month: date) -> list[date]:
    """Every calendar day of the month containing ``month``, in order."""
    start = first_of_month(month)
    return [start + timedelta(days=i) for i in range(days_in_month(month))]


def add_days(d: date, amount: int) -> date:
    """Offset a date by a (possibly negative) number of days."""
    return d + timedelta(days=amount)


def days_between(earlier: date, later: date) -> int:
    """Signed number of days from ``earlier`` to ``later``."""
    return (later - earlier).days


def weekday_index(d: date) -> int:
    """Sunday-first weekday index (0 = Sunday ... 6 = Saturday)."""
    return (d.weekday() + 1) % 7


def weeks_in_month(month: date) -> int:
    """Number of (possibly partial) weeks spanned by the month.

    A 28-day February spans 4 weeks; every other month spans 5.
    """
    return (days_in_month(month) - 1) // 7 + 1


def previous_month(month: date) -> date:
    """First day of the month before ``month``."""
    start = first_of_month(month)
    return first_of_month(start - timedelta(days=1))


def next_month(month: date) -> date:
    """First day of the month after ``month``."""
    return add_days(last_of_month(month), 1)


def month_key(month: date) -> str:
    """History key for a month: ``"<year>-<zeroBasedMonth>"``.

    Example:
        >>> month_key(date(2024, 1, 15))
        '2024-0'
    """
    return f"{month.year}-{month.month - 1}"
