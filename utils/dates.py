"""
utils/dates.py — Date helpers for recurring maintenance tasks.
"""

import calendar
from datetime import date, timedelta

from errors import ValidationError

RECURRENCE_DAYS = {
    'daily': 1,
    'weekly': 7,
    'biweekly': 14,
}

RECURRENCES = ('daily', 'weekly', 'biweekly', 'monthly', 'yearly')


def _add_months(d: date, months: int) -> date:
    """Shift *d* by whole months, clamping the day to the target month's length."""
    index = d.month - 1 + months
    year = d.year + index // 12
    month = index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_due_date(due_date: date, recurring: str) -> date:
    """
    Compute the next occurrence of a recurring task.

    Examples:
        >>> next_due_date(date(2026, 1, 31), 'monthly')
        datetime.date(2026, 2, 28)
        >>> next_due_date(date(2024, 2, 29), 'yearly')
        datetime.date(2025, 2, 28)
    """
    if recurring in RECURRENCE_DAYS:
        return due_date + timedelta(days=RECURRENCE_DAYS[recurring])
    if recurring == 'monthly':
        return _add_months(due_date, 1)
    if recurring == 'yearly':
        return _add_months(due_date, 12)
    raise ValueError(f"Unsupported recurrence: {recurring}")


def parse_iso_date(value, field='date'):
    """Parse 'YYYY-MM-DD' into a date; None and '' pass through as None."""
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f"{field} must be formatted YYYY-MM-DD")
