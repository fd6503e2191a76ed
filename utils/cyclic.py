"""
utils/cyclic.py — Month-wheel interval arithmetic.

A planting window is a closed range on the 12-month wheel. When the start
month is after the end month the range wraps across the year boundary:
(10, 2) covers Oct, Nov, Dec, Jan, Feb.
"""

from errors import InvalidInterval

MONTHS = range(1, 13)

MONTH_ABBR = ['', 'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
              'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def validate_month(month, field='month'):
    """Return *month* as an int, raising InvalidInterval outside 1-12."""
    if isinstance(month, bool) or not isinstance(month, int):
        raise InvalidInterval(f"{field} must be a month number, got {month!r}")
    if month not in MONTHS:
        raise InvalidInterval(f"{field} must be between 1 and 12, got {month}")
    return month


def wraps_year(start_month, end_month):
    return start_month > end_month


def month_in_range(month, start_month, end_month):
    """
    Check whether *month* lies inside the closed cyclic range.

    Non-wrapping ranges (start <= end) contain start..end; wrapping ranges
    contain everything from start to December plus January to end.
    """
    month = validate_month(month)
    start_month = validate_month(start_month, 'start_month')
    end_month = validate_month(end_month, 'end_month')

    if wraps_year(start_month, end_month):
        return month >= start_month or month <= end_month
    return start_month <= month <= end_month


def months_spanned(start_month, end_month):
    """List the months covered by a cyclic range, in wheel order from start."""
    return [m for m in (((start_month - 1 + i) % 12) + 1 for i in range(12))
            if month_in_range(m, start_month, end_month)]
