"""Calendar-day arithmetic for trayplan.

All scheduling math works on ``datetime.date`` values: whole-day offsets with no
time-of-day and no timezone, so adding or subtracting days can never shift the
calendar day across a DST boundary. Strings in ``YYYY-MM-DD`` form are accepted
anywhere a day is expected.
"""

from datetime import date, datetime, timedelta
from typing import List, Union

DayLike = Union[date, str]


def parse_day(value: DayLike) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a date through).

    A datetime is truncated to its date component.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def format_day(value: DayLike) -> str:
    """Format a day as ``YYYY-MM-DD``."""
    return parse_day(value).isoformat()


def add_days(day: DayLike, n: int) -> date:
    """Return the calendar day ``n`` days after ``day`` (``n`` may be negative)."""
    return parse_day(day) + timedelta(days=int(n or 0))


def subtract_days(day: DayLike, n: int) -> date:
    """Return the calendar day ``n`` days before ``day``."""
    return add_days(day, -int(n or 0))


def enumerate_dates(start: DayLike, count: int) -> List[date]:
    """Consecutive days starting at ``start``; length is ``max(0, count)``."""
    first = parse_day(start)
    return [first + timedelta(days=i) for i in range(max(0, int(count or 0)))]
