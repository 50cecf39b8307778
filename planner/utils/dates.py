"""
Calendar-day helpers.

All recurrence matching works on plain calendar days. Values coming from the
document store can be `date`, `datetime`, `YYYY-MM-DD` strings or serialized ISO
datetimes; everything is reduced to a `date` before comparison.
"""

from datetime import date, datetime
from typing import Any, Optional, Tuple

DATE_FORMAT = "%Y-%m-%d"


def to_calendar_day(value: Any) -> Optional[date]:
    """
    Normalize a date-like value to a calendar day.

    Args:
        value: date, datetime, or ISO string (only the leading YYYY-MM-DD is used)

    Returns:
        The calendar day, or None if the value cannot be read as one
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()[:10]
        try:
            return datetime.strptime(text, DATE_FORMAT).date()
        except ValueError:
            return None
    return None


def format_day(day: date) -> str:
    """Format a calendar day as YYYY-MM-DD."""
    return day.isoformat()


def sunday_weekday(day: date) -> int:
    """Weekday ordinal with 0=Sunday..6=Saturday."""
    return (day.weekday() + 1) % 7


def week_start_ordinal(day: date) -> int:
    """Proleptic ordinal of the Sunday on or before day (0 for the week of date.min)."""
    return day.toordinal() - sunday_weekday(day)


def weeks_between(start: date, end: date) -> int:
    """Whole calendar weeks (Sunday-based) from start's week to end's week."""
    return (week_start_ordinal(end) - week_start_ordinal(start)) // 7


def months_between(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(year: int, month: int, count: int) -> Tuple[int, int]:
    """Return (year, month) shifted by count months."""
    index = year * 12 + (month - 1) + count
    return index // 12, index % 12 + 1


def safe_date(year: int, month: int, day: int) -> Optional[date]:
    """Build a date, or None when it does not exist (e.g. Feb 30)."""
    try:
        return date(year, month, day)
    except ValueError:
        return None
