"""Calendar date helpers shared by range queries."""

import re
from datetime import date, timedelta

from calorie_tracker.domain.errors import EntryValidationError

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_calendar_date(value: str) -> date:
    """Parse a YYYY-MM-DD string into a date."""
    if not _DATE_PATTERN.match(value):
        raise EntryValidationError("Invalid date format. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise EntryValidationError("Invalid date format. Use YYYY-MM-DD") from exc


def format_local_date(value: date) -> str:
    """Format a date from its calendar fields."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def enumerate_dates(start: str, end: str) -> list[str]:
    """Return every date in [start, end] inclusive, ascending."""
    start_day = parse_calendar_date(start)
    end_day = parse_calendar_date(end)
    if start_day > end_day:
        raise EntryValidationError("start must be before end")

    days = []
    current = start_day
    while current <= end_day:
        days.append(format_local_date(current))
        current += timedelta(days=1)
    return days


def trailing_window(days: int, today: date) -> tuple[str, str]:
    """Return (start, end) covering the last `days` calendar days."""
    try:
        start = today - timedelta(days=days - 1)
    except OverflowError as exc:
        raise EntryValidationError("days is out of range") from exc
    return format_local_date(start), format_local_date(today)
