"""Date helpers for the month calendar."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, timedelta

GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_DAYS = GRID_ROWS * GRID_COLUMNS


def get_grid_start(year: int, month: int) -> date:
    """Get the Monday on or before the first of the month."""
    first_day = date(year, month, 1)
    return first_day - timedelta(days=first_day.weekday())


def get_calendar_grid(year: int, month: int) -> list[list[date]]:
    """Get the 6x7 grid of consecutive dates shown for a month, Monday first."""
    start = get_grid_start(year, month)
    return [
        [start + timedelta(days=row * GRID_COLUMNS + col) for col in range(GRID_COLUMNS)]
        for row in range(GRID_ROWS)
    ]


def get_grid_end(year: int, month: int) -> date:
    return get_grid_start(year, month) + timedelta(days=GRID_DAYS - 1)


def is_same_day(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month and a.day == b.day


def is_in_visible_grid(d: date, year: int, month: int) -> bool:
    return get_grid_start(year, month) <= d <= get_grid_end(year, month)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Get the first and last day of a month."""
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def add_months(d: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(d.day, monthrange(year, month)[1]))


def format_hours(hours: float) -> str:
    """Format hours compactly: 8 -> "8", 7.5 -> "7.5"."""
    return f"{hours:g}"
