from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta

from ..core.constants import FIRST_PERIOD_LAST_DAY, NO_DURATION


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_half(year: int, month: int) -> tuple[date, date]:
    """Days 1-15 of the month, both inclusive."""
    return date(year, month, 1), date(year, month, FIRST_PERIOD_LAST_DAY)


def second_half(year: int, month: int) -> tuple[date, date]:
    """Day 16 through the last day of the month, both inclusive."""
    return date(year, month, FIRST_PERIOD_LAST_DAY + 1), date(year, month, last_day_of_month(year, month))


def month_window(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, last_day_of_month(year, month))


def week_window(day: date) -> tuple[date, date]:
    """Monday..Sunday containing `day`."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def format_hours_minutes(value: timedelta) -> str:
    """Render a non-negative duration as 'Hh Mm' (minutes truncated)."""
    if value < timedelta(0):
        return NO_DURATION
    total_minutes = int(value.total_seconds() // 60)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def split_remaining(value: timedelta) -> tuple[int, int]:
    """Split a remaining wait into (hours, minutes) with minutes rounded up.

    A remainder that rounds up to 60 minutes carries into the hours.
    """
    seconds = max(value.total_seconds(), 0.0)
    hours = int(seconds // 3600)
    minutes = math.ceil((seconds % 3600) / 60)
    if minutes == 60:
        hours += 1
        minutes = 0
    return hours, minutes
