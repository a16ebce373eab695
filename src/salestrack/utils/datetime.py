# File: src/salestrack/utils/datetime.py
"""Timezone-aware datetime utilities for branch local time."""

import os
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

# Branches report in Philippine time (UTC+8, no DST)
APP_TIMEZONE = ZoneInfo(os.getenv("APP_TIMEZONE", "Asia/Manila"))


def now_local() -> datetime:
    """Get current datetime in the app timezone."""
    return datetime.now(APP_TIMEZONE)


def today_local() -> date:
    """Get today's date in the app timezone."""
    return now_local().date()


def now_utc() -> datetime:
    """Get current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_month_key(value: str) -> date:
    """Parse a ``YYYY-MM`` key into the first day of that month.

    Raises:
        ValueError: If the key is not a valid year-month
    """
    year_str, sep, month_str = value.strip().partition("-")
    if not sep or not year_str.isdigit() or not month_str.isdigit():
        raise ValueError(f"Invalid month key: {value}")
    return date(int(year_str), int(month_str), 1)


def month_key(value: date) -> str:
    """Format a date as its ``YYYY-MM`` month key."""
    return f"{value.year}-{value.month:02d}"
