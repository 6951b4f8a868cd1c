"""
Date helpers for price series and option expirations.

Price points carry epoch seconds; dates exposed to callers are UTC
``YYYY-MM-DD`` strings.
"""

import calendar
from datetime import date, datetime, timezone
from typing import Optional


def date_from_timestamp(timestamp_seconds: int) -> str:
    """
    Convert epoch seconds to a UTC calendar date string.

    Args:
        timestamp_seconds: Unix timestamp in seconds

    Returns:
        Date formatted as YYYY-MM-DD
    """
    return datetime.fromtimestamp(timestamp_seconds, tz=timezone.utc).date().isoformat()


def today_utc() -> date:
    """Current UTC calendar date."""
    return datetime.now(timezone.utc).date()


def third_friday(year: int, month: int) -> date:
    """
    Standard monthly option expiration: the third Friday of the month.

    Args:
        year: Calendar year
        month: Calendar month (1-12)

    Returns:
        Date of the third Friday
    """
    first_weekday = date(year, month, 1).weekday()
    days_until_friday = (calendar.FRIDAY - first_weekday) % 7
    return date(year, month, 1 + days_until_friday + 14)


def upcoming_monthly_expirations(today: Optional[date] = None, count: int = 6) -> list[str]:
    """
    List upcoming monthly expirations, skipping any already past.

    Args:
        today: Reference date, defaults to the current UTC date
        count: Number of expirations to return

    Returns:
        Expiration dates formatted as YYYY-MM-DD, ascending
    """
    if today is None:
        today = today_utc()

    expirations = []
    year, month = today.year, today.month
    while len(expirations) < count:
        expiry = third_friday(year, month)
        if expiry >= today:
            expirations.append(expiry.isoformat())
        month += 1
        if month > 12:
            month = 1
            year += 1
    return expirations

