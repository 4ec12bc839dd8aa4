"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to UTC.

    Naive values are assumed to already be UTC (SQLite drops tzinfo on read).

    Args:
        value: Datetime to normalize

    Returns:
        Timezone-aware UTC datetime
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def start_of_month(value: datetime) -> datetime:
    """
    Get the first instant of the month containing ``value``.

    Args:
        value: Any datetime

    Returns:
        UTC datetime at 00:00 on day 1 of the same month
    """
    value = ensure_utc(value)
    return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
