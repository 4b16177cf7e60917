# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities.

All timestamps are stored in UTC and all Python datetimes handled by the
domain layer are timezone-aware. Code that needs "now" should receive it
as a parameter where it feeds a decision, and call utc_now() only at the
edge (service entry points, model defaults).

Usage:
------
    from src.utils.datetime import utc_now, add_days

    expires_at = add_days(completed_at, 90)
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    # Already aware - convert to UTC
    return dt.astimezone(timezone.utc)


def add_days(dt: datetime, days: int) -> datetime:
    """Add whole calendar days to a datetime.

    The result keeps the time of day of ``dt``; in UTC a calendar day is
    always exactly 24 hours.

    Args:
        dt: Start datetime (naive values are treated as UTC).
        days: Number of days to add, may be negative.

    Returns:
        Timezone-aware UTC datetime.
    """
    return ensure_utc(dt) + timedelta(days=days)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Count whole days from start to end.

    Partial days are truncated towards zero, so 36 hours is 1 day and
    -36 hours is -1 day.

    Args:
        start: Start datetime.
        end: End datetime.

    Returns:
        Signed number of whole days.
    """
    delta = ensure_utc(end) - ensure_utc(start)
    seconds = int(delta.total_seconds())
    days = abs(seconds) // 86400
    return days if seconds >= 0 else -days
