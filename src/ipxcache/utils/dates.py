"""Timestamp utilities for cache metadata.

HTTP headers carry dates as RFC 7231 HTTP-dates; producers sometimes use
ISO-8601 strings or epoch milliseconds instead. Everything here returns
timezone-aware UTC datetimes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Get current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime, convert an aware one to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: object) -> datetime | None:
    """Parse a header timestamp.

    Accepts an HTTP-date string, an ISO-8601 string, a datetime, or a number
    of milliseconds since the Unix epoch.

    Args:
        value: Raw header value.

    Returns:
        UTC datetime, or None if the value cannot be interpreted.
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return ensure_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        pass

    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def http_date(dt: datetime | None = None) -> str:
    """Format a datetime as an HTTP-date (defaults to now).

    Args:
        dt: The datetime to format.

    Returns:
        String like 'Sun, 19 Oct 2026 12:00:00 GMT'.
    """
    return format_datetime(ensure_utc(dt or utc_now()), usegmt=True)
