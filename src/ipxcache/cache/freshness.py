"""
Freshness policy for cached entries.

The stored ``expires`` header is treated as the instant the entry was last
validated, and the cache-local TTL is added on top of it:

    fresh  <=>  now <= parse(meta["expires"]) + default_ttl

A missing meta record, a missing ``expires`` header, or an unparseable value
all count as the Unix epoch, so such entries are always expired.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from ipxcache.utils.dates import EPOCH, ensure_utc, parse_timestamp, utc_now

EXPIRES_HEADER = "expires"


def get_expires(meta: Mapping[str, Any] | None) -> Any | None:
    """Look up the expires header, ignoring header-name case."""
    if not meta:
        return None
    if EXPIRES_HEADER in meta:
        return meta[EXPIRES_HEADER]
    for name, value in meta.items():
        if isinstance(name, str) and name.lower() == EXPIRES_HEADER:
            return value
    return None


def parse_expires(value: Any) -> datetime:
    """Parse an expires header value, falling back to the epoch."""
    return parse_timestamp(value) or EPOCH


def expires_at(meta: Mapping[str, Any] | None, default_ttl: int) -> datetime:
    """Compute the instant after which an entry is expired."""
    try:
        return parse_expires(get_expires(meta)) + timedelta(seconds=default_ttl)
    except OverflowError:
        return datetime.max.replace(tzinfo=EPOCH.tzinfo)


def is_fresh(
    meta: Mapping[str, Any] | None,
    default_ttl: int,
    now: datetime | None = None,
) -> bool:
    """Check whether an entry with this metadata may still be served.

    Args:
        meta: Stored metadata, or None if no record exists.
        default_ttl: Cache-local TTL in seconds.
        now: Reference time (defaults to the current UTC time).
    """
    reference = ensure_utc(now) if now is not None else utc_now()
    return reference <= expires_at(meta, default_ttl)
