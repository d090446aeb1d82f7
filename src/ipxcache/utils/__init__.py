"""Utility modules for the IPX cache."""

from ipxcache.utils.dates import (
    EPOCH,
    http_date,
    parse_timestamp,
    utc_now,
)

__all__ = [
    "EPOCH",
    "http_date",
    "parse_timestamp",
    "utc_now",
]
