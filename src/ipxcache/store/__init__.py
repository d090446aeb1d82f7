"""Byte store backends for the cache engine."""

from __future__ import annotations

from pathlib import Path

from ipxcache.exceptions import ConfigurationError
from ipxcache.store.base import ByteStore
from ipxcache.store.fs import FSByteStore
from ipxcache.store.memory import MemoryByteStore
from ipxcache.store.sqlite import SQLiteByteStore

__all__ = [
    "ByteStore",
    "FSByteStore",
    "MemoryByteStore",
    "SQLiteByteStore",
    "create_store",
]

SQLITE_FILENAME = "cache.db"


def create_store(driver: str, cache_dir: str | Path) -> ByteStore:
    """Create a byte store for the configured driver.

    Args:
        driver: One of "fs", "sqlite", "memory".
        cache_dir: Storage location. Ignored by the memory driver.

    Raises:
        ConfigurationError: If the driver is unknown.
    """
    if driver == "fs":
        return FSByteStore(cache_dir)
    if driver == "sqlite":
        return SQLiteByteStore(Path(cache_dir) / SQLITE_FILENAME)
    if driver == "memory":
        return MemoryByteStore()

    raise ConfigurationError(
        f"Unknown cache driver: {driver}",
        context={"driver": driver, "expected": ["fs", "sqlite", "memory"]},
    )
