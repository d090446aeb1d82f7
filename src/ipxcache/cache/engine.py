"""
Cache engine for derived artifacts.

IPXCache pairs a blob with its header metadata in a byte store:
- blob under ``path``
- metadata under ``path + ".json"``

Reads evaluate freshness from the stored ``expires`` header and purge
expired entries lazily. Writes and deletes are best-effort: store failures
degrade to cache misses instead of reaching the producer.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ipxcache.cache.base import CacheStorage
from ipxcache.cache.freshness import is_fresh
from ipxcache.cache.stats import CacheStats
from ipxcache.cache.types import CachedData, PayloadData
from ipxcache.exceptions import ConfigurationError, ItemDecodeError, StorageError
from ipxcache.logging import get_logger, log_context
from ipxcache.store import ByteStore, create_store
from ipxcache.utils.dates import utc_now

if TYPE_CHECKING:
    from ipxcache.config import Settings

logger = get_logger(__name__)

DEFAULT_TTL = 86400
META_SUFFIX = ".json"


def meta_key(path: str) -> str:
    """Store key of the metadata record for path."""
    return f"{path}{META_SUFFIX}"


def _check_path(path: str) -> None:
    if not isinstance(path, str) or not path:
        raise ValueError("Cache path must be a non-empty string")


async def _read_payload(data: Any) -> bytes:
    """Convert producer output to bytes.

    Raises:
        TypeError: If data is neither bytes-like nor readable.
    """
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)

    read = getattr(data, "read", None)
    if callable(read):
        result = read()
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, (bytes, bytearray, memoryview)):
            return bytes(result)

    raise TypeError(f"Cannot cache data of type {type(data).__name__}")


class IPXCache(CacheStorage):
    """Persistent TTL-bounded cache of blobs with header metadata.

    Concurrent calls for the same path are not serialized. A purge racing
    with a write costs at most an extra miss or a redundant write.
    """

    def __init__(self, store: ByteStore, default_ttl: int = DEFAULT_TTL) -> None:
        """Initialize the cache engine.

        Args:
            store: Byte store holding blobs and metadata records.
            default_ttl: Seconds added to a stored `expires` header.

        Raises:
            ConfigurationError: If default_ttl is negative.
        """
        if default_ttl < 0:
            raise ConfigurationError(
                "default_ttl must be >= 0", context={"default_ttl": default_ttl}
            )
        self.store = store
        self.default_ttl = default_ttl
        self.stats = CacheStats()
        self._pending: set[asyncio.Task[None]] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> IPXCache:
        """Build a cache from configuration."""
        store = create_store(settings.CACHE_DRIVER, settings.CACHE_DIR)
        return cls(store, default_ttl=settings.DEFAULT_TTL)

    async def init(self) -> None:
        await self.store.init()

    async def close(self) -> None:
        """Wait for background work and close the store."""
        await self.wait_pending()
        await self.store.close()

    async def __aenter__(self) -> IPXCache:
        await self.init()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get(self, path: str) -> CachedData | None:
        """Get a fresh entry.

        Returns None when the blob is missing or the entry is expired.
        Expired entries are deleted before returning.

        Raises:
            StorageError: If the store fails while reading.
        """
        _check_path(path)

        raw = await self.store.get_raw(path)
        if raw is None:
            self.stats.misses += 1
            return None

        try:
            meta = await self.store.get_item(meta_key(path))
        except ItemDecodeError:
            logger.warning("Unreadable cache metadata", path=path)
            meta = None

        if not isinstance(meta, Mapping):
            meta = None

        if not is_fresh(meta, self.default_ttl, now=utc_now()):
            self.stats.expired += 1
            self.stats.misses += 1
            logger.debug("Cache entry expired", path=path)
            await self.delete(path)
            return None

        self.stats.hits += 1
        return CachedData(meta=dict(meta), data=memoryview(raw))

    async def set(self, path: str, value: PayloadData) -> None:
        """Store a blob and its metadata.

        Store failures are logged and swallowed. Whatever part of the pair
        did get written is removed again, so the entry reads as a miss rather
        than a blob paired with stale headers.

        Raises:
            TypeError: If value.data cannot be converted to bytes.
        """
        _check_path(path)
        data = await _read_payload(value.data)
        meta = dict(value.meta)

        results = await asyncio.gather(
            self.store.set_raw(path, data),
            self.store.set_item(meta_key(path), meta),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, (StorageError, OSError)):
                raise failure

        if failures:
            self.stats.write_failures += 1
            with log_context(operation="set"):
                logger.error("Cache write failed", path=path, error=str(failures[0]))
            await self.delete(path)
            return

        self.stats.writes += 1
        logger.debug("Cached entry", path=path, size=len(data))

    async def delete(self, path: str) -> None:
        """Remove a blob and its metadata. Never raises for store failures."""
        _check_path(path)

        results = await asyncio.gather(
            self.store.remove_item(path),
            self.store.remove_item(meta_key(path)),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                with log_context(operation="delete"):
                    logger.debug("Cache delete failed", path=path, error=str(result))

        self.stats.deletes += 1

    def clear(self) -> None:
        """Wipe the whole namespace without waiting.

        On a running event loop the wipe is scheduled as a background task.
        Without one it runs to completion before returning, and the store is
        closed again since its connection would be bound to a loop that no
        longer runs. Failures are logged, never raised.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._clear_and_close())
            return

        task = loop.create_task(self._clear())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _clear(self) -> None:
        try:
            await self.store.clear()
        except Exception as e:
            with log_context(operation="clear"):
                logger.error("Cache clear failed", error=str(e))
            return

        logger.info("Cache cleared")

    async def _clear_and_close(self) -> None:
        try:
            await self._clear()
        finally:
            try:
                await self.store.close()
            except Exception as e:
                logger.debug("Store close after clear failed", error=str(e))

    async def wait_pending(self) -> None:
        """Wait for scheduled background clears to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))


def create_ipx_cache(
    cache_dir: str | Path,
    default_ttl: int = DEFAULT_TTL,
    driver: str = "fs",
) -> IPXCache:
    """Create a cache persisted under cache_dir.

    Args:
        cache_dir: Persistence directory.
        default_ttl: Default TTL in seconds.
        driver: Byte store backend (fs, sqlite, memory).
    """
    return IPXCache(create_store(driver, cache_dir), default_ttl=default_ttl)
