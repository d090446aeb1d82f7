"""
Base classes for caching.

CacheStorage is the contract the artifact pipeline depends on. Any object
implementing it can serve as the cache.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ipxcache.cache.types import CachedData, PayloadData


class CacheStorage(ABC):
    """Abstract interface for cache implementations."""

    @abstractmethod
    async def get(self, path: str) -> CachedData | None:
        """Get a fresh entry from the cache, or None."""
        ...

    @abstractmethod
    async def set(self, path: str, value: PayloadData) -> None:
        """Store an entry in the cache."""
        ...

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Delete an entry from the cache."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Start wiping every entry. Does not wait for completion."""
        ...
