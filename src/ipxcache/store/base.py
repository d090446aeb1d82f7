"""
Byte store interface.

A byte store is the durable key/value collaborator under the cache engine.
It holds two kinds of records under string keys:
- raw records: opaque bytes (cached artifacts)
- items: small JSON-compatible values (metadata records)

All operations are coroutines and report failures as StorageError.
Lookups of missing keys return None; removing a missing key is a no-op.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import orjson

from ipxcache.exceptions import ItemDecodeError, StorageError


class ByteStore(ABC):
    """Abstract interface for byte store backends."""

    async def init(self) -> None:
        """Prepare the backend (create directories, open connections)."""
        return None

    async def close(self) -> None:
        """Release backend resources."""
        return None

    @abstractmethod
    async def get_raw(self, key: str) -> bytes | None:
        """Get raw bytes stored under key."""
        ...

    @abstractmethod
    async def set_raw(self, key: str, value: bytes) -> None:
        """Store raw bytes under key, replacing any previous value."""
        ...

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove the record under key, if any."""
        ...

    @abstractmethod
    async def has_item(self, key: str) -> bool:
        """Check if a record exists under key."""
        ...

    @abstractmethod
    async def keys(self) -> list[str]:
        """List all keys in the namespace."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Remove every record in the namespace."""
        ...

    async def get_item(self, key: str) -> Any | None:
        """Get a decoded JSON item stored under key.

        Raises:
            ItemDecodeError: If the stored bytes are not valid JSON.
        """
        raw = await self.get_raw(key)
        if raw is None:
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise ItemDecodeError(
                "Stored item is not valid JSON",
                context={"key": key, "operation": "get_item", "cause": str(e)},
            ) from e

    async def set_item(self, key: str, value: Any) -> None:
        """Encode value as JSON and store it under key.

        Raises:
            StorageError: If value is not JSON-serializable.
        """
        try:
            encoded = orjson.dumps(value)
        except TypeError as e:
            raise StorageError(
                "Item is not JSON-serializable",
                context={"key": key, "operation": "set_item", "cause": str(e)},
            ) from e
        await self.set_raw(key, encoded)

    async def __aenter__(self) -> ByteStore:
        await self.init()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
