"""In-memory byte store.

Dict-backed, non-persistent. Useful for tests and for running the cache
engine without a storage location.
"""

from __future__ import annotations

from ipxcache.store.base import ByteStore


class MemoryByteStore(ByteStore):
    """Byte store holding records in a dict for the life of the process."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    async def get_raw(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def set_raw(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    async def has_item(self, key: str) -> bool:
        return key in self._data

    async def keys(self) -> list[str]:
        return sorted(self._data)

    async def clear(self) -> None:
        self._data.clear()
