"""Value types passed across the cache interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

HeaderValue = Union[str, int, float]
HeaderMap = dict[str, HeaderValue]


@dataclass(frozen=True)
class CachedData:
    """A fresh cache entry.

    Attributes:
        meta: Header mapping stored alongside the blob.
        data: Read-only view over the cached bytes.
    """

    meta: HeaderMap
    data: memoryview

    def to_bytes(self) -> bytes:
        """Copy the cached bytes out of the view."""
        return self.data.tobytes()


@dataclass(frozen=True)
class PayloadData:
    """Content handed to the cache by an artifact producer.

    ``data`` is bytes-like or an object with a ``read()`` method (sync or
    async) returning bytes. ``meta`` should carry an ``expires`` header set by
    the producer; the cache does not add one.
    """

    data: Any
    meta: HeaderMap = field(default_factory=dict)
