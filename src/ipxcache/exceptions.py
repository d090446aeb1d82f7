"""
Custom exception hierarchy for the IPX cache.

All exceptions inherit from IPXCacheError, which provides optional context
for structured error handling and logging.

A cache miss is never an exception: lookups return None instead.
"""

from __future__ import annotations

from typing import Any


class IPXCacheError(Exception):
    """Base exception for all cache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(IPXCacheError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Unknown storage driver
        - Negative default TTL passed to the engine
    """

    pass


class StorageError(IPXCacheError):
    """Raised when the underlying byte store fails.

    Context should include:
        - key: The store key being accessed
        - operation: The store operation (get_raw, set_item, clear, ...)
        - cause: The underlying error message
    """

    pass


class ItemDecodeError(StorageError):
    """Raised when a stored item cannot be decoded as JSON.

    The record exists but is unreadable; callers may treat it as missing.
    """

    pass
