"""SQLite byte store.

Keeps every record in a single ``entries`` table of a SQLite database,
accessed through aiosqlite.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import aiosqlite

from ipxcache.exceptions import StorageError
from ipxcache.logging import get_logger
from ipxcache.store.base import ByteStore

logger = get_logger(__name__)


class SQLiteByteStore(ByteStore):
    """SQLite-backed byte store.

    The connection is opened lazily on first use, so the store can be
    constructed outside a running event loop.
    """

    def __init__(self, db_path: str | Path) -> None:
        """Initialize SQLite store.

        Args:
            db_path: Path to the database file.
        """
        self.db_path = Path(db_path)
        self._db: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create the schema."""
        if self._db is not None:
            return

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._db = await aiosqlite.connect(self.db_path)
            await self._db.execute("""
                CREATE TABLE IF NOT EXISTS entries (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL
                )
            """)
            await self._db.commit()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(
                "Failed to open SQLite store",
                context={"operation": "init", "db_path": str(self.db_path), "cause": str(e)},
            ) from e

        logger.debug("SQLite store initialized", db_path=str(self.db_path))

    async def close(self) -> None:
        """Close the database connection."""
        if self._db:
            await self._db.close()
            self._db = None

    async def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            await self.init()
        assert self._db is not None
        return self._db

    def _error(self, operation: str, key: str, e: Exception) -> StorageError:
        return StorageError(
            "SQLite operation failed",
            context={"key": key, "operation": operation, "cause": str(e)},
        )

    async def get_raw(self, key: str) -> bytes | None:
        db = await self._conn()
        try:
            async with db.execute("SELECT value FROM entries WHERE key = ?", (key,)) as cursor:
                row = await cursor.fetchone()
        except sqlite3.Error as e:
            raise self._error("get_raw", key, e) from e

        return bytes(row[0]) if row else None

    async def set_raw(self, key: str, value: bytes) -> None:
        db = await self._conn()
        try:
            await db.execute(
                "INSERT OR REPLACE INTO entries (key, value) VALUES (?, ?)",
                (key, bytes(value)),
            )
            await db.commit()
        except sqlite3.Error as e:
            raise self._error("set_raw", key, e) from e

    async def remove_item(self, key: str) -> None:
        db = await self._conn()
        try:
            await db.execute("DELETE FROM entries WHERE key = ?", (key,))
            await db.commit()
        except sqlite3.Error as e:
            raise self._error("remove_item", key, e) from e

    async def has_item(self, key: str) -> bool:
        db = await self._conn()
        try:
            async with db.execute("SELECT 1 FROM entries WHERE key = ?", (key,)) as cursor:
                return await cursor.fetchone() is not None
        except sqlite3.Error as e:
            raise self._error("has_item", key, e) from e

    async def keys(self) -> list[str]:
        db = await self._conn()
        try:
            async with db.execute("SELECT key FROM entries ORDER BY key") as cursor:
                rows = await cursor.fetchall()
        except sqlite3.Error as e:
            raise self._error("keys", "", e) from e

        return [row[0] for row in rows]

    async def clear(self) -> None:
        db = await self._conn()
        try:
            await db.execute("DELETE FROM entries")
            await db.commit()
        except sqlite3.Error as e:
            raise self._error("clear", "", e) from e

        logger.info("SQLite store cleared", db_path=str(self.db_path))
