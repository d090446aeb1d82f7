"""Filesystem byte store.

One file per key under a base directory, with the key's path structure
preserved (``/img/a.png`` -> ``<base>/img/a.png``). Blocking file I/O runs
in a thread pool so the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, TypeVar

from ipxcache.exceptions import StorageError
from ipxcache.logging import get_logger
from ipxcache.store.base import ByteStore

logger = get_logger(__name__)

T = TypeVar("T")

# Thread pool for file I/O (pathlib is not async-native)
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="ipxcache-fs")


class FSByteStore(ByteStore):
    """Filesystem storage backend.

    Writes go to a temporary file in the target directory and are renamed
    into place, so readers never see a partially written record.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir).resolve()

    async def init(self) -> None:
        await self._run("init", "", lambda: self.base_dir.mkdir(parents=True, exist_ok=True))
        logger.debug("Filesystem store initialized", base_dir=str(self.base_dir))

    def _resolve_path(self, key: str) -> Path:
        """Resolve a key to a file path inside base_dir."""
        clean_key = Path(key.replace("\\", "/")).as_posix().lstrip("/")
        if not clean_key or clean_key == "." or "\x00" in clean_key:
            raise StorageError("Invalid key", context={"key": key})

        try:
            full_path = (self.base_dir / clean_key).resolve()
        except (ValueError, OSError) as e:
            raise StorageError(
                "Invalid key", context={"key": key, "cause": str(e)}
            ) from e

        try:
            full_path.relative_to(self.base_dir)
        except ValueError:
            raise StorageError(
                "Invalid key (outside base directory)", context={"key": key}
            ) from None

        return full_path

    async def _run(self, operation: str, key: str, fn: Callable[[], T]) -> T:
        """Run blocking I/O in the thread pool, wrapping OS errors."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(_executor, fn)
        except OSError as e:
            raise StorageError(
                "Filesystem operation failed",
                context={"key": key, "operation": operation, "cause": str(e)},
            ) from e

    async def get_raw(self, key: str) -> bytes | None:
        path = self._resolve_path(key)

        def _read() -> bytes | None:
            try:
                return path.read_bytes()
            except (FileNotFoundError, IsADirectoryError):
                return None

        return await self._run("get_raw", key, _read)

    async def set_raw(self, key: str, value: bytes) -> None:
        path = self._resolve_path(key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

        await self._run("set_raw", key, _write)

    async def remove_item(self, key: str) -> None:
        path = self._resolve_path(key)
        await self._run("remove_item", key, lambda: path.unlink(missing_ok=True))

    async def has_item(self, key: str) -> bool:
        path = self._resolve_path(key)
        return await self._run("has_item", key, path.is_file)

    async def keys(self) -> list[str]:
        def _list() -> list[str]:
            if not self.base_dir.exists():
                return []
            return sorted(
                "/" + p.relative_to(self.base_dir).as_posix()
                for p in self.base_dir.rglob("*")
                if p.is_file() and not (p.name.startswith(".") and p.name.endswith(".tmp"))
            )

        return await self._run("keys", "", _list)

    async def clear(self) -> None:
        def _clear() -> None:
            if not self.base_dir.exists():
                return
            for child in self.base_dir.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink(missing_ok=True)

        await self._run("clear", "", _clear)
        logger.info("Filesystem store cleared", base_dir=str(self.base_dir))
