"""
Pytest configuration and fixtures for IPX cache tests.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import AsyncGenerator, Generator
from unittest.mock import patch

import pytest

from ipxcache.cache.engine import IPXCache
from ipxcache.config import Settings, clear_settings_cache
from ipxcache.store import FSByteStore, MemoryByteStore


class FakeClock:
    """Controllable replacement for utc_now()."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def clock() -> Generator[FakeClock, None, None]:
    """Freeze the cache engine's clock at a whole second."""
    fake = FakeClock(datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc))
    with patch("ipxcache.cache.engine.utc_now", fake):
        yield fake


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "CACHE_DIR": str(temp_dir / "cache"),
        "CACHE_DRIVER": "fs",
        "DEFAULT_TTL": "10",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Generator[Settings, None, None]:
    """Provide a Settings instance with mock configuration."""
    from ipxcache.config import get_settings

    settings = get_settings()
    settings.ensure_directories()
    yield settings
    clear_settings_cache()


@pytest.fixture
def memory_store() -> MemoryByteStore:
    return MemoryByteStore()


@pytest.fixture
async def cache(memory_store: MemoryByteStore) -> AsyncGenerator[IPXCache, None]:
    """In-memory cache with a 10 second TTL."""
    async with IPXCache(memory_store, default_ttl=10) as engine:
        yield engine


@pytest.fixture
async def fs_cache(temp_dir: Path) -> AsyncGenerator[IPXCache, None]:
    """Filesystem-backed cache with a 10 second TTL."""
    async with IPXCache(FSByteStore(temp_dir / "ipx"), default_ttl=10) as engine:
        yield engine


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
