"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from ipxcache.cache.engine import IPXCache
from ipxcache.config import Settings, clear_settings_cache, get_settings
from ipxcache.exceptions import ConfigurationError
from ipxcache.store import FSByteStore, MemoryByteStore, SQLiteByteStore, create_store


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_settings_loads_from_env(self, mock_env_vars: dict[str, str]) -> None:
        """Test that settings correctly loads from environment variables."""
        settings = get_settings()

        assert settings.CACHE_DIR == Path(mock_env_vars["CACHE_DIR"])
        assert settings.CACHE_DRIVER == "fs"
        assert settings.DEFAULT_TTL == 10
        assert settings.LOG_LEVEL == "DEBUG"

    def test_negative_ttl_rejected(self) -> None:
        with patch.dict(os.environ, {"DEFAULT_TTL": "-1"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_unknown_driver_rejected(self) -> None:
        with patch.dict(os.environ, {"CACHE_DRIVER": "redis"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_empty_cache_dir_rejected(self) -> None:
        with patch.dict(os.environ, {"CACHE_DIR": "  "}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "CACHE_DIR" in str(exc_info.value)


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_defaults(self) -> None:
        """Test default values without any environment."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.DEFAULT_TTL == 86400
        assert settings.CACHE_DIR == Path(".cache/ipx")
        assert settings.CACHE_DRIVER == "fs"
        assert settings.LOG_FILE is None

    def test_lowercase_aliases(self, mock_settings: Settings) -> None:
        assert mock_settings.cache_dir == mock_settings.CACHE_DIR
        assert mock_settings.default_ttl == 10


class TestSettingsMethods:
    """Tests for Settings methods."""

    def test_ensure_directories_creates_cache_dir(self, mock_settings: Settings) -> None:
        assert mock_settings.CACHE_DIR.is_dir()

    def test_display(self, mock_settings: Settings) -> None:
        display = mock_settings.display()

        assert display["CACHE_DIR"] == str(mock_settings.CACHE_DIR)
        assert display["DEFAULT_TTL"] == 10
        assert display["LOG_FILE"] is None


class TestSettingsCache:
    """Tests for settings caching."""

    def test_get_settings_returns_same_instance(
        self, mock_env_vars: dict[str, str]
    ) -> None:
        assert get_settings() is get_settings()

    def test_clear_settings_cache_clears_cache(
        self, mock_env_vars: dict[str, str]
    ) -> None:
        settings1 = get_settings()
        clear_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2


class TestStoreFactory:
    """Tests for building stores and engines from configuration."""

    def test_create_store_drivers(self, temp_dir: Path) -> None:
        assert isinstance(create_store("fs", temp_dir), FSByteStore)
        assert isinstance(create_store("memory", temp_dir), MemoryByteStore)

        sqlite_store = create_store("sqlite", temp_dir)
        assert isinstance(sqlite_store, SQLiteByteStore)
        assert sqlite_store.db_path == temp_dir / "cache.db"

    def test_create_store_unknown_driver(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            create_store("redis", temp_dir)

        assert exc_info.value.context["driver"] == "redis"

    def test_engine_from_settings(self, mock_settings: Settings) -> None:
        cache = IPXCache.from_settings(mock_settings)

        assert cache.default_ttl == 10
        assert isinstance(cache.store, FSByteStore)
        assert cache.store.base_dir == mock_settings.CACHE_DIR.resolve()

    def test_engine_rejects_negative_ttl(self) -> None:
        with pytest.raises(ConfigurationError):
            IPXCache(MemoryByteStore(), default_ttl=-5)
