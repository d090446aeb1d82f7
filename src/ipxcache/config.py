"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
Validates fields and provides typed access to settings.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

StoreDriver = Literal["fs", "sqlite", "memory"]


class Settings(BaseSettings):
    """Cache settings loaded from environment variables.

    Optional:
        CACHE_DIR: Directory (namespace) for persisted cache entries
        CACHE_DRIVER: Byte store backend (fs, sqlite, memory)
        DEFAULT_TTL: Seconds added to a stored `expires` header
        LOG_LEVEL: Logging level
        LOG_FILE: Path for JSON-lines log output
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    CACHE_DIR: Path = Field(
        default=Path(".cache/ipx"), description="Persistent cache directory"
    )
    CACHE_DRIVER: StoreDriver = Field(default="fs", description="Byte store backend")

    # Freshness
    DEFAULT_TTL: int = Field(
        default=86400, ge=0, description="Default TTL in seconds"
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON-lines log file")

    @property
    def cache_dir(self) -> Path:
        """Get cache directory (lowercase alias)."""
        return self.CACHE_DIR

    @property
    def default_ttl(self) -> int:
        """Get default TTL in seconds (lowercase alias)."""
        return self.DEFAULT_TTL

    @field_validator("CACHE_DIR", mode="before")
    @classmethod
    def validate_cache_dir(cls, v: object) -> object:
        """Reject an empty cache directory."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("CACHE_DIR must not be empty")
        return v

    def ensure_directories(self) -> None:
        """Create the cache directory if it doesn't exist."""
        if self.CACHE_DRIVER == "memory":
            return
        self.CACHE_DIR.mkdir(parents=True, exist_ok=True)

    def display(self) -> dict[str, str | int | None]:
        """Return settings as a flat mapping for display."""
        return {
            "CACHE_DIR": str(self.CACHE_DIR),
            "CACHE_DRIVER": self.CACHE_DRIVER,
            "DEFAULT_TTL": self.DEFAULT_TTL,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
