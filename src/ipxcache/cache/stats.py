"""Operation counters for a cache engine instance."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class CacheStats:
    """In-process counters. Not persisted."""

    hits: int = 0
    misses: int = 0
    expired: int = 0
    writes: int = 0
    write_failures: int = 0
    deletes: int = 0

    @property
    def hit_rate(self) -> float:
        """Percentage of lookups served from cache."""
        total = self.hits + self.misses
        return round(self.hits / total * 100, 1) if total else 0.0

    def as_dict(self) -> dict[str, int | float]:
        return {**asdict(self), "hit_rate_percent": self.hit_rate}
