"""Persistent TTL-bounded cache for derived image artifacts."""

__version__ = "0.1.0"
