"""
Cache package for derived artifacts.

This package provides:
- CacheStorage (base.py): the get/set/delete/clear contract
- IPXCache (engine.py): blob + metadata pairing over a byte store
- Freshness policy (freshness.py): TTL layered on the stored `expires` header
"""

from ipxcache.cache.base import CacheStorage
from ipxcache.cache.engine import IPXCache, create_ipx_cache
from ipxcache.cache.stats import CacheStats
from ipxcache.cache.types import CachedData, HeaderMap, PayloadData

__all__ = [
    "CacheStats",
    "CacheStorage",
    "CachedData",
    "HeaderMap",
    "IPXCache",
    "PayloadData",
    "create_ipx_cache",
]
