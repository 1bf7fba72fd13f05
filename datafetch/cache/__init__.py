"""
Two-tier response cache for datafetch.

This package provides:
- a bounded in-memory tier with LRU eviction
- a durable file-based tier
- the CacheStore combining both with lazy expiration
"""

from .disk import DiskCache
from .memory import CacheEntry, MemoryCache
from .store import CacheStore

__all__ = [
    "CacheEntry",
    "CacheStore",
    "DiskCache",
    "MemoryCache",
]
