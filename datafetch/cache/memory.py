"""
In-memory cache tier with LRU eviction and size limits.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Cached payload bytes with an absolute expiration time (epoch seconds)."""

    data: bytes
    expires_at: float

    @property
    def is_expired(self) -> bool:
        """Check if cache entry has expired."""
        return time.time() > self.expires_at

    @property
    def size(self) -> int:
        return len(self.data)


class MemoryCache:
    """
    Bounded in-memory table of cache entries.

    The table is limited both by number of entries and by the total size of
    their payloads. When either limit would be exceeded the least recently
    used entries are evicted first. A payload larger than the size limit is
    never stored.

    All operations take an internal lock, so one instance can be shared by
    concurrent tasks and threads.
    """

    def __init__(self, max_items: int = 100, max_bytes: int = 50 * 1024 * 1024):
        """
        Initialize the memory tier.

        Args:
            max_items: Maximum number of entries
            max_bytes: Maximum total payload size in bytes
        """
        if max_items < 1:
            raise ValueError("max_items must be positive")
        if max_bytes < 1:
            raise ValueError("max_bytes must be positive")

        self.max_items = max_items
        self.max_bytes = max_bytes
        self.evictions = 0
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._current_bytes = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        """
        Get the entry stored under key and mark it as recently used.

        Expired entries are returned as-is; deciding what to do with them is
        up to the caller.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
            return entry

    def set(self, key: str, entry: CacheEntry) -> bool:
        """
        Store entry under key, replacing any previous entry.

        Returns:
            False if the payload alone exceeds the size limit, True otherwise
        """
        with self._lock:
            self._delete(key)

            if entry.size > self.max_bytes:
                logger.debug(
                    f"Payload of {entry.size} bytes exceeds memory limit, not cached in memory"
                )
                return False

            while self._entries and (
                len(self._entries) >= self.max_items
                or self._current_bytes + entry.size > self.max_bytes
            ):
                _, evicted = self._entries.popitem(last=False)
                self._current_bytes -= evicted.size
                self.evictions += 1

            self._entries[key] = entry
            self._current_bytes += entry.size
            return True

    def delete(self, key: str) -> bool:
        """Delete entry by key; returns whether it existed."""
        with self._lock:
            return self._delete(key)

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()
            self._current_bytes = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    @property
    def current_bytes(self) -> int:
        """Total payload bytes currently held."""
        with self._lock:
            return self._current_bytes

    def _delete(self, key: str) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        self._current_bytes -= entry.size
        return True
