"""
Two-tier cache store combining the memory and disk tiers.
"""

import logging
import time
from pathlib import Path
from typing import Dict, Optional, Union

from ..config.models import DEFAULT_CACHE_NAMESPACE, DEFAULT_CACHE_TTL, CacheConfig
from ..exceptions import CacheError
from .disk import DiskCache
from .memory import CacheEntry, MemoryCache

logger = logging.getLogger(__name__)


class CacheStore:
    """
    Key to bytes store backed by a fast memory tier and a durable disk tier.

    Lookups hit memory first. On a memory miss the disk tier is consulted and
    a hit there is promoted back into memory with a fresh default TTL, since
    no expiration is persisted on disk. An entry found expired in memory is
    dropped from both tiers.

    Writes go to both tiers. Disk failures never propagate: they are logged
    and the key is cached in memory only.

    Example:
        ```python
        store = CacheStore(MemoryCache(), DiskCache("/tmp/cache"))
        await store.set(b'{"ok": true}', "key", expiration=60)
        data = await store.get("key")
        ```
    """

    def __init__(
        self,
        memory: Optional[MemoryCache] = None,
        disk: Optional[DiskCache] = None,
        default_ttl: float = DEFAULT_CACHE_TTL,
    ):
        """
        Initialize the cache store.

        Args:
            memory: Memory tier (a default-sized one is created if None)
            disk: Disk tier (memory-only caching if None)
            default_ttl: TTL in seconds used when set() gets no expiration
        """
        self.memory = memory if memory is not None else MemoryCache()
        self.disk = disk
        self.default_ttl = default_ttl
        self._stats: Dict[str, int] = {
            "memory_hits": 0,
            "disk_hits": 0,
            "misses": 0,
            "sets": 0,
            "expired": 0,
            "disk_errors": 0,
        }

    @property
    def stats(self) -> Dict[str, int]:
        """Snapshot of the store counters plus memory-tier evictions."""
        return {**self._stats, "evictions": self.memory.evictions}

    @classmethod
    def from_config(cls, config: CacheConfig) -> "CacheStore":
        """Create a store from a CacheConfig."""
        return cls(
            memory=MemoryCache(
                max_items=config.memory_count_limit,
                max_bytes=config.memory_size_limit,
            ),
            disk=DiskCache(config.directory, config.namespace),
            default_ttl=config.default_ttl,
        )

    @classmethod
    def in_directory(
        cls,
        directory: Union[str, Path],
        namespace: str = DEFAULT_CACHE_NAMESPACE,
        default_ttl: float = DEFAULT_CACHE_TTL,
    ) -> "CacheStore":
        """Create a store with default memory limits persisting under directory."""
        return cls(disk=DiskCache(directory, namespace), default_ttl=default_ttl)

    async def get(self, key: str) -> Optional[bytes]:
        """
        Get the payload for key.

        Returns:
            Payload bytes if present and not expired, None otherwise
        """
        entry = self.memory.get(key)
        if entry is not None:
            if not entry.is_expired:
                self._stats["memory_hits"] += 1
                return entry.data

            logger.debug(f"Cache entry {key} expired")
            self._stats["expired"] += 1
            await self.remove(key)
            self._stats["misses"] += 1
            return None

        data = await self._read_disk(key)
        if data is None:
            self._stats["misses"] += 1
            return None

        self.memory.set(key, CacheEntry(data=data, expires_at=time.time() + self.default_ttl))
        self._stats["disk_hits"] += 1
        return data

    async def set(self, data: bytes, key: str, expiration: Optional[float] = None) -> None:
        """
        Store data in both tiers.

        Args:
            data: Payload bytes
            key: Cache key
            expiration: TTL in seconds (default TTL if None)
        """
        ttl = self.default_ttl if expiration is None else expiration
        entry = CacheEntry(data=data, expires_at=time.time() + ttl)

        self.memory.set(key, entry)
        self._stats["sets"] += 1

        if self.disk is None:
            return
        try:
            await self.disk.write(key, data)
        except CacheError as e:
            self._stats["disk_errors"] += 1
            logger.warning(f"Disk cache write failed for {key}, keeping memory copy: {e}")

    async def remove(self, key: str) -> None:
        """Delete key from both tiers; absent keys are ignored."""
        self.memory.delete(key)
        if self.disk is None:
            return
        try:
            await self.disk.delete(key)
        except CacheError as e:
            self._stats["disk_errors"] += 1
            logger.warning(f"Disk cache delete failed for {key}: {e}")

    async def clear(self) -> None:
        """Empty the memory tier and delete every durable entry."""
        self.memory.clear()
        if self.disk is None:
            return
        try:
            removed = await self.disk.clear()
            logger.debug(f"Cleared {removed} disk cache entries")
        except CacheError as e:
            self._stats["disk_errors"] += 1
            logger.warning(f"Disk cache clear failed: {e}")

    async def _read_disk(self, key: str) -> Optional[bytes]:
        if self.disk is None:
            return None
        try:
            return await self.disk.read(key)
        except CacheError as e:
            self._stats["disk_errors"] += 1
            logger.warning(f"Disk cache read failed for {key}, treating as miss: {e}")
            return None
