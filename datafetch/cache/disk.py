"""
Durable on-disk cache tier.

Each entry is a single file in the namespace directory, named by its cache
key and holding the raw payload bytes. No expiration metadata is written.
"""

import logging
import uuid
from pathlib import Path
from typing import List, Optional, Union

import aiofiles
import aiofiles.os

from ..exceptions import CacheError

logger = logging.getLogger(__name__)

_TEMP_SUFFIX = ".tmp"


class DiskCache:
    """
    File-based cache tier with persistent storage.

    Keys are used verbatim as file names, so they must be single path
    components (the URL-safe base64 keys produced by the fetch orchestrator
    are). Operations on different keys are independent; concurrent writes to
    the same key resolve as last-write-wins.

    Read and write failures are raised as CacheError; the cache store decides
    whether to swallow them.
    """

    def __init__(self, directory: Union[str, Path], namespace: str = "DataFetcherCache"):
        """
        Initialize the disk tier.

        Args:
            directory: Base cache directory
            namespace: Sub-directory owned by this cache
        """
        self.cache_dir = Path(directory) / namespace
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create cache directory {self.cache_dir}: {e}")

    def path_for(self, key: str) -> Path:
        """Return the file path for key."""
        if not key or key in (".", "..") or "/" in key or "\\" in key or "\x00" in key:
            raise CacheError(ValueError(f"invalid cache key {key!r}"), key=key)
        return self.cache_dir / key

    async def read(self, key: str) -> Optional[bytes]:
        """
        Read the payload stored under key.

        Returns:
            The payload bytes, or None if no file exists for key
        """
        cache_file = self.path_for(key)
        try:
            async with aiofiles.open(cache_file, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheError(e, key=key) from e

    async def write(self, key: str, data: bytes) -> None:
        """Write data under key, replacing any existing file atomically."""
        cache_file = self.path_for(key)
        temp_file = self.cache_dir / f".{key}.{uuid.uuid4().hex}{_TEMP_SUFFIX}"
        try:
            await aiofiles.os.makedirs(self.cache_dir, exist_ok=True)
            async with aiofiles.open(temp_file, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(temp_file, cache_file)
        except OSError as e:
            try:
                await aiofiles.os.remove(temp_file)
            except OSError:
                pass
            raise CacheError(e, key=key) from e

    async def delete(self, key: str) -> bool:
        """Delete the file for key; returns whether it existed."""
        cache_file = self.path_for(key)
        try:
            await aiofiles.os.remove(cache_file)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CacheError(e, key=key) from e

    async def clear(self) -> int:
        """
        Delete every file in the namespace directory.

        Returns:
            Number of files removed
        """
        removed = 0
        try:
            names = await aiofiles.os.listdir(self.cache_dir)
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise CacheError(e) from e

        for name in names:
            try:
                await aiofiles.os.remove(self.cache_dir / name)
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Could not remove cache file {name}: {e}")
        return removed

    async def keys(self) -> List[str]:
        """Get all stored cache keys."""
        try:
            names = await aiofiles.os.listdir(self.cache_dir)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise CacheError(e) from e
        return sorted(
            name
            for name in names
            if not (name.startswith(".") and name.endswith(_TEMP_SUFFIX))
        )
