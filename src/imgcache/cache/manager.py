"""Image cache: resolves payloads through memory, disk and network tiers."""

from __future__ import annotations

import logging
import threading

from imgcache.cache.disk import DiskStore
from imgcache.cache.keys import KeyHasher
from imgcache.cache.memory import MemoryStore
from imgcache.cache.stats import CacheStats
from imgcache.errors.exceptions import (
    FileError,
    ImageCacheError,
    SpaceQueryError,
    UnknownError,
)
from imgcache.fetch.client import RemoteFetcher
from imgcache.types import LoadPriority, ResourceLocator, StorageKey, parse_locator

logger = logging.getLogger(__name__)


class ImageCache:
    """Three-tier cache: memory → disk → network.

    Tiers are consulted strictly in that order and the first hit wins. A disk
    hit is promoted into memory. A network fetch is written to disk only when
    the volume has strictly more free space than the payload, and always to
    memory. Storage failures are logged and never fail a resolve; only fetch
    errors reach the caller.

    Concurrent misses for the same key are not coalesced: each one fetches
    and writes, and the identical writes make the last one win harmlessly.
    """

    def __init__(
        self,
        memory: MemoryStore,
        disk: DiskStore,
        fetcher: RemoteFetcher,
        hasher: KeyHasher | None = None,
    ) -> None:
        self._memory = memory
        self._disk = disk
        self._fetcher = fetcher
        self._hasher = hasher or KeyHasher()
        self._stats = CacheStats()
        self._stats_lock = threading.Lock()

    @property
    def memory(self) -> MemoryStore:
        return self._memory

    @property
    def disk(self) -> DiskStore:
        return self._disk

    @property
    def hasher(self) -> KeyHasher:
        return self._hasher

    def key_for(self, locator: ResourceLocator | str) -> StorageKey:
        return self._hasher.derive(locator)

    async def resolve(
        self,
        locator: ResourceLocator | str,
        priority: LoadPriority = LoadPriority.STANDARD,
    ) -> bytes:
        """Return the payload for a locator from the cheapest tier holding it.

        Raises NetworkError (or UnknownError) when every tier misses and the
        fetch fails; nothing is stored in that case.
        """
        locator = parse_locator(locator)
        key = self._hasher.derive(locator)

        # Memory
        data = self._memory.get(key)
        if data is not None:
            logger.debug("Memory hit for %s", key)
            self._record("memory_hits")
            return data

        # Disk
        data = await self._read_disk(key)
        if data is not None:
            logger.debug("Disk hit for %s, promoting to memory", key)
            self._memory.put(key, data)
            self._record("disk_hits")
            return data

        # Network
        data = await self._fetch(locator, priority)
        await self._persist(key, data)
        self._memory.put(key, data)
        return data

    def stats(self) -> CacheStats:
        """Return a snapshot of resolution statistics."""
        with self._stats_lock:
            return self._stats.model_copy()

    async def aclose(self) -> None:
        close = getattr(self._fetcher, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> ImageCache:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _read_disk(self, key: StorageKey) -> bytes | None:
        try:
            return await self._disk.read(key)
        except FileError as e:
            logger.warning("Disk read failed for %s, treating as miss: %s", key, e)
            self._record("storage_errors")
            return None
        except Exception:
            logger.exception("Unexpected disk read failure for %s, treating as miss", key)
            self._record("storage_errors")
            return None

    async def _fetch(self, locator: ResourceLocator, priority: LoadPriority) -> bytes:
        try:
            data = await self._fetcher.fetch(locator, priority)
        except ImageCacheError:
            self._record("fetch_failures")
            raise
        except Exception as e:
            self._record("fetch_failures")
            raise UnknownError(f"Unexpected failure fetching {locator}: {e}", original=e) from e
        logger.debug("Fetched %s (%d bytes)", locator, len(data))
        self._record("network_fetches")
        return data

    async def _persist(self, key: StorageKey, data: bytes) -> None:
        size = len(data)
        try:
            available = self._disk.available_bytes()
        except SpaceQueryError as e:
            logger.warning("Skipping disk write for %s: %s", key, e)
            self._record("skipped_writes")
            return
        except Exception:
            logger.exception("Unexpected free-space failure for %s, skipping disk write", key)
            self._record("storage_errors")
            return

        if available <= size:
            logger.info(
                "Skipping disk write for %s: %d bytes free, payload is %d", key, available, size
            )
            self._record("skipped_writes")
            return

        try:
            await self._disk.write(key, data)
        except FileError as e:
            logger.warning("Disk write failed for %s: %s", key, e)
            self._record("storage_errors")
            return
        except Exception:
            logger.exception("Unexpected disk write failure for %s", key)
            self._record("storage_errors")
            return
        self._record("disk_writes")

    def _record(self, counter: str) -> None:
        with self._stats_lock:
            setattr(self._stats, counter, getattr(self._stats, counter) + 1)
