"""Memory tier: bounded in-process LRU of raw payloads."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

from imgcache.types import StorageKey

logger = logging.getLogger(__name__)

_DEFAULT_MAX_SIZE_MB = 100


class MemoryStore:
    """In-memory LRU cache with size-based eviction.

    All operations take an internal lock, so the store can be shared between
    coroutines and threads without outside coordination.
    """

    def __init__(self, max_size_mb: float = _DEFAULT_MAX_SIZE_MB) -> None:
        self._store: OrderedDict[StorageKey, bytes] = OrderedDict()
        self._max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._current_size_bytes = 0
        self._lock = threading.Lock()

    def get(self, key: StorageKey) -> bytes | None:
        with self._lock:
            data = self._store.get(key)
            if data is None:
                return None
            # Move to end (most recently used)
            self._store.move_to_end(key)
            return data

    def put(self, key: StorageKey, data: bytes) -> None:
        size = len(data)
        with self._lock:
            self._remove(key)
            if size > self._max_size_bytes:
                logger.debug("Payload for %s (%d bytes) exceeds memory budget", key, size)
                return
            # Evict until there's room
            while self._current_size_bytes + size > self._max_size_bytes and self._store:
                self._evict_oldest()
            self._store[key] = data
            self._current_size_bytes += size

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._current_size_bytes = 0

    @property
    def size_bytes(self) -> int:
        return self._current_size_bytes

    @property
    def max_size_bytes(self) -> int:
        return self._max_size_bytes

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def _remove(self, key: StorageKey) -> None:
        data = self._store.pop(key, None)
        if data is not None:
            self._current_size_bytes -= len(data)

    def _evict_oldest(self) -> None:
        key, data = self._store.popitem(last=False)
        self._current_size_bytes -= len(data)
        logger.debug("Evicted %s from memory tier", key)
