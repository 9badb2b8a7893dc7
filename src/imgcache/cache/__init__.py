"""Cache subsystem: memory, disk and network tiers with digest keys."""

from imgcache.cache.disk import DiskStore, FileDiskStore
from imgcache.cache.keys import KeyHasher, derive_key, hash_path_and_query
from imgcache.cache.manager import ImageCache
from imgcache.cache.memory import MemoryStore
from imgcache.cache.stats import CacheStats

__all__ = [
    "ImageCache",
    "MemoryStore",
    "DiskStore",
    "FileDiskStore",
    "KeyHasher",
    "CacheStats",
    "derive_key",
    "hash_path_and_query",
]
