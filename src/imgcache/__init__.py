"""imgcache: tiered memory/disk/network cache for remote images."""

from imgcache.cache.disk import DiskStore, FileDiskStore
from imgcache.cache.keys import KeyHasher, derive_key
from imgcache.cache.manager import ImageCache
from imgcache.cache.memory import MemoryStore
from imgcache.cache.stats import CacheStats
from imgcache.config.schema import CacheSettings
from imgcache.core import create_image_cache
from imgcache.errors.exceptions import (
    FileError,
    ImageCacheError,
    InvalidLocatorError,
    NetworkError,
    SpaceQueryError,
    UnknownError,
)
from imgcache.errors.retry import resolve_with_retry
from imgcache.fetch.client import HttpFetcher, RemoteFetcher
from imgcache.types import LoadPriority, ResourceLocator, StorageKey, parse_locator

__all__ = [
    "ImageCache",
    "create_image_cache",
    "resolve_with_retry",
    "MemoryStore",
    "DiskStore",
    "FileDiskStore",
    "RemoteFetcher",
    "HttpFetcher",
    "KeyHasher",
    "derive_key",
    "CacheStats",
    "CacheSettings",
    "LoadPriority",
    "ResourceLocator",
    "StorageKey",
    "parse_locator",
    "ImageCacheError",
    "NetworkError",
    "FileError",
    "SpaceQueryError",
    "UnknownError",
    "InvalidLocatorError",
]
