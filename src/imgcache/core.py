"""Composition root: build an ImageCache from settings."""

from __future__ import annotations

import logging
from typing import Any

from imgcache.cache.disk import FileDiskStore
from imgcache.cache.keys import KeyHasher
from imgcache.cache.manager import ImageCache
from imgcache.cache.memory import MemoryStore
from imgcache.config.hierarchy import load_settings
from imgcache.config.schema import CacheSettings
from imgcache.fetch.client import HttpFetcher

logger = logging.getLogger(__name__)


def create_image_cache(settings: CacheSettings | None = None, **overrides: Any) -> ImageCache:
    """Wire the production tiers into an ImageCache.

    Without explicit settings the full config hierarchy is loaded, with
    ``overrides`` applied on top. The caller owns the returned instance and
    should ``aclose()`` it (or use ``async with``) when done.
    """
    if settings is None:
        settings = load_settings(**overrides)
    elif overrides:
        settings = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    logger.debug(
        "Creating image cache (dir=%s, memory=%.1f MB)", settings.cache_dir, settings.memory_max_mb
    )
    return ImageCache(
        memory=MemoryStore(max_size_mb=settings.memory_max_mb),
        disk=FileDiskStore(cache_dir=settings.cache_dir),
        fetcher=HttpFetcher(
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
            follow_redirects=settings.follow_redirects,
        ),
        hasher=KeyHasher(),
    )
