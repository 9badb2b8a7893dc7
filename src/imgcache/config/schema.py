"""Pydantic model for resolved cache settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from imgcache.config.defaults import (
    DEFAULT_CACHE_DIR,
    DEFAULT_FOLLOW_REDIRECTS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MEMORY_MB,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
)
from imgcache.types import RetryStrategy


class CacheSettings(BaseModel):
    """Validated settings for building an ImageCache."""

    model_config = ConfigDict(extra="ignore")

    cache_dir: Path = DEFAULT_CACHE_DIR
    memory_max_mb: float = Field(default=DEFAULT_MEMORY_MB, gt=0)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = DEFAULT_FOLLOW_REDIRECTS
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)
    retry_strategy: RetryStrategy = RetryStrategy.EXPONENTIAL
    log_level: str = DEFAULT_LOG_LEVEL
