"""Caller-side retry around ImageCache.resolve.

The cache itself never retries. Callers that want a retry policy wrap their
resolve calls with ``resolve_with_retry``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
    wait_incrementing,
    wait_random,
)
from tenacity.wait import wait_base

from imgcache.errors.exceptions import NetworkError
from imgcache.types import LoadPriority, ResourceLocator, RetryStrategy

if TYPE_CHECKING:
    from imgcache.cache.manager import ImageCache

logger = logging.getLogger(__name__)

_MAX_WAIT = 60.0  # seconds


def is_transient(exc: BaseException) -> bool:
    """Only transient network failures are worth another attempt."""
    return isinstance(exc, NetworkError) and exc.transient


def build_wait(
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL,
    initial_wait: float = 1.0,
    jitter: bool = True,
) -> wait_base:
    """Build a tenacity wait policy for the given strategy."""
    if strategy == RetryStrategy.EXPONENTIAL:
        wait: wait_base = wait_exponential(multiplier=initial_wait, max=_MAX_WAIT)
    elif strategy == RetryStrategy.LINEAR:
        wait = wait_incrementing(start=initial_wait, increment=initial_wait, max=_MAX_WAIT)
    else:  # FIXED
        wait = wait_fixed(initial_wait)

    if jitter and initial_wait > 0:
        wait = wait + wait_random(0, initial_wait * 0.25)
    return wait


async def resolve_with_retry(
    cache: ImageCache,
    locator: ResourceLocator | str,
    priority: LoadPriority = LoadPriority.STANDARD,
    max_attempts: int = 3,
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL,
    initial_wait: float = 1.0,
    jitter: bool = True,
) -> bytes:
    """Resolve a locator, retrying transient network errors with backoff.

    Non-transient errors (4xx other than 408/429, unknown failures) are
    raised on the first attempt. After the last attempt the final error is
    re-raised unchanged.
    """
    data = b""
    async for attempt in AsyncRetrying(
        retry=retry_if_exception(is_transient),
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=build_wait(strategy, initial_wait, jitter),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            data = await cache.resolve(locator, priority)
    return data
