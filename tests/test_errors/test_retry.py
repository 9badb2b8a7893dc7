"""Tests for caller-side retry around resolve."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from tenacity.wait import wait_base

from imgcache.errors.exceptions import NetworkError, UnknownError
from imgcache.errors.retry import build_wait, is_transient, resolve_with_retry
from imgcache.types import LoadPriority, RetryStrategy

URL = "https://example.com/a.png"


def _cache(side_effect) -> MagicMock:
    cache = MagicMock()
    cache.resolve = AsyncMock(side_effect=side_effect)
    return cache


class TestIsTransient:
    def test_transport_error(self):
        assert is_transient(NetworkError("dns"))

    def test_server_error(self):
        assert is_transient(NetworkError("bad gateway", http_status=502))

    def test_client_error(self):
        assert not is_transient(NetworkError("gone", http_status=404))

    def test_other_errors(self):
        assert not is_transient(UnknownError("odd"))
        assert not is_transient(ValueError("nope"))


class TestBuildWait:
    @pytest.mark.parametrize("strategy", list(RetryStrategy))
    def test_builds_wait_for_each_strategy(self, strategy):
        assert isinstance(build_wait(strategy, initial_wait=1.0), wait_base)

    def test_zero_wait_without_jitter(self):
        wait = build_wait(RetryStrategy.FIXED, initial_wait=0.0, jitter=False)
        state = MagicMock()
        state.attempt_number = 3
        assert wait(state) == 0


class TestResolveWithRetry:
    async def test_success_first_try(self):
        cache = _cache([b"data"])
        assert await resolve_with_retry(cache, URL, initial_wait=0) == b"data"
        cache.resolve.assert_awaited_once_with(URL, LoadPriority.STANDARD)

    async def test_retries_transient_then_succeeds(self):
        cache = _cache([NetworkError("reset"), NetworkError("503", http_status=503), b"data"])
        data = await resolve_with_retry(
            cache, URL, LoadPriority.HIGH, max_attempts=3, initial_wait=0
        )
        assert data == b"data"
        assert cache.resolve.await_count == 3

    async def test_gives_up_after_max_attempts(self):
        last = NetworkError("still down", http_status=503)
        cache = _cache([NetworkError("down", http_status=503), last])
        with pytest.raises(NetworkError) as exc_info:
            await resolve_with_retry(cache, URL, max_attempts=2, initial_wait=0)
        assert exc_info.value is last
        assert cache.resolve.await_count == 2

    async def test_non_transient_not_retried(self):
        cache = _cache([NetworkError("not found", http_status=404), b"never"])
        with pytest.raises(NetworkError):
            await resolve_with_retry(cache, URL, max_attempts=5, initial_wait=0)
        assert cache.resolve.await_count == 1

    async def test_unknown_error_not_retried(self):
        cache = _cache([UnknownError("odd"), b"never"])
        with pytest.raises(UnknownError):
            await resolve_with_retry(cache, URL, max_attempts=5, initial_wait=0)
        assert cache.resolve.await_count == 1

    async def test_single_attempt(self):
        cache = _cache([NetworkError("reset")])
        with pytest.raises(NetworkError):
            await resolve_with_retry(cache, URL, max_attempts=1, initial_wait=0)
        assert cache.resolve.await_count == 1
