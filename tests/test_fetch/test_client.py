"""Tests for the HTTP fetcher."""

import httpx
import pytest

from imgcache.errors.exceptions import NetworkError
from imgcache.fetch.client import HttpFetcher, RemoteFetcher, priority_header
from imgcache.types import LoadPriority, parse_locator

LOCATOR = parse_locator("https://example.com/a.png?v=2#frag")


def _fetcher(handler) -> HttpFetcher:
    return HttpFetcher(transport=httpx.MockTransport(handler))


class TestPriorityHeader:
    def test_high_is_interactive(self):
        assert priority_header(LoadPriority.HIGH) == "u=1"

    def test_low_and_standard_are_default_class(self):
        assert priority_header(LoadPriority.STANDARD) == "u=3"
        assert priority_header(LoadPriority.LOW) == "u=3"


class TestHttpFetcher:
    async def test_returns_body(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"TestImageData")

        async with _fetcher(handler) as fetcher:
            data = await fetcher.fetch(LOCATOR, LoadPriority.STANDARD)

        assert data == b"TestImageData"
        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/a.png"
        assert seen[0].url.query == b"v=2"

    async def test_sets_priority_header(self):
        headers: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            headers.append(request.headers["Priority"])
            return httpx.Response(200, content=b"x")

        async with _fetcher(handler) as fetcher:
            await fetcher.fetch(LOCATOR, LoadPriority.HIGH)
            await fetcher.fetch(LOCATOR, LoadPriority.LOW)

        assert headers == ["u=1", "u=3"]

    async def test_sends_user_agent(self):
        agents: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            agents.append(request.headers["User-Agent"])
            return httpx.Response(200, content=b"x")

        fetcher = HttpFetcher(user_agent="test-agent/1.0", transport=httpx.MockTransport(handler))
        try:
            await fetcher.fetch(LOCATOR)
        finally:
            await fetcher.close()
        assert agents == ["test-agent/1.0"]

    @pytest.mark.parametrize("status", [404, 500, 503])
    async def test_non_2xx_raises_network_error(self, status):
        async with _fetcher(lambda request: httpx.Response(status)) as fetcher:
            with pytest.raises(NetworkError) as exc_info:
                await fetcher.fetch(LOCATOR, LoadPriority.STANDARD)

        err = exc_info.value
        assert err.http_status == status
        assert isinstance(err.original, httpx.HTTPStatusError)
        assert err.url == LOCATOR.url

    async def test_transport_failure_raises_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("dns failure", request=request)

        async with _fetcher(handler) as fetcher:
            with pytest.raises(NetworkError) as exc_info:
                await fetcher.fetch(LOCATOR, LoadPriority.STANDARD)

        assert exc_info.value.http_status is None
        assert exc_info.value.transient is True
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_timeout_raises_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _fetcher(handler) as fetcher:
            with pytest.raises(NetworkError):
                await fetcher.fetch(LOCATOR, LoadPriority.STANDARD)

    async def test_no_retry_on_failure(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(503)

        async with _fetcher(handler) as fetcher:
            with pytest.raises(NetworkError):
                await fetcher.fetch(LOCATOR, LoadPriority.HIGH)
        assert calls == 1

    async def test_follows_redirects(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old.png":
                return httpx.Response(301, headers={"Location": "https://example.com/new.png"})
            return httpx.Response(200, content=b"moved")

        async with _fetcher(handler) as fetcher:
            data = await fetcher.fetch(parse_locator("https://example.com/old.png"))
        assert data == b"moved"

    async def test_ipv6_literal_host(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"v6")

        async with _fetcher(handler) as fetcher:
            data = await fetcher.fetch(parse_locator("http://[::1]:8080/a.png"))

        assert data == b"v6"
        assert seen[0].url.host == "::1"
        assert seen[0].url.port == 8080
        assert seen[0].url.path == "/a.png"

    def test_satisfies_protocol(self):
        assert isinstance(_fetcher(lambda request: httpx.Response(200)), RemoteFetcher)
