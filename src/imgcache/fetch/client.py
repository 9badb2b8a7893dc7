"""Async HTTP fetcher for remote payloads."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx

from imgcache.config.defaults import DEFAULT_REQUEST_TIMEOUT, DEFAULT_USER_AGENT
from imgcache.errors.exceptions import NetworkError
from imgcache.types import LoadPriority, ResourceLocator

logger = logging.getLogger(__name__)

# RFC 9218 urgency: u=1 is interactive, u=3 is the default class
_PRIORITY_HEADERS: dict[LoadPriority, str] = {
    LoadPriority.HIGH: "u=1",
    LoadPriority.STANDARD: "u=3",
    LoadPriority.LOW: "u=3",
}


@runtime_checkable
class RemoteFetcher(Protocol):
    """Origin tier capability: fetch the full body of a resource."""

    async def fetch(self, locator: ResourceLocator, priority: LoadPriority) -> bytes: ...


def priority_header(priority: LoadPriority) -> str:
    return _PRIORITY_HEADERS[LoadPriority(priority)]


class HttpFetcher:
    """Fetches resources with a shared httpx.AsyncClient.

    One GET per call and no retries; any transport failure or non-2xx status
    surfaces as NetworkError.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=follow_redirects,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    async def fetch(
        self,
        locator: ResourceLocator,
        priority: LoadPriority = LoadPriority.STANDARD,
    ) -> bytes:
        """GET the locator and return the response body."""
        priority = LoadPriority(priority)
        url = locator.url
        headers = {"Priority": priority_header(priority)}
        try:
            response = await self._client.get(url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise NetworkError(
                f"GET {url} returned HTTP {status}",
                http_status=status,
                url=url,
                original=e,
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                f"GET {url} failed: {type(e).__name__}: {e}",
                url=url,
                original=e,
            ) from e

        logger.debug(
            "Fetched %s (%d bytes, priority=%s)", url, len(response.content), priority.name
        )
        return response.content

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
