"""Shared Pydantic models for imgcache."""

from __future__ import annotations

from enum import IntEnum, StrEnum
from urllib.parse import urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict

from imgcache.errors.exceptions import InvalidLocatorError

_NETWORK_SCHEMES = frozenset({"http", "https"})

# ── Enums ──


class LoadPriority(IntEnum):
    """Hint for how urgently a resource is needed."""

    LOW = 0
    STANDARD = 1
    HIGH = 2


class RetryStrategy(StrEnum):
    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    FIXED = "fixed"


# ── Addressing ──


class ResourceLocator(BaseModel):
    """An absolute http(s) address of a remote resource.

    ``query`` is None when the URL has no ``?`` at all and ``""`` when it
    has an empty one. ``userinfo`` is kept verbatim for the fetch URL and
    never takes part in the storage key.
    """

    model_config = ConfigDict(frozen=True)

    scheme: str
    host: str
    port: int | None = None
    path: str = "/"
    query: str | None = None
    fragment: str = ""
    userinfo: str = ""

    @property
    def netloc(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is not None:
            host = f"{host}:{self.port}"
        return f"{self.userinfo}@{host}" if self.userinfo else host

    @property
    def url(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query or "", self.fragment))

    def __str__(self) -> str:
        return self.url


class StorageKey(BaseModel):
    """Digest-derived cache key, namespaced by the origin's scheme and host.

    Rendered as ``scheme://host/<digest>``; the digest doubles as the
    on-disk filename.
    """

    model_config = ConfigDict(frozen=True)

    scheme: str
    host: str
    digest: str

    @property
    def namespace(self) -> str:
        return f"{self.scheme}://{self.host}"

    @property
    def filename(self) -> str:
        return self.digest

    def __str__(self) -> str:
        return f"{self.namespace}/{self.digest}"


def parse_locator(url: str | ResourceLocator) -> ResourceLocator:
    """Parse and validate an absolute network URL.

    Raises InvalidLocatorError for non-http(s) schemes, missing hosts and
    malformed ports.
    """
    if isinstance(url, ResourceLocator):
        return url

    if not isinstance(url, str) or not url.strip():
        raise InvalidLocatorError("Locator must be a non-empty URL string", url=str(url))

    url = url.strip()
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise InvalidLocatorError(f"Malformed URL {url!r}: {e}", url=url) from e

    scheme = parts.scheme.lower()
    if scheme not in _NETWORK_SCHEMES:
        raise InvalidLocatorError(
            f"Unsupported scheme {parts.scheme!r} in {url!r} (expected http or https)",
            url=url,
        )
    if not parts.hostname:
        raise InvalidLocatorError(f"URL has no host: {url!r}", url=url)

    userinfo, _, _ = parts.netloc.rpartition("@")
    has_query = "?" in url.partition("#")[0]

    return ResourceLocator(
        scheme=scheme,
        host=parts.hostname,
        port=port,
        path=parts.path or "/",
        query=parts.query if has_query else None,
        fragment=parts.fragment,
        userinfo=userinfo,
    )
