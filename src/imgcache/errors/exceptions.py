"""Custom exception hierarchy for imgcache."""

from __future__ import annotations

from pathlib import Path
from typing import Any

_TRANSIENT_STATUSES = {408, 429}


class ImageCacheError(Exception):
    """Base exception for all imgcache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(ImageCacheError):
    """The origin was unreachable or answered with a failure status.

    Terminal for a single resolve call; the caller decides whether to retry.
    """

    def __init__(
        self,
        message: str = "",
        http_status: int | None = None,
        url: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.url = url
        self.original = original

    @property
    def transient(self) -> bool:
        """True for transport failures, 408, 429 and 5xx responses."""
        if self.http_status is None:
            return True
        return self.http_status in _TRANSIENT_STATUSES or self.http_status >= 500


class FileError(ImageCacheError):
    """Disk I/O failed while reading or writing a cache file."""

    def __init__(
        self,
        message: str = "",
        path: Path | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.original = original


class SpaceQueryError(ImageCacheError):
    """Free space on the cache volume could not be determined."""

    def __init__(
        self,
        message: str = "",
        path: Path | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.original = original


class UnknownError(ImageCacheError):
    """Catch-all for failures that fit no other category."""

    def __init__(self, message: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class InvalidLocatorError(ImageCacheError, ValueError):
    """A URL is not an absolute http(s) address."""

    def __init__(self, message: str = "", url: str = "") -> None:
        super().__init__(message)
        self.url = url
