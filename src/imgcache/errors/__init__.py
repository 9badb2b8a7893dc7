"""Error handling: exception hierarchy and caller-side retry."""

from imgcache.errors.exceptions import (
    FileError,
    ImageCacheError,
    InvalidLocatorError,
    NetworkError,
    SpaceQueryError,
    UnknownError,
)

__all__ = [
    "ImageCacheError",
    "NetworkError",
    "FileError",
    "SpaceQueryError",
    "UnknownError",
    "InvalidLocatorError",
]
