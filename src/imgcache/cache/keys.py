"""Cache key derivation: SHA-256 of path+query, namespaced by origin."""

from __future__ import annotations

import hashlib
from urllib.parse import unquote

from imgcache.types import ResourceLocator, StorageKey, parse_locator


class KeyHasher:
    """Derives StorageKeys from resource locators.

    Only the decoded path and the raw query take part in the digest, so
    fragments, ports and credentials never change a key. A trailing slash
    on a non-root path is dropped, making ``/a`` and ``/a/`` one entry.
    """

    def derive(self, locator: ResourceLocator | str) -> StorageKey:
        locator = parse_locator(locator)
        return StorageKey(
            scheme=locator.scheme,
            host=locator.host,
            digest=hash_path_and_query(locator.path, locator.query),
        )


def normalize_path(path: str) -> str:
    """Percent-decode ``path`` and strip trailing slashes, keeping ``/``."""
    return unquote(path).rstrip("/") or "/"


def hash_path_and_query(path: str, query: str | None = None) -> str:
    """Hex SHA256 of the normalized path plus ``?query`` when a query is present.

    An empty query (``""``) still contributes the ``?`` separator; only
    None omits it.
    """
    combined = normalize_path(path)
    if query is not None:
        combined += "?" + query
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()


def derive_key(locator: ResourceLocator | str) -> StorageKey:
    """Module-level shortcut for ``KeyHasher().derive``."""
    return _DEFAULT_HASHER.derive(locator)


_DEFAULT_HASHER = KeyHasher()
