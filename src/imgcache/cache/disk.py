"""Disk tier: flat directory of digest-named payload files."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from imgcache.config.defaults import DEFAULT_CACHE_DIR
from imgcache.errors.exceptions import FileError, SpaceQueryError
from imgcache.types import StorageKey

logger = logging.getLogger(__name__)

_TEMP_PREFIX = ".tmp-"


@runtime_checkable
class DiskStore(Protocol):
    """Persistent tier capability: read, write and free-space query."""

    async def read(self, key: StorageKey) -> bytes | None: ...

    async def write(self, key: StorageKey, data: bytes) -> None: ...

    def available_bytes(self) -> int: ...


class FileDiskStore:
    """Stores each payload as ``<cache_dir>/<digest>``.

    The directory is created on first write. Writes go through a temp file
    and an atomic rename, serialized by an asyncio lock. Blocking file I/O
    runs in a worker thread.

    Filenames carry only the path+query digest, not the origin. Two hosts
    serving the same path (``https://a.example.com/img.png`` and
    ``https://b.example.com/img.png``) share one file here even though their
    StorageKeys differ. Callers mixing origins with colliding paths should
    give each origin its own ``cache_dir``.
    """

    def __init__(self, cache_dir: Path | str | None = None) -> None:
        self._cache_dir = Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR
        self._lock = asyncio.Lock()

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def path_for(self, key: StorageKey) -> Path:
        return self._cache_dir / key.filename

    async def read(self, key: StorageKey) -> bytes | None:
        return await asyncio.to_thread(self._read_file, self.path_for(key))

    async def write(self, key: StorageKey, data: bytes) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write_file, self.path_for(key), data)

    def available_bytes(self) -> int:
        probe = self._cache_dir
        try:
            probe = self._existing_ancestor()
            return shutil.disk_usage(probe).free
        except OSError as e:
            raise SpaceQueryError(
                f"Cannot determine free space for {probe}: {e}", path=probe, original=e
            ) from e

    @property
    def entry_count(self) -> int:
        return sum(1 for _ in self._entries())

    @property
    def size_bytes(self) -> int:
        total = 0
        for path in self._entries():
            try:
                total += path.stat().st_size
            except FileNotFoundError:
                continue
        return total

    def clear(self) -> int:
        """Delete every cached file. Returns the number removed."""
        removed = 0
        for path in self._entries():
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise FileError(f"Cannot remove {path}: {e}", path=path, original=e) from e
            removed += 1
        logger.info("Removed %d files from %s", removed, self._cache_dir)
        return removed

    def _entries(self) -> Iterator[Path]:
        if not self._cache_dir.is_dir():
            return
        for path in self._cache_dir.iterdir():
            if path.is_file() and not path.name.startswith("."):
                yield path

    def _existing_ancestor(self) -> Path:
        for candidate in [self._cache_dir, *self._cache_dir.parents]:
            if candidate.exists():
                return candidate
        return self._cache_dir

    @staticmethod
    def _read_file(path: Path) -> bytes | None:
        try:
            if not path.is_file():
                return None
            return path.read_bytes()
        except FileNotFoundError:
            # Pruned between the existence check and the read
            return None
        except OSError as e:
            raise FileError(f"Cannot read {path}: {e}", path=path, original=e) from e

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, dir=path.parent)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise FileError(f"Cannot write {path}: {e}", path=path, original=e) from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
