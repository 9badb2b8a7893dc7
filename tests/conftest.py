import pytest

from imgcache.cache.manager import ImageCache
from imgcache.cache.memory import MemoryStore
from imgcache.types import LoadPriority, ResourceLocator, StorageKey

MAX_FREE_BYTES = 2**63 - 1


class InMemoryDiskStore:
    """Disk tier double: dict-backed, records every call."""

    def __init__(self, free_bytes: int = MAX_FREE_BYTES) -> None:
        self.files: dict[str, bytes] = {}
        self.free_bytes = free_bytes
        self.read_calls: list[StorageKey] = []
        self.write_calls: list[tuple[StorageKey, bytes]] = []
        self.space_calls = 0
        self.read_error: Exception | None = None
        self.write_error: Exception | None = None
        self.space_error: Exception | None = None

    async def read(self, key: StorageKey) -> bytes | None:
        self.read_calls.append(key)
        if self.read_error:
            raise self.read_error
        return self.files.get(key.filename)

    async def write(self, key: StorageKey, data: bytes) -> None:
        self.write_calls.append((key, data))
        if self.write_error:
            raise self.write_error
        self.files[key.filename] = data

    def available_bytes(self) -> int:
        self.space_calls += 1
        if self.space_error:
            raise self.space_error
        return self.free_bytes


class FakeFetcher:
    """Origin tier double returning a fixed payload or raising."""

    def __init__(self, payload: bytes = b"TestImageData", error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[tuple[ResourceLocator, LoadPriority]] = []

    async def fetch(self, locator: ResourceLocator, priority: LoadPriority) -> bytes:
        self.calls.append((locator, priority))
        if self.error:
            raise self.error
        return self.payload


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def disk_store():
    return InMemoryDiskStore()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def image_cache(memory_store, disk_store, fetcher):
    return ImageCache(memory=memory_store, disk=disk_store, fetcher=fetcher)


@pytest.fixture
def sample_image_bytes():
    """Minimal valid PNG for testing (1x1 white pixel)."""
    import base64
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4"
        "nGP4z8BQDwAEgAF/pooBPQAAAABJRU5ErkJggg=="
    )


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point every config layer at an empty temp location."""
    import imgcache.config.hierarchy as hierarchy

    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    monkeypatch.chdir(tmp_path)
    for var in list(hierarchy._ENV_MAP):
        monkeypatch.delenv(var, raising=False)
    return tmp_path
