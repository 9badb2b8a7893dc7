"""Resolution statistics model."""

from __future__ import annotations

from pydantic import BaseModel


class CacheStats(BaseModel):
    """Counters for where resolve calls were answered."""

    memory_hits: int = 0
    disk_hits: int = 0
    network_fetches: int = 0
    fetch_failures: int = 0
    disk_writes: int = 0
    skipped_writes: int = 0
    storage_errors: int = 0

    @property
    def hits(self) -> int:
        return self.memory_hits + self.disk_hits

    @property
    def requests(self) -> int:
        return self.hits + self.network_fetches + self.fetch_failures

    @property
    def hit_rate(self) -> float:
        total = self.requests
        return self.hits / total if total > 0 else 0.0
