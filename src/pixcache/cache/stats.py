"""Cache statistics model and thread-safe counters."""

from __future__ import annotations

import threading

from pydantic import BaseModel

from pixcache.types import CacheType


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    memory_entries: int = 0
    memory_cost: float = 0.0
    memory_hits: int = 0
    disk_hits: int = 0
    misses: int = 0

    @property
    def hits(self) -> int:
        return self.memory_hits + self.disk_hits

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class StatsCounter:
    """Hit/miss counters shared by the caller thread and the I/O worker."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts = {CacheType.MEMORY: 0, CacheType.DISK: 0, CacheType.NONE: 0}

    def record(self, cache_type: CacheType) -> None:
        with self._lock:
            self._counts[cache_type] += 1

    def snapshot(self, memory_entries: int = 0, memory_cost: float = 0.0) -> CacheStats:
        with self._lock:
            return CacheStats(
                memory_entries=memory_entries,
                memory_cost=memory_cost,
                memory_hits=self._counts[CacheType.MEMORY],
                disk_hits=self._counts[CacheType.DISK],
                misses=self._counts[CacheType.NONE],
            )

    def reset(self) -> None:
        with self._lock:
            for cache_type in self._counts:
                self._counts[cache_type] = 0
