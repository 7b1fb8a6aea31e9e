"""L1 in-memory LRU cache, weighted by image cost."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, NamedTuple

# 0 means unbounded
_DEFAULT_COST_LIMIT = 0
_DEFAULT_COUNT_LIMIT = 0


class _Slot(NamedTuple):
    image: Any
    cost: float


class MemoryCache:
    """Thread-safe in-memory LRU cache with cost-based eviction.

    Entries are evicted oldest-first once the summed cost would exceed
    ``cost_limit`` (or the entry count would exceed ``count_limit``).
    Evicted images are dropped, nothing is written back to disk.
    """

    def __init__(
        self,
        cost_limit: float = _DEFAULT_COST_LIMIT,
        count_limit: int = _DEFAULT_COUNT_LIMIT,
    ) -> None:
        self._store: OrderedDict[str, _Slot] = OrderedDict()
        self._cost_limit = cost_limit
        self._count_limit = count_limit
        self._total_cost = 0.0
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            slot = self._store.get(key)
            if slot is None:
                return None
            # Move to end (most recently used)
            self._store.move_to_end(key)
            return slot.image

    def set(self, key: str, image: Any, cost: float = 0) -> None:
        cost = max(float(cost), 0.0)
        with self._lock:
            if key in self._store:
                self._remove(key)
            # Evict until there's room; an oversized entry ends up stored alone
            while self._store and self._over_limit(cost, extra=1):
                self._evict_oldest()
            self._store[key] = _Slot(image, cost)
            self._total_cost += cost

    def remove(self, key: str) -> None:
        with self._lock:
            self._remove(key)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._total_cost = 0.0

    remove_all = clear

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    @property
    def total_cost(self) -> float:
        with self._lock:
            return self._total_cost

    @property
    def cost_limit(self) -> float:
        return self._cost_limit

    @property
    def count_limit(self) -> int:
        return self._count_limit

    def _over_limit(self, incoming_cost: float, extra: int) -> bool:
        if self._cost_limit and self._total_cost + incoming_cost > self._cost_limit:
            return True
        return bool(self._count_limit and len(self._store) + extra > self._count_limit)

    def _remove(self, key: str) -> None:
        slot = self._store.pop(key, None)
        if slot is not None:
            self._total_cost -= slot.cost

    def _evict_oldest(self) -> None:
        _, slot = self._store.popitem(last=False)
        self._total_cost -= slot.cost
