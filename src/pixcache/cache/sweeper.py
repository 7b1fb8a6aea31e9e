"""Age-based cleanup of the expiring partition."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from pixcache.cache.disk import DiskCache
from pixcache.types import Partition, RetentionPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_CACHE_AGE = 7 * 24 * 3600  # 1 week


class EvictionSweeper:
    """Removes expiring-partition files older than ``max_age`` seconds.

    Under ``RetentionPolicy.NEVER_EXPIRE`` sweeping is disabled entirely; the
    owner is responsible for removal. The permanent partition is never swept.
    """

    def __init__(
        self,
        max_age: float = DEFAULT_MAX_CACHE_AGE,
        policy: RetentionPolicy = RetentionPolicy.AGE_BASED,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._max_age = max_age
        self._policy = policy
        self._clock = clock

    @property
    def max_age(self) -> float:
        return self._max_age

    @property
    def enabled(self) -> bool:
        return self._policy == RetentionPolicy.AGE_BASED

    def cutoff(self, max_age: float | None = None) -> float:
        """Modification-time cutoff: files at or before it are expired."""
        age = self._max_age if max_age is None else max_age
        return self._clock() - age

    def sweep(self, disk: DiskCache, cutoff: float) -> int:
        """Sweep ``disk`` with an inclusive cutoff. Runs on the I/O worker."""
        if not self.enabled:
            return 0
        if disk.partition != Partition.EXPIRING:
            logger.debug("Refusing to sweep %s partition at %s", disk.partition, disk.root)
            return 0
        removed = disk.sweep(cutoff)
        if removed:
            logger.info("Swept %d expired file(s) from %s", removed, disk.root)
        return removed
