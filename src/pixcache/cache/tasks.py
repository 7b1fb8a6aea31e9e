"""Disk tasks: immutable messages executed on the serial I/O worker.

Each task carries everything it needs (key, payload, partition) by value and
is run against the cache's tiers via ``task.run(tiers)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pixcache.cache.disk import DiskCache
from pixcache.cache.memory import MemoryCache
from pixcache.cache.sweeper import EvictionSweeper
from pixcache.errors.exceptions import CodecError
from pixcache.types import CacheType, Partition, QueryResult
from pixcache.utils.image import ImageCodec, image_cost

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheTiers:
    """The tiers and collaborators a task runs against."""

    memory: MemoryCache
    expiring: DiskCache
    permanent: DiskCache
    codec: ImageCodec
    sweeper: EvictionSweeper

    def disk(self, partition: Partition) -> DiskCache:
        return self.permanent if partition == Partition.PERMANENT else self.expiring

    @property
    def disks(self) -> tuple[DiskCache, DiskCache]:
        return (self.expiring, self.permanent)


@dataclass(frozen=True)
class StoreTask:
    """Write an image to one partition, encoding it first if no bytes were given."""

    key: str
    partition: Partition
    data: bytes | None = None
    image: Any = None

    def run(self, tiers: CacheTiers) -> bool:
        data = self.data
        if data is None:
            if self.image is None:
                return False
            try:
                data = tiers.codec.encode(self.image)
            except CodecError as e:
                logger.warning("Not writing %s to disk: %s", self.key, e)
                return False
        return tiers.disk(self.partition).write(self.key, data)


@dataclass(frozen=True)
class QueryTask:
    """Look a key up on disk (expiring, then permanent) and promote a hit."""

    key: str
    scale: float = 1.0

    def run(self, tiers: CacheTiers) -> QueryResult:
        for disk in tiers.disks:
            data = disk.read(self.key)
            if data is None:
                continue
            try:
                image = tiers.codec.decode(data)
            except CodecError as e:
                logger.warning("Undecodable entry for %s in %s: %s", self.key, disk.root, e)
                continue
            tiers.memory.set(self.key, image, image_cost(image, self.scale))
            return QueryResult(image=image, cache_type=CacheType.DISK)
        logger.debug("Disk miss for %s", self.key)
        return QueryResult()


@dataclass(frozen=True)
class RemoveTask:
    """Remove a key from every partition, wherever it was stored."""

    key: str

    def run(self, tiers: CacheTiers) -> None:
        for disk in tiers.disks:
            disk.remove(self.key)


@dataclass(frozen=True)
class ClearTask:
    partitions: tuple[Partition, ...] = (Partition.EXPIRING, Partition.PERMANENT)

    def run(self, tiers: CacheTiers) -> None:
        for partition in self.partitions:
            tiers.disk(partition).clear()


@dataclass(frozen=True)
class SweepTask:
    """Remove expiring files modified at or before ``cutoff``."""

    cutoff: float

    def run(self, tiers: CacheTiers) -> int:
        return tiers.sweeper.sweep(tiers.expiring, self.cutoff)
