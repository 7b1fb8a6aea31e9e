"""Image cache: orchestrates the memory tier and both disk partitions."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future
from functools import partial
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import SplitResult, urlsplit

from pixcache.cache.disk import DiskCache
from pixcache.cache.memory import MemoryCache
from pixcache.cache.stats import CacheStats, StatsCounter
from pixcache.cache.sweeper import EvictionSweeper
from pixcache.cache.tasks import (
    CacheTiers,
    ClearTask,
    QueryTask,
    RemoveTask,
    StoreTask,
    SweepTask,
)
from pixcache.concurrency.completion import (
    AsyncioCompletion,
    CompletionContext,
    ThreadCompletion,
    inline_completion,
)
from pixcache.concurrency.io_queue import SerialIOQueue
from pixcache.config.schema import CacheSettings
from pixcache.types import CacheType, Partition, QueryResult
from pixcache.utils.image import ImageCodec, PillowCodec, image_cost, scale_for_key
from pixcache.utils.storage import BackupExcluder, write_cachedir_tag

logger = logging.getLogger(__name__)

QueryCallback = Callable[[Any, CacheType], None]

T = TypeVar("T")


class ImageCache:
    """Two-tier image cache: memory → expiring disk → permanent disk.

    Memory is updated on the caller's thread. All disk reads and writes of
    both partitions go through one serial I/O worker, so they run strictly in
    the order they were issued. No operation raises to the caller; disk and
    decode failures are logged and treated as having no effect.

    Disk-path query results are delivered on ``completion`` (a dedicated
    callback thread by default). Instances sharing storage roots are not
    coordinated with each other.
    """

    def __init__(
        self,
        settings: CacheSettings | None = None,
        codec: ImageCodec | None = None,
        completion: CompletionContext | None = None,
        backup_excluder: BackupExcluder | None = write_cachedir_tag,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings or CacheSettings()
        namespace = self._settings.namespace

        self._owned_completion: ThreadCompletion | None = None
        if completion is None:
            self._owned_completion = ThreadCompletion(name=f"pixcache-{namespace}-completion")
            completion = self._owned_completion
        self._completion = completion
        self._io = SerialIOQueue(name=f"pixcache-{namespace}-io")

        self._memory = MemoryCache(
            cost_limit=self._settings.memory_cost_limit,
            count_limit=self._settings.memory_count_limit,
        )
        self._expiring = DiskCache(self._settings.expiring_root, Partition.EXPIRING)
        self._permanent = DiskCache(
            self._settings.permanent_root,
            Partition.PERMANENT,
            backup_excluder=backup_excluder,
        )
        self._sweeper = EvictionSweeper(
            max_age=self._settings.max_cache_age,
            policy=self._settings.retention,
            clock=clock,
        )
        self._tiers = CacheTiers(
            memory=self._memory,
            expiring=self._expiring,
            permanent=self._permanent,
            codec=codec or PillowCodec(),
            sweeper=self._sweeper,
        )
        self._stats = StatsCounter()

    @property
    def settings(self) -> CacheSettings:
        return self._settings

    @property
    def expiring_root(self) -> Path:
        return self._expiring.root

    @property
    def permanent_root(self) -> Path:
        return self._permanent.root

    def path_for_key(self, key: str, permanent: bool = False) -> Path:
        """On-disk location a key is (or would be) stored at."""
        disk = self._permanent if permanent else self._expiring
        return disk.path_for(key)

    # ── Store / query / remove ──

    def store(
        self,
        key: str | None,
        image: Any,
        data: bytes | None = None,
        to_disk: bool = True,
        permanent: bool = False,
        scale: float | None = None,
    ) -> Future[bool | None]:
        """Store in memory now and, if ``to_disk``, queue a disk write.

        ``data`` is the already-encoded payload; when omitted the image is
        encoded on the I/O worker. The returned future resolves to whether
        the disk write succeeded and can be ignored.
        """
        if key is None or image is None:
            return _resolved(None)

        if scale is None:
            scale = scale_for_key(key)
        self._memory.set(key, image, image_cost(image, scale))

        if not to_disk:
            return _resolved(None)

        task = StoreTask(
            key=key,
            partition=Partition.PERMANENT if permanent else Partition.EXPIRING,
            data=data,
            image=None if data is not None else image,
        )
        return self._io.submit(partial(task.run, self._tiers), default=False)

    def query(self, key: str | None, callback: QueryCallback | None) -> None:
        """Look up ``key``; ``callback(image, cache_type)`` is called exactly once.

        Memory hits and ``None`` keys call back before this method returns.
        Otherwise the disk lookup runs on the I/O worker and the result is
        delivered on the completion context.
        """
        self._query(key, callback, self._completion)

    async def query_async(self, key: str | None) -> QueryResult:
        """Awaitable :meth:`query`, resolved on the running event loop."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[QueryResult] = loop.create_future()

        def _done(image: Any, cache_type: CacheType) -> None:
            if not future.done():
                future.set_result(QueryResult(image=image, cache_type=cache_type))

        self._query(key, _done, AsyncioCompletion(loop))
        return await future

    def remove(self, key: str | None, from_disk: bool = True) -> Future[None]:
        """Drop ``key`` from memory and, if ``from_disk``, from both partitions."""
        if key is None:
            return _resolved(None)
        self._memory.remove(key)
        if not from_disk:
            return _resolved(None)
        return self._io.submit(partial(RemoveTask(key).run, self._tiers))

    # ── Bulk operations ──

    def clear_memory(self) -> None:
        self._memory.clear()

    def clear_disk(self) -> Future[None]:
        """Delete both partitions entirely."""
        return self._io.submit(partial(ClearTask().run, self._tiers))

    def sweep_expired(self, max_age: float | None = None) -> Future[int | None]:
        """Remove expiring files older than ``max_age`` (default: max_cache_age).

        The permanent partition is never swept. Resolves to the number of
        files removed.
        """
        if not self._sweeper.enabled:
            return _resolved(0)
        task = SweepTask(cutoff=self._sweeper.cutoff(max_age))
        return self._io.submit(partial(task.run, self._tiers), default=0)

    # ── Permanence ──

    def is_persisted(self, key: str | None) -> bool:
        """True iff the permanent partition holds a file for ``key``."""
        if key is None:
            return False
        return self._permanent.exists(key)

    def url_persisted(self, url: object) -> bool:
        """:meth:`is_persisted` for a URL; non-URL inputs are never persisted."""
        if isinstance(url, str):
            # The key is the URL's own string; geturl() would normalize it
            return bool(urlsplit(url).scheme) and self.is_persisted(url)
        if isinstance(url, SplitResult):
            return bool(url.scheme) and self.is_persisted(url.geturl())
        return False

    def urls_excluding_persisted(self, urls: Iterable[object]) -> list[object]:
        """The subset of ``urls`` not held by the permanent partition."""
        return [url for url in urls if not self.url_persisted(url)]

    # ── Lifecycle hooks ──

    def on_memory_pressure(self) -> None:
        """Wire to the host's low-memory signal."""
        logger.debug("Memory pressure: dropping %d cached image(s)", len(self._memory))
        self.clear_memory()

    def on_terminate(self) -> Future[int | None]:
        """Wire to the host's shutdown signal. Sweeps; never clears."""
        return self.sweep_expired()

    # ── Stats ──

    def stats(self) -> CacheStats:
        return self._stats.snapshot(
            memory_entries=len(self._memory),
            memory_cost=self._memory.total_cost,
        )

    def reset_stats(self) -> None:
        self._stats.reset()

    # ── Worker control ──

    def flush(self, timeout: float | None = None) -> None:
        """Block until all disk work queued so far (and its callbacks) is done."""
        self._io.drain(timeout=timeout)
        if self._owned_completion is not None:
            self._owned_completion.drain(timeout=timeout)

    def close(self) -> None:
        """Finish queued disk work and stop the worker threads."""
        self._io.close()
        if self._owned_completion is not None:
            self._owned_completion.close()

    def __enter__(self) -> ImageCache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _query(
        self,
        key: str | None,
        callback: QueryCallback | None,
        completion: CompletionContext,
    ) -> None:
        if callback is None:
            return

        if key is None:
            self._stats.record(CacheType.NONE)
            inline_completion(partial(callback, None, CacheType.NONE))
            return

        image = self._memory.get(key)
        if image is not None:
            self._stats.record(CacheType.MEMORY)
            inline_completion(partial(callback, image, CacheType.MEMORY))
            return

        def _closed_miss() -> None:
            self._stats.record(CacheType.NONE)
            completion(partial(callback, None, CacheType.NONE))

        task = QueryTask(key=key, scale=scale_for_key(key))
        self._io.submit(
            partial(self._run_query, task, callback, completion),
            on_closed=_closed_miss,
        )

    def _run_query(
        self,
        task: QueryTask,
        callback: QueryCallback,
        completion: CompletionContext,
    ) -> None:
        try:
            result = task.run(self._tiers)
        except Exception:
            logger.exception("Disk lookup failed for %s", task.key)
            result = QueryResult()
        self._stats.record(result.cache_type)
        completion(partial(callback, result.image, result.cache_type))


def _resolved(value: T) -> Future[T]:
    future: Future[T] = Future()
    future.set_result(value)
    return future
