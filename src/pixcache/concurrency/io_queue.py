"""Serial I/O worker: one thread executing disk tasks in enqueue order."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SerialIOQueue:
    """Single-worker task queue giving total ordering of disk operations.

    Tasks never raise into the caller: an exception escaping a task is logged
    and the returned future resolves to ``default`` instead.
    """

    def __init__(self, name: str = "pixcache-io") -> None:
        self._name = name
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(
        self,
        fn: Callable[[], T],
        default: T | None = None,
        on_closed: Callable[[], None] | None = None,
    ) -> Future[T | None]:
        """Enqueue ``fn``. Returns a future resolving to its result.

        Once the queue is closed, ``fn`` is dropped: ``on_closed`` (if given)
        runs on the calling thread and the future resolves to ``default``.
        """
        with self._lock:
            if not self._closed:
                return self._executor.submit(self._run, fn, default)

        logger.debug("%s is closed, dropping task %r", self._name, fn)
        if on_closed is not None:
            on_closed()
        dropped: Future[T | None] = Future()
        dropped.set_result(default)
        return dropped

    def drain(self, timeout: float | None = None) -> None:
        """Block until every task enqueued before this call has run."""
        with self._lock:
            if self._closed:
                return
            marker = self._executor.submit(lambda: None)
        marker.result(timeout=timeout)

    def close(self) -> None:
        """Run the remaining tasks, then stop the worker."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)

    def _run(self, fn: Callable[[], T], default: T | None) -> T | None:
        try:
            return fn()
        except Exception:
            logger.exception("Task %r failed on %s", fn, self._name)
            return default
