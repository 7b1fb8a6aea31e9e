"""Completion contexts: where asynchronous query results are delivered."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

logger = logging.getLogger(__name__)


class CompletionContext(Protocol):
    """Anything that can run a zero-argument callback somewhere else."""

    def __call__(self, fn: Callable[[], None]) -> None: ...


class ThreadCompletion:
    """Deliver callbacks on a dedicated thread, separate from the I/O worker."""

    def __init__(self, name: str = "pixcache-completion") -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._closed = False

    def __call__(self, fn: Callable[[], None]) -> None:
        if not self._closed:
            try:
                self._executor.submit(_invoke, fn)
                return
            except RuntimeError:
                pass
        # Still honour the exactly-once callback contract
        _invoke(fn)

    def drain(self, timeout: float | None = None) -> None:
        if not self._closed:
            self._executor.submit(lambda: None).result(timeout=timeout)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)


class AsyncioCompletion:
    """Deliver callbacks on an asyncio event loop (the app's main context)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def __call__(self, fn: Callable[[], None]) -> None:
        self._loop.call_soon_threadsafe(_invoke, fn)


def inline_completion(fn: Callable[[], None]) -> None:
    """Run the callback on whichever thread produced the result."""
    _invoke(fn)


def _invoke(fn: Callable[[], None]) -> None:
    try:
        fn()
    except Exception:
        logger.exception("Query callback raised")
