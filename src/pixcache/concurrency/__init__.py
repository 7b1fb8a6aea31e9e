"""Concurrency: serial disk worker and callback completion contexts."""

from pixcache.concurrency.completion import (
    AsyncioCompletion,
    CompletionContext,
    ThreadCompletion,
    inline_completion,
)
from pixcache.concurrency.io_queue import SerialIOQueue

__all__ = [
    "AsyncioCompletion",
    "CompletionContext",
    "SerialIOQueue",
    "ThreadCompletion",
    "inline_completion",
]
