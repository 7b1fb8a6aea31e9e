"""Custom exception hierarchy for pixcache."""

from __future__ import annotations

from typing import Any


class PixcacheError(Exception):
    """Base exception for all pixcache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(PixcacheError):
    """Invalid cache settings, raised at construction time, never by cache ops.

    Examples: empty namespace, namespace containing a path separator,
    negative age or cost limit.
    """

    def __init__(self, message: str = "", key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class CodecError(PixcacheError):
    """Image encode/decode failure.

    Raised by codecs; the cache catches it and treats the payload as a miss.
    """

    def __init__(
        self,
        message: str = "",
        operation: str = "decode",
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.original = original
