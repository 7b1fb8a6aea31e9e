"""Error handling: exception hierarchy."""

from pixcache.errors.exceptions import CodecError, ConfigError, PixcacheError

__all__ = [
    "PixcacheError",
    "ConfigError",
    "CodecError",
]
