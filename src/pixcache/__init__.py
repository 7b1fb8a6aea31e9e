"""pixcache: two-tier (memory + disk) image cache with a permanent partition."""

from pixcache.cache.manager import ImageCache
from pixcache.config.schema import CacheSettings
from pixcache.core import create_cache, default_cache, permanent_cache
from pixcache.types import CacheType, Partition, QueryResult, RetentionPolicy

__version__ = "0.1.0"

__all__ = [
    "CacheSettings",
    "CacheType",
    "ImageCache",
    "Partition",
    "QueryResult",
    "RetentionPolicy",
    "create_cache",
    "default_cache",
    "permanent_cache",
]
