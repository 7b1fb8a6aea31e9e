"""Cache subsystem: memory tier plus expiring and permanent disk partitions."""

from pixcache.cache.disk import DiskCache
from pixcache.cache.keys import cache_path_for_key, hash_key
from pixcache.cache.manager import ImageCache, QueryCallback
from pixcache.cache.memory import MemoryCache
from pixcache.cache.stats import CacheStats
from pixcache.cache.sweeper import EvictionSweeper

__all__ = [
    "CacheStats",
    "DiskCache",
    "EvictionSweeper",
    "ImageCache",
    "MemoryCache",
    "QueryCallback",
    "cache_path_for_key",
    "hash_key",
]
