"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Storage
DEFAULT_NAMESPACE = "default"
DEFAULT_PERMANENT_NAMESPACE = "permanent"
DEFAULT_CACHE_DIR = Path.home() / ".pixcache" / "caches"
DEFAULT_DATA_DIR = Path.home() / ".pixcache" / "data"

# Expiration
DEFAULT_MAX_CACHE_AGE = 60 * 60 * 24 * 7  # 1 week, in seconds
DEFAULT_RETENTION = "age_based"

# Memory tier (0 = unbounded)
DEFAULT_MEMORY_COST_LIMIT = 0.0
DEFAULT_MEMORY_COUNT_LIMIT = 0

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "namespace": DEFAULT_NAMESPACE,
        "cache_dir": DEFAULT_CACHE_DIR,
        "data_dir": DEFAULT_DATA_DIR,
        "max_cache_age": DEFAULT_MAX_CACHE_AGE,
        "retention": DEFAULT_RETENTION,
        "memory_cost_limit": DEFAULT_MEMORY_COST_LIMIT,
        "memory_count_limit": DEFAULT_MEMORY_COUNT_LIMIT,
        "log_level": DEFAULT_LOG_LEVEL,
    }
