"""Pydantic model for cache settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from pixcache.config import defaults
from pixcache.types import RetentionPolicy
from pixcache.utils.storage import expiring_root, permanent_root


class CacheSettings(BaseModel):
    """Resolved settings for one cache instance.

    Two instances resolving to the same roots are not coordinated with each
    other; give each instance its own namespace.
    """

    namespace: str = defaults.DEFAULT_NAMESPACE
    cache_dir: Path = defaults.DEFAULT_CACHE_DIR
    data_dir: Path = defaults.DEFAULT_DATA_DIR
    max_cache_age: float = Field(default=defaults.DEFAULT_MAX_CACHE_AGE, ge=0)
    retention: RetentionPolicy = RetentionPolicy.AGE_BASED
    memory_cost_limit: float = Field(default=defaults.DEFAULT_MEMORY_COST_LIMIT, ge=0)
    memory_count_limit: int = Field(default=defaults.DEFAULT_MEMORY_COUNT_LIMIT, ge=0)
    log_level: str = defaults.DEFAULT_LOG_LEVEL

    @field_validator("namespace")
    @classmethod
    def _check_namespace(cls, value: str) -> str:
        if not value or value.strip() != value:
            raise ValueError("namespace must be a non-empty string without surrounding spaces")
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"namespace must be a single path component, got {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def expiring_root(self) -> Path:
        return expiring_root(self.cache_dir.expanduser(), self.namespace)

    @property
    def permanent_root(self) -> Path:
        return permanent_root(self.data_dir.expanduser(), self.namespace)
