"""Shared enums and Pydantic models for pixcache."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

# ── Enums ──


class Partition(StrEnum):
    EXPIRING = "expiring"
    PERMANENT = "permanent"


class CacheType(StrEnum):
    """Where a query result came from."""

    NONE = "none"
    MEMORY = "memory"
    DISK = "disk"


class RetentionPolicy(StrEnum):
    AGE_BASED = "age_based"
    NEVER_EXPIRE = "never_expire"


# ── Runtime models ──


class QueryResult(BaseModel):
    """Outcome of a cache query."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    image: Any = None
    cache_type: CacheType = CacheType.NONE

    @property
    def found(self) -> bool:
        return self.image is not None
