"""Top-level entry points: create_cache(), default_cache(), permanent_cache()."""

from __future__ import annotations

import logging
from typing import Any

from pixcache.cache.manager import ImageCache
from pixcache.concurrency.completion import CompletionContext
from pixcache.config.defaults import DEFAULT_PERMANENT_NAMESPACE
from pixcache.config.hierarchy import load_settings
from pixcache.config.schema import CacheSettings
from pixcache.types import RetentionPolicy
from pixcache.utils.image import ImageCodec
from pixcache.utils.storage import BackupExcluder, write_cachedir_tag

logger = logging.getLogger(__name__)


def create_cache(
    settings: CacheSettings | None = None,
    codec: ImageCodec | None = None,
    completion: CompletionContext | None = None,
    backup_excluder: BackupExcluder | None = write_cachedir_tag,
    **overrides: Any,
) -> ImageCache:
    """Build an :class:`ImageCache` owned by the caller.

    Without ``settings``, they are resolved from the config hierarchy with
    ``overrides`` applied on top.
    """
    if settings is None:
        settings = load_settings(**overrides)
    elif overrides:
        settings = load_settings(**{**settings.model_dump(), **overrides})
    logger.debug(
        "Creating cache %r (expiring=%s, permanent=%s)",
        settings.namespace,
        settings.expiring_root,
        settings.permanent_root,
    )
    return ImageCache(
        settings,
        codec=codec,
        completion=completion,
        backup_excluder=backup_excluder,
    )


def default_cache(**overrides: Any) -> ImageCache:
    """Cache configured from defaults, YAML files and PIXCACHE_* variables."""
    return create_cache(**overrides)


def permanent_cache(**overrides: Any) -> ImageCache:
    """Cache in the ``permanent`` namespace whose files are never swept."""
    overrides.setdefault("namespace", DEFAULT_PERMANENT_NAMESPACE)
    overrides.setdefault("retention", RetentionPolicy.NEVER_EXPIRE)
    return create_cache(**overrides)
