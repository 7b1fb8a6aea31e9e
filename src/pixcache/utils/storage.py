"""Storage root resolution and backup-exclusion helpers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

BackupExcluder = Callable[[Path], None]

_CACHEDIR_TAG_NAME = "CACHEDIR.TAG"
# Signature defined by https://bford.info/cachedir/
_CACHEDIR_TAG_CONTENT = (
    "Signature: 8a477f597d28d172789f06886806bc55\n"
    "# This file is a cache directory tag created by pixcache.\n"
    "# For information about cache directory tags, see https://bford.info/cachedir/\n"
)
_PERMANENT_SUFFIX = ".permanent"


def write_cachedir_tag(directory: Path) -> None:
    """Mark a directory as excluded from backups with a CACHEDIR.TAG file.

    Honoured by tar (--exclude-caches), borg, restic and others.
    """
    tag = directory / _CACHEDIR_TAG_NAME
    try:
        tag.write_text(_CACHEDIR_TAG_CONTENT)
    except OSError as e:
        logger.warning("Could not mark %s as excluded from backup: %s", directory, e)


def no_backup_exclusion(directory: Path) -> None:
    """Backup excluder that leaves the directory untouched."""


def expiring_root(cache_dir: Path, namespace: str) -> Path:
    return Path(cache_dir) / namespace


def permanent_root(data_dir: Path, namespace: str) -> Path:
    return Path(data_dir) / f"{namespace}{_PERMANENT_SUFFIX}"
