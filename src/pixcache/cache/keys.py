"""Cache key hashing: maps arbitrary keys to filename-safe tokens."""

from __future__ import annotations

import hashlib
from pathlib import Path


def hash_key(key: str) -> str:
    """Return the 32-char lowercase hex MD5 digest of a cache key.

    The digest is used as the on-disk filename. Collisions are not detected:
    two keys hashing identically share one stored file. Lone surrogates
    (keys decoded with ``surrogateescape``) hash like any other code point.
    """
    return hashlib.md5(key.encode("utf-8", "surrogatepass")).hexdigest()


def cache_path_for_key(key: str, root: Path) -> Path:
    """Path of the stored file for ``key`` inside a partition root."""
    return root / hash_key(key)
