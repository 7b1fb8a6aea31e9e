"""L2 disk cache: one content-addressed directory per partition."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from pixcache.cache.keys import cache_path_for_key
from pixcache.types import Partition
from pixcache.utils.storage import BackupExcluder

logger = logging.getLogger(__name__)


class DiskCache:
    """Directory of encoded images named by ``hash_key(key)``.

    Every method except :meth:`exists` must run on the owning cache's serial
    I/O worker; the class itself does no locking. All filesystem failures are
    logged and swallowed.
    """

    def __init__(
        self,
        root: Path,
        partition: Partition = Partition.EXPIRING,
        backup_excluder: BackupExcluder | None = None,
    ) -> None:
        self._root = Path(root)
        self._partition = partition
        self._backup_excluder = backup_excluder

    @property
    def root(self) -> Path:
        return self._root

    @property
    def partition(self) -> Partition:
        return self._partition

    def path_for(self, key: str) -> Path:
        return cache_path_for_key(key, self._root)

    def write(self, key: str, data: bytes) -> bool:
        """Write (or overwrite) the file for ``key``. Returns success."""
        if not self._ensure_root():
            return False
        path = self.path_for(key)
        # Hidden temp name keeps partial writes out of sweeps
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.warning("Disk write failed for %s in %s: %s", key, self._root, e)
            tmp_path.unlink(missing_ok=True)
            return False
        return True

    def read(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Disk read failed for %s in %s: %s", key, self._root, e)
            return None

    def remove(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Disk remove failed for %s in %s: %s", key, self._root, e)

    def clear(self) -> None:
        """Remove the whole partition root."""
        try:
            shutil.rmtree(self._root)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to clear %s: %s", self._root, e)

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def sweep(self, cutoff: float) -> int:
        """Remove every non-hidden file modified at or before ``cutoff``.

        Returns the number of files removed.
        """
        removed = 0
        try:
            entries = list(os.scandir(self._root))
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.warning("Failed to scan %s: %s", self._root, e)
            return 0

        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
                if entry.stat(follow_symlinks=False).st_mtime <= cutoff:
                    os.unlink(entry.path)
                    removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning("Failed to sweep %s: %s", entry.path, e)
        return removed

    def _ensure_root(self) -> bool:
        if self._root.is_dir():
            return True
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Cannot create cache directory %s: %s", self._root, e)
            return False
        if self._backup_excluder is not None:
            try:
                self._backup_excluder(self._root)
            except Exception as e:
                logger.warning("Backup exclusion failed for %s: %s", self._root, e)
        return True
