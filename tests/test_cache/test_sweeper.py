"""Tests for age-based eviction of the expiring partition."""

import os

from pixcache.cache.disk import DiskCache
from pixcache.cache.sweeper import DEFAULT_MAX_CACHE_AGE, EvictionSweeper
from pixcache.types import Partition, RetentionPolicy

_NOW = 1_700_000_000.0


def _old_file(disk, key, mtime):
    disk.write(key, b"data")
    os.utime(disk.path_for(key), (mtime, mtime))


class TestEvictionSweeper:
    def test_default_max_age_is_one_week(self):
        assert DEFAULT_MAX_CACHE_AGE == 7 * 24 * 3600
        assert EvictionSweeper().max_age == DEFAULT_MAX_CACHE_AGE

    def test_cutoff_uses_clock(self):
        sweeper = EvictionSweeper(max_age=100, clock=lambda: _NOW)
        assert sweeper.cutoff() == _NOW - 100
        assert sweeper.cutoff(max_age=10) == _NOW - 10

    def test_sweeps_expiring_partition(self, tmp_path):
        disk = DiskCache(tmp_path / "exp", Partition.EXPIRING)
        _old_file(disk, "old", _NOW - 100)
        _old_file(disk, "fresh", _NOW - 99)
        sweeper = EvictionSweeper(max_age=100, clock=lambda: _NOW)

        assert sweeper.sweep(disk, sweeper.cutoff()) == 1
        assert not disk.exists("old")
        assert disk.exists("fresh")

    def test_never_sweeps_permanent_partition(self, tmp_path):
        disk = DiskCache(tmp_path / "perm", Partition.PERMANENT)
        _old_file(disk, "old", _NOW - 1000)
        sweeper = EvictionSweeper(max_age=100, clock=lambda: _NOW)

        assert sweeper.sweep(disk, sweeper.cutoff()) == 0
        assert disk.exists("old")

    def test_never_expire_policy_disables_sweep(self, tmp_path):
        disk = DiskCache(tmp_path / "exp", Partition.EXPIRING)
        _old_file(disk, "old", _NOW - 1000)
        sweeper = EvictionSweeper(
            max_age=100, policy=RetentionPolicy.NEVER_EXPIRE, clock=lambda: _NOW
        )

        assert sweeper.enabled is False
        assert sweeper.sweep(disk, sweeper.cutoff()) == 0
        assert disk.exists("old")
