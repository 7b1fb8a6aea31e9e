"""Tests for the CacheSettings model."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pixcache.config.schema import CacheSettings
from pixcache.types import RetentionPolicy


class TestCacheSettings:
    def test_defaults(self):
        settings = CacheSettings()
        assert settings.namespace == "default"
        assert settings.max_cache_age == 7 * 24 * 3600
        assert settings.retention == RetentionPolicy.AGE_BASED
        assert settings.memory_cost_limit == 0

    def test_storage_roots(self, tmp_path):
        settings = CacheSettings(
            namespace="thumbs", cache_dir=tmp_path / "c", data_dir=tmp_path / "d"
        )
        assert settings.expiring_root == tmp_path / "c" / "thumbs"
        assert settings.permanent_root == tmp_path / "d" / "thumbs.permanent"

    def test_home_expanded(self):
        settings = CacheSettings(cache_dir=Path("~/somewhere"))
        assert "~" not in str(settings.expiring_root)

    @pytest.mark.parametrize("namespace", ["", "a/b", "a\\b", "..", " padded"])
    def test_rejects_bad_namespace(self, namespace):
        with pytest.raises(ValidationError):
            CacheSettings(namespace=namespace)

    def test_rejects_negative_limits(self):
        with pytest.raises(ValidationError):
            CacheSettings(memory_cost_limit=-1)
        with pytest.raises(ValidationError):
            CacheSettings(max_cache_age=-5)

    def test_log_level_normalized(self):
        assert CacheSettings(log_level="debug").log_level == "DEBUG"

    def test_retention_from_string(self):
        assert CacheSettings(retention="never_expire").retention == RetentionPolicy.NEVER_EXPIRE
