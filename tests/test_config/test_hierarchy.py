"""Tests for config hierarchy."""

from pathlib import Path

import pytest

from pixcache.config import hierarchy
from pixcache.config.hierarchy import (
    _coerce_env_value,
    _load_yaml_config,
    load_config_hierarchy,
    load_settings,
)
from pixcache.errors.exceptions import ConfigError
from pixcache.types import RetentionPolicy


class TestLoadConfigHierarchy:
    def test_returns_defaults(self):
        config = load_config_hierarchy()
        assert config["namespace"] == "default"
        assert config["max_cache_age"] == 604800

    def test_runtime_overrides(self):
        config = load_config_hierarchy(namespace="thumbs", max_cache_age=60)
        assert config["namespace"] == "thumbs"
        assert config["max_cache_age"] == 60

    def test_none_overrides_ignored(self):
        config = load_config_hierarchy(namespace=None)
        assert config["namespace"] == "default"

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("PIXCACHE_NAMESPACE", "avatars")
        config = load_config_hierarchy()
        assert config["namespace"] == "avatars"

    def test_runtime_beats_env(self, monkeypatch):
        monkeypatch.setenv("PIXCACHE_NAMESPACE", "avatars")
        config = load_config_hierarchy(namespace="thumbs")
        assert config["namespace"] == "thumbs"

    def test_env_numeric_coercion(self, monkeypatch):
        monkeypatch.setenv("PIXCACHE_MEMORY_COUNT_LIMIT", "10")
        monkeypatch.setenv("PIXCACHE_MAX_CACHE_AGE", "3600")
        config = load_config_hierarchy()
        assert config["memory_count_limit"] == 10
        assert isinstance(config["memory_count_limit"], int)
        assert config["max_cache_age"] == 3600.0

    def test_env_path_coercion(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PIXCACHE_CACHE_DIR", str(tmp_path))
        config = load_config_hierarchy()
        assert config["cache_dir"] == tmp_path

    def test_project_config(self, tmp_path, monkeypatch):
        (tmp_path / "pixcache.yaml").write_text("namespace: project\nmax_cache_age: 120\n")
        monkeypatch.chdir(tmp_path)
        config = load_config_hierarchy()
        assert config["namespace"] == "project"
        assert config["max_cache_age"] == 120

    def test_project_config_found_upward(self, tmp_path, monkeypatch):
        (tmp_path / "pixcache.yaml").write_text("namespace: parent\n")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        assert load_config_hierarchy()["namespace"] == "parent"

    def test_global_config(self, tmp_path, monkeypatch):
        global_cfg = tmp_path / "global.yaml"
        global_cfg.write_text("namespace: global\nretention: never_expire\n")
        monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", global_cfg)
        config = load_config_hierarchy()
        assert config["namespace"] == "global"
        assert config["retention"] == "never_expire"

    def test_env_beats_project(self, tmp_path, monkeypatch):
        (tmp_path / "pixcache.yaml").write_text("namespace: project\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PIXCACHE_NAMESPACE", "env")
        assert load_config_hierarchy()["namespace"] == "env"


class TestLoadSettings:
    def test_validated_model(self, tmp_path):
        settings = load_settings(cache_dir=tmp_path, retention="never_expire")
        assert settings.cache_dir == tmp_path
        assert settings.retention == RetentionPolicy.NEVER_EXPIRE

    def test_invalid_value_raises_config_error(self):
        with pytest.raises(ConfigError) as exc_info:
            load_settings(max_cache_age=-1)
        assert exc_info.value.key == "max_cache_age"

    def test_invalid_env_value_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("PIXCACHE_MEMORY_COUNT_LIMIT", "lots")
        with pytest.raises(ConfigError):
            load_settings()


class TestLoadYamlConfig:
    def test_missing_file(self, tmp_path):
        assert _load_yaml_config(tmp_path / "nope.yaml") is None

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert _load_yaml_config(path) is None

    def test_malformed_yaml_ignored(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("namespace: [unclosed\n")
        assert _load_yaml_config(path) is None


class TestCoerceEnvValue:
    def test_float(self):
        assert _coerce_env_value("max_cache_age", "1.5") == 1.5

    def test_int(self):
        assert _coerce_env_value("memory_count_limit", "7") == 7

    def test_path(self):
        assert _coerce_env_value("data_dir", "/tmp/x") == Path("/tmp/x")

    def test_bad_number_kept_as_string(self):
        assert _coerce_env_value("memory_count_limit", "many") == "many"

    def test_plain_string(self):
        assert _coerce_env_value("namespace", "abc") == "abc"
