"""Configuration hierarchy: merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.pixcache/config.yaml)
  3. Project config   (./pixcache.yaml, searched upward)
  4. Environment variables (PIXCACHE_*)
  5. Runtime arguments
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pixcache.config.defaults import get_defaults
from pixcache.config.schema import CacheSettings
from pixcache.errors.exceptions import ConfigError

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".pixcache" / "config.yaml"
_PROJECT_CONFIG_NAME = "pixcache.yaml"

# Map of environment variables to config keys
_ENV_MAP: dict[str, str] = {
    "PIXCACHE_NAMESPACE": "namespace",
    "PIXCACHE_CACHE_DIR": "cache_dir",
    "PIXCACHE_DATA_DIR": "data_dir",
    "PIXCACHE_MAX_CACHE_AGE": "max_cache_age",
    "PIXCACHE_RETENTION": "retention",
    "PIXCACHE_MEMORY_COST_LIMIT": "memory_cost_limit",
    "PIXCACHE_MEMORY_COUNT_LIMIT": "memory_count_limit",
    "PIXCACHE_LOG_LEVEL": "log_level",
}

# Keys that should be parsed as specific types
_TYPE_MAP: dict[str, type] = {
    "max_cache_age": float,
    "memory_cost_limit": float,
    "memory_count_limit": int,
    "cache_dir": Path,
    "data_dir": Path,
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()

    # Layer 2: Global config
    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        config.update(global_cfg)

    # Layer 3: Project config (search from cwd upward)
    project_path = _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            config.update(project_cfg)

    # Layer 4: Environment variables
    config.update(_load_env_vars())

    # Layer 5: Runtime arguments (highest priority)
    # Filter out None values; only override when explicitly set
    for key, value in runtime_overrides.items():
        if value is not None:
            config[key] = value

    return config


def load_settings(**runtime_overrides: Any) -> CacheSettings:
    """Resolve the hierarchy and validate it into :class:`CacheSettings`."""
    config = load_config_hierarchy(**runtime_overrides)
    try:
        return CacheSettings(**config)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigError(f"Invalid cache setting '{key}': {first.get('msg')}", key=key) from e


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Config file %s is not a mapping, ignoring", path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
    return None


def _find_project_config() -> Path | None:
    """Search for pixcache.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """Read PIXCACHE_* environment variables."""
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        result[config_key] = _coerce_env_value(config_key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment variable string to the appropriate type."""
    target_type = _TYPE_MAP.get(key)
    if target_type:
        try:
            return target_type(value)
        except (ValueError, TypeError):
            logger.warning(
                "Cannot convert env var for '%s' to %s: %s", key, target_type.__name__, value
            )
            return value

    return value
