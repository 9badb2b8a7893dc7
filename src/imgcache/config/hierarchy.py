"""Configuration hierarchy: merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.imgcache/config.yaml)
  3. Project config   (./imgcache.yaml, searched upward from cwd)
  4. Environment variables (IMGCACHE_*)
  5. Runtime arguments

Values are merged as found; type coercion and range checks happen once, in
CacheSettings validation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from imgcache.config.defaults import get_defaults
from imgcache.config.schema import CacheSettings

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".imgcache" / "config.yaml"
_PROJECT_CONFIG_NAME = "imgcache.yaml"

_ENV_MAP: dict[str, str] = {
    "IMGCACHE_CACHE_DIR": "cache_dir",
    "IMGCACHE_MEMORY_MB": "memory_max_mb",
    "IMGCACHE_TIMEOUT": "request_timeout",
    "IMGCACHE_USER_AGENT": "user_agent",
    "IMGCACHE_FOLLOW_REDIRECTS": "follow_redirects",
    "IMGCACHE_MAX_RETRIES": "max_retries",
    "IMGCACHE_RETRY_STRATEGY": "retry_strategy",
    "IMGCACHE_LOG_LEVEL": "log_level",
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Merge every configuration layer into one dict.

    Runtime overrides set to None are skipped so unset CLI options fall
    through to the lower layers.
    """
    config: dict[str, Any] = {}
    for source, layer in _config_layers():
        if layer:
            logger.debug("Config layer %s sets %s", source, sorted(layer))
            config.update(layer)

    config.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return config


def load_settings(**runtime_overrides: Any) -> CacheSettings:
    """Resolve the config hierarchy and validate it into CacheSettings."""
    return CacheSettings.model_validate(load_config_hierarchy(**runtime_overrides))


def _config_layers() -> Iterator[tuple[str, dict[str, Any] | None]]:
    yield "defaults", get_defaults()
    yield str(_GLOBAL_CONFIG_PATH), _load_yaml_config(_GLOBAL_CONFIG_PATH)

    project_path = _find_project_config()
    if project_path:
        yield str(project_path), _load_yaml_config(project_path)

    yield "environment", {
        key: os.environ[var] for var, key in _ENV_MAP.items() if var in os.environ
    }


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML mapping, or None if the file is missing or unusable."""
    if not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if isinstance(data, dict):
        return data
    logger.warning("Config file %s is not a mapping, ignoring", path)
    return None


def _find_project_config() -> Path | None:
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None
