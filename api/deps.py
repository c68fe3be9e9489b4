"""
API Dependencies

Dependency injection for the API.
Provides the runtime configuration that supplies request defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from core.config.runtime import RuntimeConfig

logger = logging.getLogger(__name__)


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from a YAML file, then overlay environment variables.

    Search order for config file:
      1. ./merkle.yaml
      2. ./.merkle.yaml
      3. ~/.config/merkle/config.yaml

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "merkle.yaml",
        Path.cwd() / ".merkle.yaml",
        Path.home() / ".config" / "merkle" / "config.yaml",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                config = RuntimeConfig.from_yaml(path)
                logger.info(f"Loaded config from {path}")
                break
            except (OSError, TypeError, yaml.YAMLError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        # No config file found, start with defaults
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_runtime_config() -> RuntimeConfig:
    """FastAPI dependency returning the current runtime configuration."""
    return _load_runtime_config()
