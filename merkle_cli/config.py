"""
CLI Configuration

Configuration management for the Merkle CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path


# Environment variable prefix
ENV_PREFIX = "MERKLE_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree defaults
    height: int = 128
    scheme: str = "string-sha256"

    # Driver defaults
    leaf_count: int = 10
    proof_index: int = 0
    proof_path: str = "merkle-proof.json"

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables."""
    config = CLIConfig()

    if os.getenv(f"{ENV_PREFIX}TREE_HEIGHT"):
        config.height = int(os.getenv(f"{ENV_PREFIX}TREE_HEIGHT", "128"))
    if os.getenv(f"{ENV_PREFIX}HASH_SCHEME"):
        config.scheme = os.getenv(f"{ENV_PREFIX}HASH_SCHEME", config.scheme)
    if os.getenv(f"{ENV_PREFIX}LEAF_COUNT"):
        config.leaf_count = int(os.getenv(f"{ENV_PREFIX}LEAF_COUNT", "10"))
    if os.getenv(f"{ENV_PREFIX}PROOF_INDEX"):
        config.proof_index = int(os.getenv(f"{ENV_PREFIX}PROOF_INDEX", "0"))
    if os.getenv(f"{ENV_PREFIX}PROOF_PATH"):
        config.proof_path = os.getenv(f"{ENV_PREFIX}PROOF_PATH", config.proof_path)

    config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()

    config.height = data.get("height", config.height)
    config.scheme = data.get("scheme", config.scheme)

    config.leaf_count = data.get("leaf_count", config.leaf_count)
    config.proof_index = data.get("proof_index", config.proof_index)
    config.proof_path = data.get("proof_path", config.proof_path)

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get("default_output_format", config.default_output_format)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path and config_path.exists():
        config = load_config_from_file(config_path)

    default_paths = [
        Path.cwd() / "merkle.json",
        Path.cwd() / ".merkle.json",
        Path.home() / ".config" / "merkle" / "config.json",
    ]

    if config_path is None:
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    env_config = load_config_from_env()

    # Env takes precedence
    if os.getenv(f"{ENV_PREFIX}TREE_HEIGHT"):
        config.height = env_config.height
    if os.getenv(f"{ENV_PREFIX}HASH_SCHEME"):
        config.scheme = env_config.scheme
    if os.getenv(f"{ENV_PREFIX}LEAF_COUNT"):
        config.leaf_count = env_config.leaf_count
    if os.getenv(f"{ENV_PREFIX}PROOF_INDEX"):
        config.proof_index = env_config.proof_index
    if os.getenv(f"{ENV_PREFIX}PROOF_PATH"):
        config.proof_path = env_config.proof_path
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = env_config.log_level
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = env_config.log_file

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "height": 128,
  "scheme": "string-sha256",
  "leaf_count": 10,
  "proof_index": 0,
  "proof_path": "merkle-proof.json",
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human"
}
"""
