"""
Runtime Configuration

Central configuration for tree construction, the proof driver and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "MERKLE_"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


@dataclass
class TreeConfig:
    """Shape of the sparse Merkle tree."""
    height: int = 128
    scheme: str = "string-sha256"


@dataclass
class DriverConfig:
    """Inputs for the proof pipeline driver."""
    leaf_count: int = 10
    proof_index: int = 0
    proof_path: str = "merkle-proof.json"
    expected_valid: bool = True


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    driver: DriverConfig = field(default_factory=DriverConfig)
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - MERKLE_TREE_HEIGHT: Tree height (8-128)
        - MERKLE_HASH_SCHEME: Registered hash scheme name
        - MERKLE_LEAF_COUNT: Number of leaves the driver loads
        - MERKLE_PROOF_INDEX: Leaf index the driver proves
        - MERKLE_PROOF_PATH: Where the driver persists the proof artifact
        - MERKLE_EXPECTED_VALID: Whether the driver expects the proof to verify
        - MERKLE_LOG_LEVEL: Log level
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}TREE_HEIGHT"):
            overrides.setdefault("tree", {})["height"] = int(os.getenv(f"{ENV_PREFIX}TREE_HEIGHT"))
        if os.getenv(f"{ENV_PREFIX}HASH_SCHEME"):
            overrides.setdefault("tree", {})["scheme"] = os.getenv(f"{ENV_PREFIX}HASH_SCHEME")

        if os.getenv(f"{ENV_PREFIX}LEAF_COUNT"):
            overrides.setdefault("driver", {})["leaf_count"] = int(os.getenv(f"{ENV_PREFIX}LEAF_COUNT"))
        if os.getenv(f"{ENV_PREFIX}PROOF_INDEX"):
            overrides.setdefault("driver", {})["proof_index"] = int(os.getenv(f"{ENV_PREFIX}PROOF_INDEX"))
        if os.getenv(f"{ENV_PREFIX}PROOF_PATH"):
            overrides.setdefault("driver", {})["proof_path"] = os.getenv(f"{ENV_PREFIX}PROOF_PATH")
        if os.getenv(f"{ENV_PREFIX}EXPECTED_VALID"):
            overrides.setdefault("driver", {})["expected_valid"] = _parse_bool(
                os.getenv(f"{ENV_PREFIX}EXPECTED_VALID")
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        driver_data = data.get("driver", {})

        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()
        driver = DriverConfig(**driver_data) if driver_data else DriverConfig()

        return cls(
            tree=tree,
            driver=driver,
            log_level=data.get("log_level", "INFO"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            for key, value in overrides["tree"].items():
                setattr(new_config.tree, key, value)

        if "driver" in overrides:
            for key, value in overrides["driver"].items():
                setattr(new_config.driver, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "height": self.tree.height,
                "scheme": self.tree.scheme,
            },
            "driver": {
                "leaf_count": self.driver.leaf_count,
                "proof_index": self.driver.proof_index,
                "proof_path": self.driver.proof_path,
                "expected_valid": self.driver.expected_valid,
            },
            "log_level": self.log_level,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
