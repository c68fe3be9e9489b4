"""
Runtime Configuration Module

Provides configuration loading and management for trees and the proof driver.
"""

from .runtime import (
    DriverConfig,
    RuntimeConfig,
    TreeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "DriverConfig",
    "RuntimeConfig",
    "TreeConfig",
    "get_default_config",
    "set_default_config",
]
