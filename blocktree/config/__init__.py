"""
Runtime Configuration Module

Provides configuration loading and management for blocktree.
"""

from .runtime import (
    RuntimeConfig,
    TreeConfig,
    ReaderConfig,
    LoggingConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "ReaderConfig",
    "LoggingConfig",
    "get_default_config",
    "set_default_config",
]
