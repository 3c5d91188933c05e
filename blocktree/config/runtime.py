"""
Runtime Configuration

Central configuration for tree construction, the reverse reader and
logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from blocktree.crypto.hashing import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGEST_SIZE,
    HashlibHasher,
    new_hasher,
)
from blocktree.streams.reverse_reader import DEFAULT_BUFFER_SIZE

load_dotenv()


ENV_PREFIX = "BLOCKTREE_"


@dataclass
class TreeConfig:
    """Configuration for Merkle tree construction."""
    block_size: int = 1024
    hash_algorithm: str = DEFAULT_ALGORITHM
    digest_size: int = DEFAULT_DIGEST_SIZE


@dataclass
class ReaderConfig:
    """Configuration for the reverse seek reader."""
    buffer_size: int = DEFAULT_BUFFER_SIZE


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    def new_hasher(self) -> HashlibHasher:
        """Fresh checksum primitive for the configured algorithm."""
        return new_hasher(self.tree.hash_algorithm, self.tree.digest_size)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - BLOCKTREE_BLOCK_SIZE: Bytes per leaf block
        - BLOCKTREE_HASH_ALGORITHM: hashlib algorithm name
        - BLOCKTREE_DIGEST_SIZE: Digest size for blake2b/blake2s
        - BLOCKTREE_READ_BUFFER: Reverse reader buffer size
        - BLOCKTREE_LOG_LEVEL: Log level
        - BLOCKTREE_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        # Tree settings
        if os.getenv(f"{ENV_PREFIX}BLOCK_SIZE"):
            overrides.setdefault("tree", {})["block_size"] = int(os.getenv(f"{ENV_PREFIX}BLOCK_SIZE"))
        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}DIGEST_SIZE"):
            overrides.setdefault("tree", {})["digest_size"] = int(os.getenv(f"{ENV_PREFIX}DIGEST_SIZE"))

        # Reader settings
        if os.getenv(f"{ENV_PREFIX}READ_BUFFER"):
            overrides.setdefault("reader", {})["buffer_size"] = int(os.getenv(f"{ENV_PREFIX}READ_BUFFER"))

        # Logging
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
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
        reader_data = data.get("reader", {})
        logging_data = data.get("logging", {})

        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()
        reader = ReaderConfig(**reader_data) if reader_data else ReaderConfig()
        log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        return cls(
            tree=tree,
            reader=reader,
            logging=log,
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

        import copy
        new_config = copy.deepcopy(self)

        for section in ("tree", "reader", "logging"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "block_size": self.tree.block_size,
                "hash_algorithm": self.tree.hash_algorithm,
                "digest_size": self.tree.digest_size,
            },
            "reader": {
                "buffer_size": self.reader.buffer_size,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
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
