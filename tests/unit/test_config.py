"""
Runtime Configuration Unit Tests
Tests for blocktree/config/runtime.py
"""
import hashlib

import pytest

from blocktree.config.runtime import (
    LoggingConfig,
    ReaderConfig,
    RuntimeConfig,
    TreeConfig,
    get_default_config,
    set_default_config,
)
from blocktree.crypto.hashing import DEFAULT_ALGORITHM, DEFAULT_DIGEST_SIZE
from blocktree.streams.reverse_reader import DEFAULT_BUFFER_SIZE


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.tree.block_size == 1024
        assert config.tree.hash_algorithm == DEFAULT_ALGORITHM
        assert config.tree.digest_size == DEFAULT_DIGEST_SIZE
        assert config.reader.buffer_size == DEFAULT_BUFFER_SIZE
        assert config.logging.level == "INFO"
        assert config.logging.file is None
        assert config.extra == {}

    def test_default_hasher_is_blake2b_256(self):
        h = RuntimeConfig().new_hasher()
        h.write(b"abc")

        assert h.digest() == hashlib.blake2b(b"abc", digest_size=32).digest()

    def test_configured_hasher(self):
        config = RuntimeConfig(tree=TreeConfig(hash_algorithm="sha256"))
        h = config.new_hasher()
        h.write(b"abc")

        assert h.digest() == hashlib.sha256(b"abc").digest()


class TestFromDict:
    """Tests for dictionary loading."""

    def test_partial_data(self):
        config = RuntimeConfig.from_dict({"tree": {"block_size": 64}})

        assert config.tree.block_size == 64
        assert config.tree.hash_algorithm == DEFAULT_ALGORITHM
        assert config.reader == ReaderConfig()
        assert config.logging == LoggingConfig()

    def test_empty_dict(self):
        assert RuntimeConfig.from_dict({}).to_dict() == RuntimeConfig().to_dict()

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            RuntimeConfig.from_dict({"tree": {"blok_size": 64}})

    def test_to_dict_round_trip(self):
        config = RuntimeConfig(
            tree=TreeConfig(block_size=10, hash_algorithm="sha256"),
            reader=ReaderConfig(buffer_size=128),
            logging=LoggingConfig(level="DEBUG", file="/tmp/bt.log"),
            extra={"owner": "ops"},
        )

        assert RuntimeConfig.from_dict(config.to_dict()) == config


class TestFromYaml:
    """Tests for YAML loading."""

    def test_load(self, tmp_path):
        path = tmp_path / "blocktree.yaml"
        path.write_text(
            "tree:\n"
            "  block_size: 4096\n"
            "  hash_algorithm: sha256\n"
            "reader:\n"
            "  buffer_size: 512\n"
            "logging:\n"
            "  level: WARNING\n"
        )

        config = RuntimeConfig.from_yaml(path)

        assert config.tree.block_size == 4096
        assert config.tree.hash_algorithm == "sha256"
        assert config.reader.buffer_size == 512
        assert config.logging.level == "WARNING"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert RuntimeConfig.from_yaml(path).to_dict() == RuntimeConfig().to_dict()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "nope.yaml")


class TestEnvOverrides:
    """Tests for BLOCKTREE_* environment variables."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BLOCKTREE_BLOCK_SIZE", "256")
        monkeypatch.setenv("BLOCKTREE_HASH_ALGORITHM", "sha512")
        monkeypatch.setenv("BLOCKTREE_READ_BUFFER", "64")
        monkeypatch.setenv("BLOCKTREE_LOG_LEVEL", "DEBUG")

        config = RuntimeConfig.from_env()

        assert config.tree.block_size == 256
        assert config.tree.hash_algorithm == "sha512"
        assert config.reader.buffer_size == 64
        assert config.logging.level == "DEBUG"

    def test_from_env_without_variables(self):
        assert RuntimeConfig.from_env().to_dict() == RuntimeConfig().to_dict()

    def test_with_env_overrides_does_not_mutate(self, monkeypatch):
        base = RuntimeConfig.from_dict({"tree": {"block_size": 10}})
        monkeypatch.setenv("BLOCKTREE_BLOCK_SIZE", "20")
        monkeypatch.setenv("BLOCKTREE_LOG_FILE", "/tmp/bt.log")

        overridden = base.with_env_overrides()

        assert overridden.tree.block_size == 20
        assert overridden.logging.file == "/tmp/bt.log"
        assert base.tree.block_size == 10
        assert base.logging.file is None

    def test_with_env_overrides_without_variables(self):
        base = RuntimeConfig()

        assert base.with_env_overrides() is base

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv("BLOCKTREE_DIGEST_SIZE", "big")

        with pytest.raises(ValueError):
            RuntimeConfig.from_env()


class TestDefaultConfig:
    """Tests for the process-wide default."""

    def test_set_and_get(self):
        config = RuntimeConfig(tree=TreeConfig(block_size=7))
        previous = get_default_config()
        try:
            set_default_config(config)
            assert get_default_config() is config
        finally:
            set_default_config(previous)
