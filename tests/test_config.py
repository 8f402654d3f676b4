"""Unit tests for config.py - environment configuration."""

import os
from unittest.mock import patch

import pytest

from config import (
    Config,
    ConfigError,
    DefenderConfig,
    DeployConfig,
    get_config,
    load_config,
    reset_config,
)


class TestDefenderConfig:
    """Tests for DefenderConfig."""

    def test_defaults(self):
        """Test default values."""
        config = DefenderConfig()
        assert config.api_key == ""
        assert config.api_secret == ""
        assert config.api_url == "https://defender-api.openzeppelin.com"
        assert config.timeout == 60

    def test_from_env(self):
        """Test loading from environment variables."""
        env = {
            "DEFENDER_API_KEY": "key",
            "DEFENDER_API_SECRET": "secret",
            "DEFENDER_API_URL": "http://localhost:8080/",
            "DEFENDER_TIMEOUT": "5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = DefenderConfig.from_env()
        assert config.api_key == "key"
        assert config.api_secret == "secret"
        assert config.api_url == "http://localhost:8080"
        assert config.timeout == 5

    def test_secret_not_in_repr(self):
        """Test that the API secret is never rendered."""
        config = DefenderConfig(api_key="key", api_secret="hunter2")
        assert "hunter2" not in repr(config)

    def test_require_credentials_passes(self):
        """Test that complete credentials are accepted."""
        DefenderConfig(api_key="key", api_secret="secret").require_credentials()

    def test_require_credentials_missing_both(self):
        """Test that both missing values are named."""
        with pytest.raises(ConfigError) as exc:
            DefenderConfig().require_credentials()
        assert "DEFENDER_API_KEY and DEFENDER_API_SECRET" in str(exc.value)

    def test_require_credentials_missing_secret(self):
        """Test that a missing secret alone is reported."""
        with pytest.raises(ConfigError) as exc:
            DefenderConfig(api_key="key").require_credentials()
        assert "DEFENDER_API_SECRET" in str(exc.value)
        assert "DEFENDER_API_KEY" not in str(exc.value)


class TestDeployConfig:
    """Tests for DeployConfig."""

    def test_defaults(self):
        """Test default values."""
        config = DeployConfig()
        assert config.output_dir == ".defender"
        assert config.log_level == "INFO"

    def test_from_env(self):
        """Test loading from environment variables."""
        env = {"DEFENDER_OUTPUT_DIR": "/tmp/out", "LOG_LEVEL": "DEBUG"}
        with patch.dict(os.environ, env, clear=True):
            config = DeployConfig.from_env()
        assert config.output_dir == "/tmp/out"
        assert config.log_level == "DEBUG"

    def test_paths(self):
        """Test derived keys directory and deployment log path."""
        config = DeployConfig(output_dir="out")
        assert config.keys_dir == os.path.join("out", "relayer-keys")
        assert config.deployment_log_path("svc-dev") == os.path.join(
            "out", "deployment-log.svc-dev.json"
        )


class TestConfig:
    """Tests for the main Config class."""

    def test_default(self):
        """Test default configuration."""
        config = Config.default()
        assert isinstance(config.defender, DefenderConfig)
        assert isinstance(config.deploy, DeployConfig)

    def test_from_env(self):
        """Test loading all sections from the environment."""
        with patch.dict(os.environ, {"DEFENDER_API_KEY": "k"}, clear=True):
            config = Config.from_env()
        assert config.defender.api_key == "k"
        assert config.deploy.output_dir == ".defender"


class TestConfigSingleton:
    """Tests for config singleton functions."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_load_config_returns_same_instance(self):
        """Test that load_config caches the configuration."""
        assert load_config() is load_config()

    def test_get_config_loads_when_empty(self):
        """Test that get_config loads on first use."""
        with patch.dict(os.environ, {"DEFENDER_API_KEY": "abc"}, clear=True):
            config = get_config()
        assert config.defender.api_key == "abc"
        assert get_config() is config

    def test_reset_config(self):
        """Test that reset_config forces a reload."""
        first = load_config()
        reset_config()
        assert load_config() is not first
