"""
Configuration module for the Defender stack deployer.

Loads configuration from environment variables. Template-level settings
(stack name, SSOT) live in the template itself, see template.py.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


class ConfigError(ValueError):
    """Raised when required configuration is missing."""


@dataclass
class DefenderConfig:
    """Credentials and endpoint for the Defender platform API."""

    api_key: str = ""
    api_secret: str = field(default="", repr=False)  # Never log secret
    api_url: str = "https://defender-api.openzeppelin.com"
    timeout: int = 60  # seconds per request

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            api_key=os.getenv("DEFENDER_API_KEY", ""),
            api_secret=os.getenv("DEFENDER_API_SECRET", ""),
            api_url=os.getenv(
                "DEFENDER_API_URL", "https://defender-api.openzeppelin.com"
            ).rstrip("/"),
            timeout=int(os.getenv("DEFENDER_TIMEOUT", "60")),
        )

    def require_credentials(self) -> None:
        """
        Ensure a team API key and secret are present.

        Raises:
            ConfigError: If either value is empty.
        """
        missing = []
        if not self.api_key:
            missing.append("DEFENDER_API_KEY")
        if not self.api_secret:
            missing.append("DEFENDER_API_SECRET")
        if missing:
            raise ConfigError(
                f"{' and '.join(missing)} must be set to deploy. "
                "Team API credentials cannot be empty."
            )


@dataclass
class DeployConfig:
    """Local deployment settings."""

    output_dir: str = ".defender"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            output_dir=os.getenv("DEFENDER_OUTPUT_DIR", ".defender"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def keys_dir(self) -> str:
        """Directory holding created relayer API keys."""
        return os.path.join(self.output_dir, "relayer-keys")

    def deployment_log_path(self, stack: str) -> str:
        """Path of the append-only deployment log for a stack."""
        return os.path.join(self.output_dir, f"deployment-log.{stack}.json")


@dataclass
class Config:
    """Main configuration object."""

    defender: DefenderConfig
    deploy: DeployConfig

    @classmethod
    def from_env(cls):
        """Load all configuration from environment variables."""
        return cls(
            defender=DefenderConfig.from_env(),
            deploy=DeployConfig.from_env(),
        )

    @classmethod
    def default(cls):
        """Return default configuration."""
        return cls(
            defender=DefenderConfig(),
            deploy=DeployConfig(),
        )


# Global config instance
config: Optional[Config] = None


def load_config() -> Config:
    """Load configuration (singleton pattern)."""
    global config
    if config is None:
        config = Config.from_env()
    return config


def get_config() -> Config:
    """Get the current configuration."""
    if config is None:
        return load_config()
    return config


def reset_config() -> None:
    """Reset configuration (mainly for testing)."""
    global config
    config = None
