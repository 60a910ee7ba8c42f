"""Configuration management for the aoctl application.

Two sources are combined:
1. Environment variables (optionally from a ``.env`` file) for process-level
   settings such as timeouts and logging.
2. The user configuration file (YAML or JSON) holding the affiliation, the
   default API endpoint and the cluster registry.
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from aoctl.errors import ConfigurationError

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger("aoctl.config")


class Config:
    """Application configuration with sensible defaults."""

    # User configuration file
    CONFIG_PATH: str = os.getenv("AOCTL_CONFIG", "~/.aoctl.yaml")

    # Default deploy API, used when the config file does not set one
    API_URL: str = os.getenv("AOCTL_API_URL", "")

    # Timeouts (in seconds)
    API_TIMEOUT: int = int(os.getenv("API_TIMEOUT", "30"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    LOG_FILE: str = os.getenv("AOCTL_LOG_FILE", "")

    # Security
    REDACT_KEYS: tuple = ("authorization", "password", "secret", "token")

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        required = {
            "AOCTL_CONFIG": cls.CONFIG_PATH,
        }
        missing = [k for k, v in required.items() if not v]
        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")
        if cls.API_TIMEOUT <= 0:
            raise ValueError("API_TIMEOUT must be a positive number of seconds")


class ClusterConfig(BaseModel):
    """One entry of the cluster registry."""
    url: str = Field(description="Base URL of the deploy API on this cluster")
    token: str = Field(default="", description="Bearer token for the cluster")
    reachable: bool = Field(
        default=True,
        description="Result of the last reachability probe"
    )

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended directly."""
        return v.rstrip("/")


class AOConfig(BaseModel):
    """User configuration for aoctl."""
    affiliation: str = Field(default="", description="Logged in affiliation")
    api_url: str = Field(
        default_factory=lambda: Config.API_URL,
        description="Deploy API used for resolving applications"
    )
    token: str = Field(default="", description="Default bearer token")
    clusters: Dict[str, ClusterConfig] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")

    @field_validator("api_url")
    @classmethod
    def strip_api_slash(cls, v: str) -> str:
        return v.rstrip("/")


def _resolve_path(path: Optional[Union[str, Path]]) -> Path:
    return Path(path or Config.CONFIG_PATH).expanduser().absolute()


def load_config(path: Optional[Union[str, Path]] = None) -> AOConfig:
    """Load the user configuration file.

    JSON files are read through the YAML loader as well, so both ``.yaml``
    and ``.json`` configuration files are accepted.

    Args:
        path: Explicit path, defaults to ``Config.CONFIG_PATH``

    Returns:
        Parsed configuration, or defaults when the file does not exist

    Raises:
        ConfigurationError: If the file exists but cannot be parsed
    """
    config_path = _resolve_path(path)
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return AOConfig()

    try:
        with open(config_path, "r") as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
        config = AOConfig(**data)
    except (yaml.YAMLError, ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    logger.debug(
        f"Loaded config from {config_path} with {len(config.clusters)} cluster(s)"
    )
    return config


def save_config(config: AOConfig, path: Optional[Union[str, Path]] = None) -> Path:
    """Save configuration to a YAML file."""
    config_path = _resolve_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
    return config_path
