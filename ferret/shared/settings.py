"""Centralized configuration management using Pydantic settings.

This module provides type-safe, validated configuration loading from:
1. A YAML config file (config.yaml + environment overlays)
2. A .env file
3. Environment variables (highest precedence)

Usage:
    from ferret.shared.settings import get_settings

    settings = get_settings()
    timeout = settings.search_timeout
"""

import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional, Literal, Tuple, Type

import yaml
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_SEARCH_TIMEOUT = "5000ms"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ferret" / "config.yaml"


def default_open_command() -> str:
    """Platform default for opening a link."""
    if sys.platform == "darwin":
        return "open"
    if sys.platform.startswith("win"):
        return "explorer"
    return "xdg-open"


class FerretSettings(BaseSettings):
    """Main Ferret configuration.

    Every field maps to a FERRET_* environment variable, e.g. ``goto_cmd``
    is read from FERRET_GOTO_CMD and ``github_token`` from FERRET_GITHUB_TOKEN.
    """
    environment: str = "development"

    # Search
    goto_cmd: str = Field(default_factory=default_open_command)
    search_timeout: str = DEFAULT_SEARCH_TIMEOUT

    # Github provider
    github_url: str = "https://api.github.com"
    github_token: Optional[SecretStr] = None
    github_search_user: Optional[str] = None

    # Logging
    log_level: str = "WARNING"
    log_format: Literal["json", "text"] = "json"
    log_directory: Optional[str] = None

    # HTTP service
    http_host: str = "127.0.0.1"
    http_port: int = 3030

    model_config = SettingsConfigDict(
        env_prefix="FERRET_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("github_url")
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @field_validator("goto_cmd", "search_timeout", mode="before")
    def blank_means_default(cls, v, info):
        # An exported-but-empty variable behaves as if it were unset
        if v is None or (isinstance(v, str) and not v.strip()):
            if info.field_name == "goto_cmd":
                return default_open_command()
            return DEFAULT_SEARCH_TIMEOUT
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; environment variables win over them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def _load_yaml_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from YAML files with environment overlay.

    Args:
        config_path: Path to base config file. If None, uses FERRET_CONFIG
                    or ~/.config/ferret/config.yaml.

    Returns:
        Merged configuration dictionary.
    """
    if config_path is None:
        env_path = os.getenv("FERRET_CONFIG")
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        # Return empty dict if no config file found (env vars will be used)
        return {}

    # Load base config
    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    # Load environment-specific overlay
    env = os.getenv("FERRET_ENVIRONMENT", config.get("environment", "development"))
    env_config_path = config_path.parent / f"config.{env}.yaml"

    if env_config_path.exists():
        with open(env_config_path, "r") as f:
            env_config = yaml.safe_load(f) or {}

        # Deep merge environment config into base config
        config = _deep_merge(config, env_config)

    return config


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override dict into base dict.

    Args:
        base: Base configuration dictionary.
        override: Override values to merge.

    Returns:
        Merged dictionary.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _flatten_config(config: dict, parent_key: str = "", sep: str = "_") -> dict:
    """Flatten nested YAML sections into settings field names.

    ``{"github": {"url": "..."}}`` becomes ``{"github_url": "..."}``.

    Args:
        config: Nested configuration dictionary.
        parent_key: Parent key for recursion.
        sep: Separator for nested keys.

    Returns:
        Flattened dictionary.
    """
    items = []

    for k, v in config.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k

        if isinstance(v, dict):
            items.extend(_flatten_config(v, new_key, sep).items())
        else:
            items.append((new_key, v))

    return dict(items)


@lru_cache(maxsize=1)
def get_settings(config_path: Optional[Path] = None) -> FerretSettings:
    """Get cached settings instance.

    Configuration precedence (highest to lowest):
    1. Environment variables (e.g., FERRET_SEARCH_TIMEOUT)
    2. .env file
    3. Environment-specific YAML (e.g., config.production.yaml)
    4. Base YAML config (config.yaml)

    Args:
        config_path: Optional path to base config file.

    Returns:
        Singleton FerretSettings instance.
    """
    yaml_config = _load_yaml_config(config_path)
    return FerretSettings(**_flatten_config(yaml_config))


def reload_settings(config_path: Optional[Path] = None) -> FerretSettings:
    """Force reload of settings (clears cache).

    Useful for testing or runtime config updates.

    Args:
        config_path: Optional path to base config file.

    Returns:
        New FerretSettings instance.
    """
    get_settings.cache_clear()
    return get_settings(config_path)
