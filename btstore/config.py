"""Configuration management for the storage layer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

PAST_LEAGUES: tuple[str, ...] = ("blight", "metamorph", "delirium")


class ConfigError(ValueError):
    """Raised when configuration is invalid."""

    pass


class HostFamily(str, Enum):
    """Extension host families; each binds a different global object."""

    CHROME = "chrome"
    FIREFOX = "firefox"

    @property
    def api_name(self) -> str:
        """Name of the global the host exposes its API under."""
        return "chrome" if self is HostFamily.CHROME else "browser"


@dataclass(frozen=True)
class StorageConfig:
    """Settings for binding and maintaining the storage areas."""

    host: HostFamily = HostFamily.CHROME
    past_leagues: tuple[str, ...] = PAST_LEAGUES
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StorageConfig:
        """Build a config from merged file and environment values."""
        defaults = cls()

        raw_host = data.get("host", defaults.host.value)
        try:
            host = HostFamily(str(raw_host).lower())
        except ValueError:
            raise ConfigError(
                f"Invalid host '{raw_host}': expected "
                + " or ".join(family.value for family in HostFamily)
            )

        past_leagues = data.get("past_leagues", defaults.past_leagues)
        if past_leagues is None:
            past_leagues = ()
        if isinstance(past_leagues, str):
            past_leagues = [p.strip() for p in past_leagues.split(",") if p.strip()]
        if not isinstance(past_leagues, (list, tuple)):
            raise ConfigError("past_leagues must be a list of league names")

        return cls(
            host=host,
            past_leagues=tuple(str(league).lower() for league in past_leagues),
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
        )


class Config:
    """Loading of configuration files."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            raise ConfigError(f"Error reading config file: {e}")

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the configuration file paths in precedence order."""
        paths = []

        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "btstore" / "config.yaml")

        paths.append(Path(".btstore.yaml"))
        paths.append(Path("btstore.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def load_config(path: Path | None = None) -> StorageConfig:
    """Load configuration from files and environment variables.

    An explicit ``path`` replaces the default search locations.
    """
    config: dict[str, Any] = {}

    paths = [path] if path else Config.get_config_paths()
    for config_path in paths:
        if config_path.exists():
            config = Config.merge_configs(config, Config.from_file(config_path))

    env_overrides: dict[str, Any] = {}
    if host := os.environ.get("BTSTORE_HOST"):
        env_overrides["host"] = host
    if past_leagues := os.environ.get("BTSTORE_PAST_LEAGUES"):
        env_overrides["past_leagues"] = past_leagues
    if log_level := os.environ.get("BTSTORE_LOG_LEVEL"):
        env_overrides["log_level"] = log_level

    return StorageConfig.from_dict(Config.merge_configs(config, env_overrides))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
