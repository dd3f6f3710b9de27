"""
Configuration management for NextVOD.

Handles loading, validation, and access to application configuration.
Configuration is read once at startup and is immutable afterwards.
"""

import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

# Global configuration instance
_config: Optional["NextVodConfig"] = None

DEFAULT_FILLER_URL = "https://seivod-secure.akamaized.net/deagad1/playlist.m3u8"
DEFAULT_FILLER_DURATION_SEC = 54


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class ServerConfig(_FrozenModel):
    """Server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"


class CouchDBConfig(_FrozenModel):
    """CouchDB channel store configuration."""
    url: str = "http://localhost:5984"
    database: str = "channels"
    username: str = "admin"
    password: str = ""
    timeout: float = 10.0


class DatabaseConfig(_FrozenModel):
    """SQL channel store configuration."""
    url: str = "sqlite:///./nextvod.db"
    echo: bool = False


class StoreConfig(_FrozenModel):
    """Channel store configuration."""
    backend: Literal["couchdb", "sql"] = "couchdb"
    couchdb: CouchDBConfig = Field(default_factory=CouchDBConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)


class StitcherConfig(_FrozenModel):
    """Remote ad stitcher configuration."""
    base_url: str = "http://localhost:8000"
    path: str = "/stitch/"
    timeout: float = 10.0  # Total deadline for one stitch call, seconds


class FillerConfig(_FrozenModel):
    """Filler slate used when a channel has no house ads."""
    url: str = DEFAULT_FILLER_URL
    duration_sec: float = DEFAULT_FILLER_DURATION_SEC


class PlayoutConfig(_FrozenModel):
    """Playlist advancement configuration."""
    max_position_attempts: int = Field(default=3, ge=1)


class LoggingConfig(_FrozenModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/nextvod.log"
    to_file: bool = False
    max_size: str = "10MB"
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class NextVodConfig(_FrozenModel):
    """Main NextVOD configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    stitcher: StitcherConfig = Field(default_factory=StitcherConfig)
    filler: FillerConfig = Field(default_factory=FillerConfig)
    playout: PlayoutConfig = Field(default_factory=PlayoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> NextVodConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in the
            working directory or project root.

    Returns:
        Loaded and validated configuration.
    """
    global _config

    if config_path is None:
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    _config = NextVodConfig(**config_data)
    return _config


def get_config() -> NextVodConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    # Unprefixed names match existing deployment environments
    env_map = {
        "PORT": ("server", "port"),
        "NEXTVOD_HOST": ("server", "host"),
        "NEXTVOD_PORT": ("server", "port"),
        "NEXTVOD_DEBUG": ("server", "debug"),
        "NEXTVOD_STORE_BACKEND": ("store", "backend"),
        "NEXTVOD_COUCHDB_URL": ("store", "couchdb", "url"),
        "NEXTVOD_COUCHDB_DATABASE": ("store", "couchdb", "database"),
        "NEXTVOD_COUCHDB_USERNAME": ("store", "couchdb", "username"),
        "DB_PASSWORD": ("store", "couchdb", "password"),
        "NEXTVOD_DATABASE_URL": ("store", "database", "url"),
        "NEXTVOD_STITCHER_URL": ("stitcher", "base_url"),
        "FILLER_URL": ("filler", "url"),
        "FILLER_URL_DURATION_SEC": ("filler", "duration_sec"),
        "NEXTVOD_LOG_LEVEL": ("logging", "level"),
    }

    # Credentials, names and URLs stay strings even when all digits
    raw_vars = {
        "NEXTVOD_HOST",
        "NEXTVOD_STORE_BACKEND",
        "NEXTVOD_COUCHDB_URL",
        "NEXTVOD_COUCHDB_DATABASE",
        "NEXTVOD_COUCHDB_USERNAME",
        "DB_PASSWORD",
        "NEXTVOD_DATABASE_URL",
        "NEXTVOD_STITCHER_URL",
        "FILLER_URL",
        "NEXTVOD_LOG_LEVEL",
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            if env_var not in raw_vars:
                value = _parse_env_value(value)
            _set_nested(overrides, path, value)

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    # Boolean (digits are left to the numeric branches)
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
