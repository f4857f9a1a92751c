"""Configuration loader and validation for recent-track.

Loads optional YAML config from ~/.config/recent-track/config.yaml (or the
RECENT_TRACK_CONFIG env override). A missing file means defaults; the only
required input is the HOME environment variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

APP_NAME = "recent-track"
HOME_ENV_VAR = "HOME"
ENV_CONFIG_VAR = "RECENT_TRACK_CONFIG"
ENV_LOG_LEVEL_VAR = "RECENT_TRACK_LOG_LEVEL"
SUPPORTED_CONFIG_VERSION = 1

DATA_FILENAME = ".recent.txt"
DEFAULT_CAPACITY = 20000
DEFAULT_ELEVATION_PREFIXES = ("sudo",)
DEFAULT_IGNORED_PREFIXES = ("/dev/null",)
DEFAULT_LOG_LEVEL = "WARNING"

LOCK_MODE_SPLIT = "split"
LOCK_MODE_TRANSACTION = "transaction"
LOCK_MODES = (LOCK_MODE_SPLIT, LOCK_MODE_TRANSACTION)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when the configuration file is invalid."""


class HomeNotSetError(ConfigError):
    """Raised when the home directory cannot be determined from the environment."""


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TrackerConfig:
    """Top-level recent-track configuration."""

    home: str
    data_file: Path
    capacity: int = DEFAULT_CAPACITY
    elevation_prefixes: tuple[str, ...] = DEFAULT_ELEVATION_PREFIXES
    ignored_prefixes: tuple[str, ...] = DEFAULT_IGNORED_PREFIXES
    lock_mode: str = LOCK_MODE_SPLIT
    log_level: str = DEFAULT_LOG_LEVEL
    config_path: Path | None = field(default=None, compare=False)

    @classmethod
    def defaults(cls, home: str) -> TrackerConfig:
        return cls(home=home, data_file=Path(home) / DATA_FILENAME)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def get_home() -> str:
    """Return the invoking user's home directory from the environment."""
    home = os.environ.get(HOME_ENV_VAR)
    if not home:
        raise HomeNotSetError(
            f"The {HOME_ENV_VAR} environment variable is not set; "
            f"cannot locate the record file or expand '~/' paths."
        )
    return home


def get_config_path(home: str) -> Path:
    """Determine which config file to use."""
    env = os.environ.get(ENV_CONFIG_VAR)
    if env:
        return Path(env).expanduser()
    return Path(home) / ".config" / APP_NAME / "config.yaml"


def _expand_data_file(raw: str, home: str) -> Path:
    if raw == "~":
        return Path(home)
    if raw.startswith("~/"):
        return Path(home) / raw[2:]
    path = Path(raw)
    if not path.is_absolute():
        path = Path(home) / path
    return path


def _parse_prefixes(raw: Any, key: str) -> tuple[str, ...]:
    if not isinstance(raw, list) or not all(isinstance(p, str) and p for p in raw):
        raise ConfigError(f"'{key}' must be a list of non-empty strings.")
    return tuple(raw)


def _apply_log_level_override(level: str) -> str:
    env = os.environ.get(ENV_LOG_LEVEL_VAR)
    if env:
        level = env
    level = level.upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(
            f"Unknown log level '{level}'. Expected one of: {', '.join(_LOG_LEVELS)}."
        )
    return level


def load_config(path: Path | None = None, *, home: str | None = None) -> TrackerConfig:
    """Load, validate, and return TrackerConfig.

    ``home`` defaults to the HOME environment variable; a missing value raises
    ``HomeNotSetError``. A missing config file yields the defaults.
    """
    home = home or get_home()
    config_path = path or get_config_path(home)
    defaults = TrackerConfig.defaults(home)

    if not config_path.exists():
        return TrackerConfig(
            home=home,
            data_file=defaults.data_file,
            log_level=_apply_log_level_override(defaults.log_level),
            config_path=config_path,
        )

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must be a YAML mapping at the top level.")

    version = raw.get("version", SUPPORTED_CONFIG_VERSION)
    if version != SUPPORTED_CONFIG_VERSION:
        raise ConfigError(
            f"Unsupported config version {version}. Expected {SUPPORTED_CONFIG_VERSION}."
        )

    capacity = raw.get("capacity", DEFAULT_CAPACITY)
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise ConfigError(f"'capacity' must be a positive integer, got {capacity!r}.")

    data_file_raw = raw.get("data_file")
    if data_file_raw is None:
        data_file = defaults.data_file
    elif isinstance(data_file_raw, str) and data_file_raw:
        data_file = _expand_data_file(data_file_raw, home)
    else:
        raise ConfigError("'data_file' must be a non-empty string.")

    elevation = _parse_prefixes(
        raw.get("elevation_prefixes", list(DEFAULT_ELEVATION_PREFIXES)), "elevation_prefixes"
    )
    ignored = _parse_prefixes(
        raw.get("ignored_prefixes", list(DEFAULT_IGNORED_PREFIXES)), "ignored_prefixes"
    )

    lock_mode = raw.get("lock_mode", LOCK_MODE_SPLIT)
    if lock_mode not in LOCK_MODES:
        raise ConfigError(
            f"Unknown lock_mode '{lock_mode}'. Expected one of: {', '.join(LOCK_MODES)}."
        )

    log_level = _apply_log_level_override(str(raw.get("log_level", DEFAULT_LOG_LEVEL)))

    return TrackerConfig(
        home=home,
        data_file=data_file,
        capacity=capacity,
        elevation_prefixes=elevation,
        ignored_prefixes=ignored,
        lock_mode=lock_mode,
        log_level=log_level,
        config_path=config_path,
    )


def validate_config_file(path: Path | None = None, *, home: str | None = None) -> tuple[bool, str]:
    """Validate a config file and return (ok, message)."""
    try:
        cfg = load_config(path, home=home)
    except ConfigError as exc:
        return False, str(exc)
    source = cfg.config_path if cfg.config_path and cfg.config_path.exists() else "defaults"
    return True, (
        f"Config OK — capacity {cfg.capacity}, lock mode {cfg.lock_mode}, "
        f"records in {cfg.data_file} (from {source})"
    )
