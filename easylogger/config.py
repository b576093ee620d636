"""Configuration module: frozen dataclass loaded from YAML and environment variables."""

import logging
import os
from dataclasses import dataclass, fields

import yaml

from easylogger.naming import DEFAULT_LOG_DIR

logger = logging.getLogger(__name__)


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class RotationConfig:
    directory: str = DEFAULT_LOG_DIR
    max_size_bytes: int = 0
    max_days: int = 0
    max_backups: int = 0
    local_time: bool = False
    compress: bool = False
    console: bool = False
    color: bool = False
    check_day_on_write: bool = False

    def __post_init__(self):
        for name in ("max_size_bytes", "max_days", "max_backups"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    @property
    def mode(self) -> str:
        """Rotation trigger. In size mode ``max_days`` is an age limit for backups."""
        return "size" if self.max_size_bytes > 0 else "day"


_BOOL_FIELDS = {f.name for f in fields(RotationConfig) if f.type in (bool, "bool")}
_INT_FIELDS = {f.name for f in fields(RotationConfig) if f.type in (int, "int")}


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path or file."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def _from_mapping(data: dict) -> dict:
    known = {f.name for f in fields(RotationConfig)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        if key in _BOOL_FIELDS:
            value = _parse_bool(value)
        elif key in _INT_FIELDS:
            value = int(value)
        values[key] = value
    return values


def load_config(path: str | None = None) -> RotationConfig:
    """Build RotationConfig from defaults, an optional YAML file, then env vars.

    ``CONFIG_PATH`` overrides *path*. ``MAX_SIZE_BYTES`` takes precedence over
    ``MAX_SIZE_MB``.
    """
    path = os.environ.get("CONFIG_PATH", path)
    values = _from_mapping(load_yaml_config(path))

    raw_bytes = os.environ.get("MAX_SIZE_BYTES")
    raw_mb = os.environ.get("MAX_SIZE_MB")
    if raw_bytes is not None:
        values["max_size_bytes"] = int(raw_bytes)
    elif raw_mb is not None:
        values["max_size_bytes"] = int(float(raw_mb) * 1024 * 1024)

    env_map = {
        "LOG_DIR": "directory",
        "MAX_DAYS": "max_days",
        "MAX_BACKUPS": "max_backups",
        "LOCAL_TIME": "local_time",
        "COMPRESS": "compress",
        "CONSOLE": "console",
        "COLOR": "color",
        "CHECK_DAY_ON_WRITE": "check_day_on_write",
    }
    env_values = {
        key: os.environ[env_name] for env_name, key in env_map.items() if env_name in os.environ
    }
    values.update(_from_mapping(env_values))

    return RotationConfig(**values)
