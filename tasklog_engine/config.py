"""Settings loaded from an optional YAML file and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = Path("~/.config/tasklog/config.yaml")
DEFAULT_LOG_PATH = Path("~/.tasks")


@dataclass
class Settings:
    """Runtime settings for the logger."""

    log_path: Path = field(default_factory=lambda: DEFAULT_LOG_PATH.expanduser())
    session_command: list[str] = field(default_factory=lambda: ["last"])
    session_terminal: str = "console"
    command_timeout: float = 5.0


def _coerce(key: str, value) -> object:
    if key == "log_path":
        if not isinstance(value, str) or not value:
            raise ValueError(f"Config '{key}' must be a non-empty path string")
        return Path(value).expanduser()
    if key == "session_command":
        if isinstance(value, str):
            value = value.split()
        if not isinstance(value, list) or not value or not all(isinstance(v, str) for v in value):
            raise ValueError(f"Config '{key}' must be a command string or list of strings")
        return value
    if key == "session_terminal":
        if not isinstance(value, str) or not value:
            raise ValueError(f"Config '{key}' must be a non-empty string")
        return value
    if key == "command_timeout":
        try:
            timeout = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Config '{key}' must be a number") from exc
        if timeout <= 0:
            raise ValueError(f"Config '{key}' must be positive")
        return timeout
    raise ValueError(f"Unknown config key '{key}'")


def _read_yaml(path: Path) -> dict:
    with open(path, encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ValueError(f"Config file {path} is not valid YAML") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return payload


def load_settings(config_path: Optional[str | Path] = None) -> Settings:
    """Build settings from defaults, the config file, then ``TASKLOG_FILE``.

    An explicit ``config_path`` (or ``TASKLOG_CONFIG``) must exist; the default
    location is only read when present.
    """

    explicit = config_path or os.environ.get("TASKLOG_CONFIG")
    path = Path(explicit).expanduser() if explicit else DEFAULT_CONFIG_PATH.expanduser()
    if explicit and not path.exists():
        raise ValueError(f"Config file not found: {path}")

    values = {}
    if path.exists():
        for key, value in _read_yaml(path).items():
            values[key] = _coerce(str(key), value)

    env_log = os.environ.get("TASKLOG_FILE")
    if env_log:
        values["log_path"] = _coerce("log_path", env_log)

    return Settings(**values)
