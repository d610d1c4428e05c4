from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


_CONFIG_PATH_ENV = "KTM_CONFIG_PATH"
_NOTIFY_TIMEOUT_ENV = "KTM_NOTIFY_TIMEOUT"
_OPEN_COMMAND_ENV = "KTM_OPEN_COMMAND"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_CONFIG_FILENAME = ".kernel_task_monitor.json"


@dataclass(frozen=True)
class Settings:
    config_path: Path
    notify_timeout: float
    open_command: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_config_path() -> Path:
    value = os.getenv(_CONFIG_PATH_ENV)
    if value is not None and value.strip():
        return Path(value.strip()).expanduser()
    return Path.home() / DEFAULT_CONFIG_FILENAME


def _read_timeout(default: float) -> float:
    value = os.getenv(_NOTIFY_TIMEOUT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        config_path=_read_config_path(),
        notify_timeout=_read_timeout(5.0),
        open_command=_read_str_env(_OPEN_COMMAND_ENV, "open"),
        log_level=_read_log_level("INFO"),
    )
