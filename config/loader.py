from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any

import json5
from pydantic import ValidationError

from config.schemas import MonitorConfig

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """{
  // Kernel Task Monitor (KTM) Configuration
  // ========================================
  // This file uses JSON5 format, which supports comments and trailing commas.
  //
  // IMPORTANT: Restart KTM after making changes to this file!

  // ESP32 Integration (optional)
  // ---------------------------
  // URL of a device that receives thermal data. Leave empty ("") to disable.
  //
  // When enabled, KTM sends HTTP GET requests with these parameters:
  //   - kernel_task: CPU percentage (0.0-400.0+)
  //   - state: Idle|Light_Load|Heavy_Load|Throttling|Heavy_Throttling
  //
  // Example request:
  //   GET http://192.168.1.100/fanspeed?kernel_task=45.5&state=Heavy_Load

  "esp_url": "",

  // Thermal Thresholds (optional, CPU %)
  // ------------------------------------
  // "thresholds": {
  //   "idle": 5,        // Up to this = Idle (default: 5)
  //   "light": 20,      // Up to this = Light Load (default: 20)
  //   "heavy": 50,      // Up to this = Heavy Load (default: 50)
  //   "throttle": 100,  // Up to this = Throttling (default: 100)
  //                     // Above throttle = Heavy Throttling
  // },

  // Custom Emojis (optional)
  // ------------------------
  // "emojis": {
  //   "idle": "\U0001F634",
  //   "light_load": "\U0001F60A",
  //   "heavy_load": "\U0001F605",
  //   "throttling": "\U0001F975",
  //   "heavy_throttling": "\U0001F525",
  //   "error": "❓",
  // },
}
"""


class ConfigLoadError(ValueError):
    """The configuration file could not be read or parsed."""


def _parse_document(text: str) -> dict[str, Any]:
    try:
        data = json5.loads(text)
    except ValueError as json5_exc:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigLoadError(f"Invalid configuration document: {json5_exc}") from exc
    if not isinstance(data, dict):
        raise ConfigLoadError("Configuration document must be an object.")
    return data


def parse_config(text: str) -> MonitorConfig:
    data = _parse_document(text)
    try:
        return MonitorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigLoadError(str(exc)) from exc


def load_config(path: Path) -> MonitorConfig:
    """Read the configuration at ``path``; any failure falls back to defaults."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No configuration file, using defaults", extra={"config_path": path})
        return MonitorConfig()
    except OSError as exc:
        logger.warning(
            "Unable to read configuration file",
            extra={"config_path": path, "reason": exc},
        )
        return MonitorConfig()

    try:
        config = parse_config(text)
    except ConfigLoadError as exc:
        logger.warning(
            "Unable to parse configuration file, using defaults",
            extra={"config_path": path, "reason": exc},
        )
        return MonitorConfig()

    for lower, upper in config.threshold_set().inversions():
        logger.warning(
            "Thermal thresholds are not increasing; states are assigned in ascending order",
            extra={"config_path": path, "reason": f"{lower} >= {upper}"},
        )
    return config


def write_config_template(path: Path) -> bool:
    """Create the commented template unless ``path`` already exists."""
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    os.chmod(path, 0o600)
    return True


def open_config_file(path: Path, command: str = "open") -> None:
    """Ensure the file exists and hand it to the editor command without waiting."""
    try:
        write_config_template(path)
    except OSError as exc:
        logger.warning(
            "Unable to create configuration template",
            extra={"config_path": path, "reason": exc},
        )

    try:
        subprocess.Popen([command, str(path)])
    except OSError as exc:
        logger.warning(
            "Unable to open configuration file",
            extra={"config_path": path, "reason": exc},
        )
        return
    logger.info(
        "Opened configuration file; restart to apply changes",
        extra={"config_path": path},
    )
