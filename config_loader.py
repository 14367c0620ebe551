"""
Module: config_loader.py
Purpose: Load and validate controller configuration from an INI file.
Consumes: path argument, or $SBC_CONFIG
Provides: A Config class with read-only access to all controller parameters.
Behavior:
- Built-in defaults are applied first, the file overrides them
- A named file that does not exist is an error
- Malformed values raise ConfigError
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Optional

from logger import base_dir, default_log_dir

DEFAULTS = {
    "BUILDING": {
        "building_id": "",
        "start_mode": "out of hours",
    },
    "STATUS": {
        "fault_marker": "FAULT",
    },
    "ALERTS": {
        "recipient": "smartbuilding@uclan.ac.uk",
        "subject": "failed to log alarm",
        "sender": "controller@localhost",
        "smtp_host": "localhost",
        "smtp_port": "25",
    },
    "WEB_SERVICE": {
        "url": "",
        "timeout_sec": "5",
        "report_state_changes": "no",
    },
    "RELAY_MAP": {
        "door_gpio": "",
        "light_gpio": "",
        "alarm_gpio": "",
    },
    "PATHS": {
        "audit_file": "",
    },
    "LOGGING": {
        "log_dir": "",
        "level": "INFO",
    },
}


class ConfigError(ValueError):
    """Raised when a configuration value cannot be interpreted."""


class Config:
    def __init__(self, path: Optional[str | Path] = None):
        self._parser = configparser.ConfigParser()
        self._parser.read_dict(DEFAULTS)
        self.path = self._resolve_path(path)
        if self.path is not None:
            self._load_config()
        self._bind_all()

    @staticmethod
    def _resolve_path(path):
        if path is None:
            path = os.environ.get("SBC_CONFIG")
        return Path(path).expanduser() if path else None

    def _load_config(self):
        if not self.path.is_file():
            raise FileNotFoundError(f"Config file not found at: {self.path}")
        self._parser.read(self.path)

    def _bind_all(self):
        # --- BUILDING ---
        self.building_id = self._get("BUILDING", "building_id")
        self.start_mode = self._get("BUILDING", "start_mode")

        # --- STATUS ---
        self.fault_marker = self._get("STATUS", "fault_marker")
        if not self.fault_marker:
            raise ConfigError("STATUS.fault_marker must not be empty")

        # --- ALERTS ---
        self.alert_recipient = self._get("ALERTS", "recipient")
        self.alert_subject = self._get("ALERTS", "subject")
        self.alert_sender = self._get("ALERTS", "sender")
        self.smtp_host = self._get("ALERTS", "smtp_host")
        self.smtp_port = self._get_int("ALERTS", "smtp_port")

        # --- WEB_SERVICE ---
        self.web_service_url = self._get("WEB_SERVICE", "url") or None
        self.web_service_timeout = self._get_float("WEB_SERVICE", "timeout_sec")
        self.report_state_changes = self._get_bool("WEB_SERVICE", "report_state_changes")

        # --- RELAY_MAP ---
        self.door_pins = self._get_pins("RELAY_MAP", "door_gpio")
        self.light_pins = self._get_pins("RELAY_MAP", "light_gpio")
        self.alarm_pins = self._get_pins("RELAY_MAP", "alarm_gpio")

        # --- PATHS ---
        audit_file = self._get("PATHS", "audit_file")
        self.audit_file = (
            Path(audit_file).expanduser()
            if audit_file
            else base_dir() / "logs" / "transition_audit.jsonl"
        )

        # --- LOGGING ---
        log_dir = self._get("LOGGING", "log_dir")
        self.log_dir = Path(log_dir).expanduser() if log_dir else default_log_dir()
        self.log_level = self._get("LOGGING", "level").upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"LOGGING.level: unknown level {self.log_level!r}")

    # Internal retrieval methods
    def _get(self, section, key):
        return self._parser.get(section, key).strip()

    def _get_int(self, section, key):
        try:
            return self._parser.getint(section, key)
        except ValueError as exc:
            raise ConfigError(f"{section}.{key}: {exc}") from exc

    def _get_float(self, section, key):
        try:
            return self._parser.getfloat(section, key)
        except ValueError as exc:
            raise ConfigError(f"{section}.{key}: {exc}") from exc

    def _get_bool(self, section, key):
        try:
            return self._parser.getboolean(section, key)
        except ValueError as exc:
            raise ConfigError(f"{section}.{key}: {exc}") from exc

    def _get_pins(self, section, key) -> list[int]:
        raw = self._get(section, key)
        try:
            return [int(part) for part in raw.split(",") if part.strip()]
        except ValueError as exc:
            raise ConfigError(f"{section}.{key}: expected comma-separated GPIO numbers") from exc
