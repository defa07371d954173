"""Configuration manager for user settings.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    CONFIG_FILE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    POLL_MODES,
)

logger = logging.getLogger(__name__)

DEFAULT_API_SERVER = os.getenv(
    "FILEFORGE_API_SERVER",
    "",
)

SETTING_KEYS = ("api_server", "output_directory", "poll_interval", "poll_mode", "request_timeout")


class ConfigManager:
    """Manages application configuration and user settings."""

    def __init__(self, config_file: Path = CONFIG_FILE):
        """Initialize config manager and load existing config."""
        self.config_file = config_file
        self.config = self._load_config()
        self._ensure_defaults()

    def _defaults(self) -> dict:
        return {
            "api_server": DEFAULT_API_SERVER,
            "output_directory": str(DEFAULT_OUTPUT_DIR),
            "poll_interval": DEFAULT_POLL_INTERVAL,
            "poll_mode": "fixed",
            "request_timeout": DEFAULT_REQUEST_TIMEOUT,
        }

    def _load_config(self) -> dict:
        """Load configuration from file or create default."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    config = json.load(f)
                    logger.info(f"Loaded config from {self.config_file}")
                    return config
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load config: {e}, using defaults")

        return self._defaults()

    def _ensure_defaults(self):
        """Ensure essential keys exist when older configs are loaded."""
        updated = False
        for key, value in self._defaults().items():
            if key not in self.config:
                self.config[key] = value
                updated = True
        if updated:
            self._save_config()

    def _save_config(self):
        """Save configuration to file."""
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
                logger.info(f"Saved config to {self.config_file}")
        except OSError as e:
            logger.error(f"Failed to save config: {e}")

    def get_api_server(self) -> Optional[str]:
        """Return configured API server, falling back to default/env."""
        server = self.config.get("api_server") or DEFAULT_API_SERVER
        return server.strip() or None

    def set_api_server(self, server: str):
        self.config["api_server"] = server.strip()
        self._save_config()

    def get_output_directory(self) -> Path:
        """Get the configured output directory, creating it if needed."""
        output_dir = Path(self.config.get("output_directory", str(DEFAULT_OUTPUT_DIR))).expanduser()

        # Ensure directory exists
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create output directory {output_dir}: {e}")
            # Fallback to default
            output_dir = DEFAULT_OUTPUT_DIR
            output_dir.mkdir(parents=True, exist_ok=True)

        return output_dir

    def set_output_directory(self, directory: Path):
        """Set the output directory and save config."""
        self.config["output_directory"] = str(directory)
        self._save_config()
        logger.info(f"Output directory set to: {directory}")

    def get_poll_interval(self) -> float:
        """Return the progress polling period in seconds."""
        try:
            value = float(self.config.get("poll_interval", DEFAULT_POLL_INTERVAL))
        except (TypeError, ValueError):
            return DEFAULT_POLL_INTERVAL
        return value if value > 0 else DEFAULT_POLL_INTERVAL

    def set_poll_interval(self, seconds: float):
        if seconds <= 0:
            raise ValueError("poll_interval must be positive")
        self.config["poll_interval"] = float(seconds)
        self._save_config()

    def get_poll_mode(self) -> str:
        mode = self.config.get("poll_mode", "fixed")
        return mode if mode in POLL_MODES else "fixed"

    def set_poll_mode(self, mode: str):
        if mode not in POLL_MODES:
            raise ValueError(f"poll_mode must be one of {', '.join(POLL_MODES)}")
        self.config["poll_mode"] = mode
        self._save_config()

    def get_request_timeout(self) -> float:
        try:
            value = float(self.config.get("request_timeout", DEFAULT_REQUEST_TIMEOUT))
        except (TypeError, ValueError):
            return DEFAULT_REQUEST_TIMEOUT
        return value if value > 0 else DEFAULT_REQUEST_TIMEOUT

    def set_request_timeout(self, seconds: float):
        if seconds <= 0:
            raise ValueError("request_timeout must be positive")
        self.config["request_timeout"] = float(seconds)
        self._save_config()

    def set(self, key: str, value: str):
        """Set a setting from its string form, as typed on the command line."""
        if key == "api_server":
            self.set_api_server(value)
        elif key == "output_directory":
            self.set_output_directory(Path(value).expanduser())
        elif key == "poll_interval":
            self.set_poll_interval(float(value))
        elif key == "poll_mode":
            self.set_poll_mode(value)
        elif key == "request_timeout":
            self.set_request_timeout(float(value))
        else:
            raise KeyError(key)


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
