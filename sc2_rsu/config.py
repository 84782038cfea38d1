"""Configuration management for SC2 Replay Uploader.

Stores and retrieves user settings from a JSON config file
in the platform-appropriate application data directory.
"""

import json
import logging
from pathlib import Path
from typing import Any

from sc2_rsu.api import valid_api_key
from sc2_rsu.platform_utils import (
    get_config_dir as _platform_config_dir,
)
from sc2_rsu.platform_utils import (
    get_log_path as _platform_log_path,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "apikey": "",
    "replays_root": "",  # the "StarCraft II/Accounts" directory
    "log_level": "INFO",
    # ---- polling ----
    "stability_interval_ms": 250,  # size sampling interval while a replay is written
    "status_interval_seconds": 1.0,  # remote status query interval
    # ---- log rotation ----
    "max_log_size_mb": 10,
    "log_backup_count": 3,
}


class ConfigError(RuntimeError):
    """Raised when the configuration cannot be used to start uploading."""


def get_config_dir() -> Path:
    """Return the platform-appropriate application config directory."""
    return _platform_config_dir()


def get_config_path() -> Path:
    """Return the path to the configuration file."""
    return get_config_dir() / "config.json"


def get_log_path() -> Path:
    """Return the path to the log file."""
    return _platform_log_path()


class Config:
    """Configuration manager backed by a JSON file."""

    def __init__(self, path: Path | None = None):
        """Load config from *path*, falling back to the platform default."""
        self._path = path or get_config_path()
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    # ---- persistence ----

    def load(self) -> None:
        """Load configuration from disk, applying defaults for missing keys."""
        if self._path.exists():
            try:
                with open(self._path, encoding="utf-8") as fh:
                    stored = json.load(fh)
                if not isinstance(stored, dict):
                    raise ValueError("top-level JSON value is not an object")
                # Merge stored values over defaults so new keys get defaults
                self._data = {**DEFAULT_CONFIG, **stored}
                logger.debug("Configuration loaded from %s", self._path)
            except (ValueError, OSError) as exc:
                logger.warning("Could not read config (%s); using defaults.", exc)
                self._data = dict(DEFAULT_CONFIG)
        else:
            self._data = dict(DEFAULT_CONFIG)
            self.save()
            logger.info("Created default configuration at %s", self._path)

    def save(self) -> None:
        """Persist the current configuration to disk."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2)
            logger.debug("Configuration saved to %s", self._path)
        except OSError as exc:
            logger.error("Failed to save configuration: %s", exc)

    # ---- accessors ----

    @property
    def apikey(self) -> str:
        """Return the sc2replaystats API key."""
        return str(self._data.get("apikey") or "")

    @apikey.setter
    def apikey(self, value: str) -> None:
        self._data["apikey"] = value.strip()

    @property
    def replays_root(self) -> str:
        """Return the StarCraft II ``Accounts`` directory."""
        return str(self._data.get("replays_root") or "")

    @replays_root.setter
    def replays_root(self, value: str | Path) -> None:
        self._data["replays_root"] = str(value)

    @property
    def log_level(self) -> str:
        """Return the current logging level name."""
        return self._data.get("log_level", "INFO")

    @log_level.setter
    def log_level(self, value: str) -> None:
        self._data["log_level"] = value.upper()

    # ---- polling ----

    @property
    def stability_interval(self) -> float:
        """Return the replay size sampling interval in seconds."""
        return max(50, int(self._data.get("stability_interval_ms", 250))) / 1000

    @stability_interval.setter
    def stability_interval(self, seconds: float) -> None:
        """Set the sampling interval (minimum 50 ms)."""
        self._data["stability_interval_ms"] = max(50, int(seconds * 1000))

    @property
    def status_interval(self) -> float:
        """Return seconds between remote status queries."""
        return max(0.1, float(self._data.get("status_interval_seconds", 1.0)))

    @status_interval.setter
    def status_interval(self, seconds: float) -> None:
        """Set seconds between status queries (minimum 0.1 s)."""
        self._data["status_interval_seconds"] = max(0.1, float(seconds))

    # ---- log rotation ----

    @property
    def max_log_size_mb(self) -> int:
        """Return the maximum log file size in MB before rotation."""
        return int(self._data.get("max_log_size_mb", 10))

    @max_log_size_mb.setter
    def max_log_size_mb(self, value: int) -> None:
        """Set the maximum log file size in MB (minimum 1)."""
        self._data["max_log_size_mb"] = max(1, int(value))

    @property
    def log_backup_count(self) -> int:
        """Return the number of rotated log backups to keep."""
        return int(self._data.get("log_backup_count", 3))

    @log_backup_count.setter
    def log_backup_count(self, value: int) -> None:
        self._data["log_backup_count"] = max(0, int(value))

    # ---- convenience ----

    def has_valid_apikey(self) -> bool:
        """Return True when an API key of the expected format is stored."""
        return valid_api_key(self.apikey)

    def require_apikey(self) -> str:
        """Return the API key, or raise ConfigError explaining what is wrong."""
        if not self.apikey:
            raise ConfigError(
                "no API key in configuration, please use the login command"
            )
        if not self.has_valid_apikey():
            raise ConfigError(
                "invalid API key in configuration, please replace it "
                "or use the login command"
            )
        return self.apikey
