"""Configuration management for Zone Cleaner.

Stores and retrieves user settings from a JSON config file
in the platform-appropriate application data directory.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any

from zone_clean.filters import normalize_extension
from zone_clean.platform_utils import (
    get_config_dir as _platform_config_dir,
)
from zone_clean.platform_utils import (
    get_default_folders as _platform_default_folders,
)
from zone_clean.platform_utils import (
    get_log_path as _platform_log_path,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "monitored_folders": [],  # filled with Desktop/Downloads/Documents on first run
    "allowed_extensions": [],  # Empty = all files
    "start_at_login": False,
    "debounce_ms": 500,
    "show_notifications": True,
    "log_level": "INFO",
    # ---- log rotation ----
    "max_log_size_mb": 10,  # rotate log when it exceeds this size
    "log_backup_count": 3,  # number of rotated log files to keep
}


def get_config_dir() -> Path:
    """Return the platform-appropriate application config directory."""
    return _platform_config_dir()


def get_config_path() -> Path:
    """Return the path to the configuration file."""
    return get_config_dir() / "config.json"


def get_log_path() -> Path:
    """Return the path to the log file."""
    return _platform_log_path()


def _unique_folders(folders: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for folder in folders:
        folder = folder.strip()
        if folder and folder.casefold() not in seen:
            seen.add(folder.casefold())
            result.append(folder)
    return result


def _unique_extensions(extensions: list[str]) -> list[str]:
    result: list[str] = []
    for ext in extensions:
        ext = normalize_extension(ext)
        if ext and ext not in result:
            result.append(ext)
    return result


class Config:
    """Thread-safe configuration manager backed by a JSON file."""

    def __init__(self, path: Path | None = None):
        """Load config from *path*, falling back to the platform default."""
        self._path = path or get_config_path()
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        self._lock = threading.RLock()
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    # ---- persistence ----

    def load(self) -> None:
        """Load configuration from disk, applying defaults for missing keys."""
        with self._lock:
            if self._path.exists():
                try:
                    with open(self._path, encoding="utf-8") as fh:
                        stored = json.load(fh)
                    if not isinstance(stored, dict):
                        raise ValueError("top-level value is not an object")
                    # Merge stored values over defaults so new keys get defaults
                    self._data = {**DEFAULT_CONFIG, **stored}
                    logger.info("Configuration loaded from %s", self._path)
                except (json.JSONDecodeError, ValueError, OSError) as exc:
                    logger.warning("Could not read config (%s); using defaults.", exc)
                    self._data = self._defaults()
            else:
                self._data = self._defaults()
                self.save()
                logger.info("Created default configuration at %s", self._path)

    def save(self) -> None:
        """Persist the current configuration to disk."""
        with self._lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with open(self._path, "w", encoding="utf-8") as fh:
                    json.dump(self._data, fh, indent=2)
                logger.info("Configuration saved.")
            except OSError as exc:
                logger.error("Failed to save configuration: %s", exc)

    @staticmethod
    def _defaults() -> dict[str, Any]:
        data = dict(DEFAULT_CONFIG)
        data["monitored_folders"] = _platform_default_folders()
        data["allowed_extensions"] = []
        return data

    # ---- accessors ----

    @property
    def monitored_folders(self) -> list[str]:
        """Return the watched folder paths."""
        with self._lock:
            return list(self._data.get("monitored_folders") or [])

    @monitored_folders.setter
    def monitored_folders(self, value: list[str]) -> None:
        """Set the watched folders, dropping blanks and case-insensitive duplicates."""
        with self._lock:
            self._data["monitored_folders"] = _unique_folders(value)

    @property
    def allowed_extensions(self) -> list[str]:
        """Return the extension allow-list (empty = all files)."""
        with self._lock:
            return list(self._data.get("allowed_extensions") or [])

    @allowed_extensions.setter
    def allowed_extensions(self, value: list[str]) -> None:
        """Set allowed extensions, normalising to lower case with a leading dot."""
        with self._lock:
            self._data["allowed_extensions"] = _unique_extensions(value)

    @property
    def start_at_login(self) -> bool:
        """Return whether auto-start at login is enabled."""
        return bool(self._data.get("start_at_login", False))

    @start_at_login.setter
    def start_at_login(self, value: bool) -> None:
        """Enable or disable auto-start at login."""
        self._data["start_at_login"] = bool(value)

    @property
    def debounce_ms(self) -> int:
        """Return the delay between a file event and cleaning, in ms."""
        return int(self._data.get("debounce_ms", 500))

    @debounce_ms.setter
    def debounce_ms(self, value: int) -> None:
        """Set the debounce delay (minimum 0 ms)."""
        self._data["debounce_ms"] = max(0, int(value))

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @property
    def show_notifications(self) -> bool:
        """Return whether balloon notifications are shown."""
        return bool(self._data.get("show_notifications", True))

    @show_notifications.setter
    def show_notifications(self, value: bool) -> None:
        self._data["show_notifications"] = bool(value)

    @property
    def log_level(self) -> str:
        """Return the current logging level name."""
        return self._data.get("log_level", "INFO")

    @log_level.setter
    def log_level(self, value: str) -> None:
        """Set the logging level name."""
        self._data["log_level"] = value

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
        """Set the number of rotated log backups to keep."""
        self._data["log_backup_count"] = max(0, int(value))
