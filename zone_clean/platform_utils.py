"""
OS helpers for Zone Cleaner: where settings live, which folders to
watch on first run, the single-instance guard, and the
"start at login" registry entry.

Only Windows has Zone.Identifier streams.  Elsewhere the app still
runs (useful for development) but has nothing to remove and no login
hook.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

IS_WINDOWS: bool = sys.platform == "win32"

_APP_DIR_NAME = "ZoneCleaner"


def get_config_dir() -> Path:
    """Per-user settings folder (``%APPDATA%\\ZoneCleaner`` on Windows)."""
    root = os.environ.get("APPDATA" if IS_WINDOWS else "XDG_CONFIG_HOME")
    folder = Path(root) if root else Path.home() / ".config"
    folder /= _APP_DIR_NAME
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def get_log_path() -> Path:
    return get_config_dir() / "zone_cleaner.log"


def get_default_folders() -> list[str]:
    """Return the user's Desktop, Downloads and Documents folders that exist."""
    home = Path.home()
    candidates = [home / "Desktop", home / "Downloads", home / "Documents"]
    return [str(p) for p in candidates if p.is_dir()]


# ---- single instance ---------------------------------------------------

_MUTEX_NAME = "ZoneCleaner_SingleInstance"
_instance_handle = None


def acquire_single_instance() -> bool:
    """
    Claim the per-user "already running" guard.

    Returns False when another instance holds it.  The guard is kept
    for the lifetime of the process.
    """
    global _instance_handle
    if _instance_handle is not None:
        return True

    if IS_WINDOWS:
        try:
            import win32api  # type: ignore[import-untyped]
            import win32event  # type: ignore[import-untyped]
            import winerror  # type: ignore[import-untyped]
        except ImportError:
            logger.warning("pywin32 not installed — single-instance guard disabled.")
            return True
        handle = win32event.CreateMutex(None, False, _MUTEX_NAME)
        if win32api.GetLastError() == winerror.ERROR_ALREADY_EXISTS:
            return False
        _instance_handle = handle
        return True

    import fcntl

    lock_file = open(get_config_dir() / "zone_cleaner.lock", "w")
    try:
        fcntl.flock(lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        lock_file.close()
        return False
    _instance_handle = lock_file
    return True


# ---- start at login ----------------------------------------------------

_RUN_KEY = r"Software\Microsoft\Windows\CurrentVersion\Run"
_RUN_VALUE = "ZoneCleaner"


def launcher_command(executable: str | None = None) -> str:
    """
    Command line stored in the Run key.

    A frozen build starts itself.  Otherwise ``pythonw.exe`` is preferred
    over the console interpreter so no window opens at login.
    """
    exe = Path(executable or sys.executable)
    if getattr(sys, "frozen", False):
        return f'"{exe}"'
    windowless = exe.with_name("pythonw.exe")
    if windowless.is_file():
        exe = windowless
    return f'"{exe}" -m zone_clean'


def set_startup(enable: bool) -> bool:
    """
    Add or remove the HKCU Run entry.

    Registry errors are logged, not raised.
    Returns whether the registry now matches *enable*.
    """
    if not IS_WINDOWS:
        logger.debug("Start at login is only available on Windows.")
        return False

    import winreg

    try:
        with winreg.OpenKey(
            winreg.HKEY_CURRENT_USER, _RUN_KEY, 0, winreg.KEY_SET_VALUE
        ) as key:
            if enable:
                winreg.SetValueEx(key, _RUN_VALUE, 0, winreg.REG_SZ, launcher_command())
            else:
                try:
                    winreg.DeleteValue(key, _RUN_VALUE)
                except FileNotFoundError:
                    pass
    except OSError as exc:
        logger.warning("Could not update the Run key: %s", exc)
        return False
    logger.info("Start at login %s.", "enabled" if enable else "disabled")
    return True
