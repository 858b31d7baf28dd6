"""
Main application controller for Zone Cleaner.

Ties together configuration, the cleaning engine, the system tray,
the folder manager dialog and the wx event loop.
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path

import wx

from zone_clean import __app_name__, __version__
from zone_clean.config import Config, get_log_path
from zone_clean.engine import ZoneCleaner
from zone_clean.platform_utils import acquire_single_instance, set_startup
from zone_clean.streams import StreamError
from zone_clean.tray import SysTray
from zone_clean.ui import FolderManagerDialog

logger = logging.getLogger(__name__)


class App:
    """
    Central orchestrator.

    Implements the TrayCallbacks protocol expected by SysTray.
    """

    def __init__(self) -> None:
        self.config = Config()
        self.cleaner = ZoneCleaner(
            on_file_processed=self._on_file_processed,
            on_error=self._on_error,
            allowed_extensions=self.config.allowed_extensions,
            debounce_seconds=self.config.debounce_seconds,
        )
        self._processed_count = 0
        self._count_lock = threading.Lock()

        # wx app without a main window; it only drives the event loop
        self._wx_app = wx.App(False)
        self._wx_app.SetExitOnFrameDelete(False)

        self._folder_dlg = FolderManagerDialog(self)
        self._tray = SysTray(self)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Start the tray and the watchers, then enter the wx main loop."""
        self._setup_logging()

        if not acquire_single_instance():
            logger.info("Another instance is already running; exiting.")
            wx.MessageBox(
                f"{__app_name__} is already running.",
                __app_name__,
                wx.OK | wx.ICON_INFORMATION,
            )
            return

        logger.info("%s %s starting (stream backend: %s).",
                    __app_name__, __version__, self.cleaner.backend_name)

        self._sync_autostart()
        self._tray.start()

        folders = self.config.monitored_folders
        for folder in folders:
            self.cleaner.add_path(folder)

        self._notify(
            "Cleaner started",
            f"Monitoring {len(folders)} folder(s) for Zone.Identifier streams.",
        )

        self._wx_app.MainLoop()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def apply_settings(self, folders: list[str], extensions: list[str]) -> None:
        """Persist new folders/extensions and re-register every watcher."""
        cfg = self.config
        for folder in self.cleaner.list_paths():
            self.cleaner.remove_path(folder)

        cfg.monitored_folders = folders
        cfg.allowed_extensions = extensions
        cfg.save()

        self.cleaner.set_allowed_extensions(cfg.allowed_extensions)
        for folder in cfg.monitored_folders:
            self.cleaner.add_path(folder)

        ext_info = (
            f"{len(cfg.allowed_extensions)} extension(s)"
            if cfg.allowed_extensions
            else "all extensions"
        )
        self._notify(
            "Settings updated",
            f"Monitoring {len(cfg.monitored_folders)} folder(s) — {ext_info}.",
        )

    # ------------------------------------------------------------------
    # TrayCallbacks implementation
    # ------------------------------------------------------------------

    def on_manage_folders(self) -> None:
        """Show the folder manager (thread-safe)."""
        wx.CallAfter(self._folder_dlg.show)

    def on_clean_now(self) -> None:
        """Sweep every configured folder on a background thread."""

        def _do():
            total = sum(
                self.cleaner.clean_folder(folder)
                for folder in self.config.monitored_folders
            )
            if total:
                self._notify("Clean-up complete", f"Removed {total} Zone.Identifier stream(s).")
            else:
                self._notify("Clean-up complete", "No Zone.Identifier streams found.")

        threading.Thread(target=_do, daemon=True, name="CleanNow").start()

    def on_toggle_startup(self) -> None:
        """Flip the start-at-login setting."""
        cfg = self.config
        cfg.start_at_login = not cfg.start_at_login
        cfg.save()
        self._sync_autostart()
        self._tray.refresh_menu()

    def on_quit(self) -> None:
        """Cleanly shut down the application."""
        logger.info("Shutting down…")
        self.cleaner.shutdown()
        self._tray.stop()
        wx.CallAfter(self._wx_app.ExitMainLoop)

    def is_startup_enabled(self) -> bool:
        return self.config.start_at_login

    def get_processed_count(self) -> int:
        with self._count_lock:
            return self._processed_count

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_file_processed(self, path: str) -> None:
        """Called (from a cleanup thread) after each marker removal."""
        with self._count_lock:
            self._processed_count += 1
        self._tray.refresh_menu()
        self._notify("Zone.Identifier removed", Path(path).name)

    def _on_error(self, path: str, error: StreamError) -> None:
        # Logged only; error balloons would nag the user for nothing actionable
        logger.error("Error processing %s: %s", path, error)

    def _notify(self, title: str, text: str) -> None:
        if self.config.show_notifications:
            self._tray.notify(title, text)

    def _sync_autostart(self) -> None:
        set_startup(self.config.start_at_login)

    def _setup_logging(self) -> None:
        """Configure rotating file log and stderr handler."""
        log_path = get_log_path()
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

        # Rotating file handler
        max_bytes = self.config.max_log_size_mb * 1024 * 1024
        fh = logging.handlers.RotatingFileHandler(
            str(log_path),
            maxBytes=max_bytes,
            backupCount=self.config.log_backup_count,
            encoding="utf-8",
        )
        fh.setLevel(level)
        fh.setFormatter(fmt)
        root_logger.addHandler(fh)

        # Stderr handler (for development)
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(level)
        sh.setFormatter(fmt)
        root_logger.addHandler(sh)
