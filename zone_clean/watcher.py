"""File system watching for Zone Cleaner.

Uses the watchdog library to monitor a folder tree for created,
modified and renamed files, and a debounced dispatcher that waits a
moment before acting on each one so a slow writer (an e-mail client
saving an attachment, a browser finishing a download) can release the
file first.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from typing import Any

from watchdog.events import (
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


class DebouncedDispatcher:
    """Runs an action on a path after a fixed delay, fire-and-forget.

    Every ``schedule`` call gets its own timer: repeated events for the
    same path are not coalesced and pending timers are never cancelled.
    The action must therefore be idempotent.
    """

    def __init__(
        self,
        action: Callable[[str], Any],
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self._action = action
        self._delay = delay
        self._pending = 0
        self._idle = threading.Condition()

    @property
    def delay(self) -> float:
        return self._delay

    @delay.setter
    def delay(self, value: float) -> None:
        self._delay = max(0.0, value)

    @property
    def pending_count(self) -> int:
        with self._idle:
            return self._pending

    def schedule(self, path: str) -> None:
        """Queue the action for *path* after the debounce delay."""
        timer = threading.Timer(self._delay, self._run, args=(path,))
        timer.daemon = True
        timer.name = f"Cleanup-{os.path.basename(path)}"
        with self._idle:
            self._pending += 1
        timer.start()
        logger.debug("Scheduled cleanup of %s in %.2fs", path, self._delay)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no timers are pending.  Returns False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def _run(self, path: str) -> None:
        try:
            self._action(path)
        except Exception:
            logger.exception("Error in cleanup action for %s", path)
        finally:
            with self._idle:
                self._pending -= 1
                self._idle.notify_all()


class ChangeHandler(FileSystemEventHandler):
    """Watchdog handler that forwards changed file paths to a callback."""

    def __init__(self, on_change: Callable[[str], None]):
        super().__init__()
        self._on_change = on_change
        self._closed = threading.Event()

    def close(self) -> None:
        """Drop every event delivered from now on."""
        self._closed.set()

    def _forward(self, path: str | bytes, is_directory: bool) -> None:
        if self._closed.is_set() or is_directory:
            return
        path = os.fsdecode(path)
        if os.path.isdir(path):
            return
        try:
            self._on_change(path)
        except Exception:
            logger.exception("Error handling change to %s", path)

    def on_created(self, event: FileCreatedEvent) -> None:  # type: ignore[override]
        """Handle a new file creation event."""
        self._forward(event.src_path, event.is_directory)

    def on_modified(self, event: FileModifiedEvent) -> None:  # type: ignore[override]
        """Handle a file modification event."""
        self._forward(event.src_path, event.is_directory)

    def on_moved(self, event: FileMovedEvent) -> None:  # type: ignore[override]
        """Handle a rename; the new name is the one to clean."""
        self._forward(event.dest_path, event.is_directory)


class FolderObserver:
    """Recursive watchdog subscription on one folder.

    Usage:
        observer = FolderObserver(folder, on_change)
        observer.start()
        ...
        observer.stop()
    """

    def __init__(self, folder: str, on_change: Callable[[str], None]):
        self.folder = folder
        self._handler = ChangeHandler(on_change)
        self._observer: Any | None = None

    # ---- lifecycle ----

    def start(self) -> None:
        """Start watching; raises ``OSError`` if the folder cannot be watched."""
        if not os.path.isdir(self.folder):
            raise FileNotFoundError(f"Folder does not exist: {self.folder}")

        observer = Observer()
        observer.daemon = True
        observer.schedule(self._handler, self.folder, recursive=True)
        observer.start()
        self._observer = observer
        logger.info("Watching '%s'", self.folder)

    def stop(self) -> None:
        """Stop watching and release the subscription."""
        self._handler.close()
        observer = self._observer
        self._observer = None
        if observer is None:
            return
        try:
            observer.stop()
            observer.join(timeout=5)
        except (OSError, RuntimeError):
            # The folder may have been deleted under the observer
            logger.warning("Error stopping watcher for %s", self.folder, exc_info=True)
        logger.info("Stopped watching '%s'", self.folder)

    @property
    def is_running(self) -> bool:
        """Return whether the observer thread is alive."""
        return self._observer is not None and self._observer.is_alive()
