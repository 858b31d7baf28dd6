"""Registry of watched folders for Zone Cleaner.

Keeps exactly one ``FolderObserver`` per registered folder.  Folders
are matched case-insensitively, the way Windows compares paths, and
every change to the folder/observer map happens under one lock.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable

from zone_clean.watcher import FolderObserver

logger = logging.getLogger(__name__)


def normalize_folder(path: str) -> str:
    """Return the canonical form under which *path* is registered."""
    return os.path.normpath(os.path.abspath(path))


def _key(path: str) -> str:
    return normalize_folder(path).casefold()


class PathRegistry:
    """Set of watched folders, each backed by its own observer.

    Parameters
    ----------
    on_change : callable
        Receives the full path of every created, modified or renamed
        file in any registered folder.
    observer_factory : callable, optional
        Builds the observer for a folder; defaults to ``FolderObserver``.
    """

    def __init__(
        self,
        on_change: Callable[[str], None],
        observer_factory: Callable[[str, Callable[[str], None]], FolderObserver] | None = None,
    ):
        self._on_change = on_change
        self._observer_factory = observer_factory or FolderObserver
        # casefolded key -> (registered path, observer)
        self._entries: dict[str, tuple[str, FolderObserver]] = {}
        self._lock = threading.Lock()
        self._closed = False

    def add_path(self, path: str) -> bool:
        """Start watching *path*.  Returns True if it was newly registered."""
        if not path or not os.path.isdir(path):
            logger.debug("Not a directory, not watching: %s", path)
            return False

        folder = normalize_folder(path)
        key = _key(folder)
        with self._lock:
            if self._closed:
                logger.debug("Registry closed; ignoring %s", folder)
                return False
            if key in self._entries:
                logger.debug("Already watching %s", folder)
                return False

            observer = self._observer_factory(folder, self._on_change)
            try:
                observer.start()
            except OSError as exc:
                logger.error("Cannot watch %s: %s", folder, exc)
                return False
            self._entries[key] = (folder, observer)
        return True

    def remove_path(self, path: str) -> bool:
        """Stop watching *path*.  Returns True if it was registered."""
        if not path:
            return False
        with self._lock:
            entry = self._entries.pop(_key(path), None)
            if entry is None:
                logger.debug("Not watching %s; nothing to remove", path)
                return False
            entry[1].stop()
        return True

    def list_paths(self) -> list[str]:
        """Return a snapshot of the registered folders."""
        with self._lock:
            return [folder for folder, _ in self._entries.values()]

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        with self._lock:
            return _key(path) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def close(self) -> None:
        """Stop every observer and refuse further registrations."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            entries = list(self._entries.values())
            self._entries.clear()
            for _, observer in entries:
                observer.stop()
        logger.info("Released %d folder watcher(s).", len(entries))
