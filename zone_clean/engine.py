"""
Cleaning engine for Zone Cleaner.

Ties the folder registry, the extension filter, the debounced
dispatcher and the marker remover together behind one object:

    cleaner = ZoneCleaner(on_file_processed=print)
    cleaner.set_allowed_extensions([".pdf", ".docx"])
    cleaner.add_path(r"C:\\Users\\me\\Downloads")
    ...
    cleaner.clean_folder(r"C:\\Users\\me\\Documents")
    cleaner.shutdown()

Reactive path: watchdog event -> extension filter -> debounce timer ->
marker removal.  Bulk path: tree walk -> extension filter -> marker
removal, synchronously.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

from zone_clean.cleaner import CleanupStats, MarkerRemover
from zone_clean.filters import ExtensionFilter
from zone_clean.registry import PathRegistry
from zone_clean.streams import StreamBackend, StreamError
from zone_clean.watcher import DEFAULT_DEBOUNCE_SECONDS, DebouncedDispatcher

logger = logging.getLogger(__name__)


class ZoneCleaner:
    """
    Watches folders and strips the Zone.Identifier stream from their files.

    Parameters
    ----------
    on_file_processed : callable, optional
        Called with the path of every file whose marker was removed.
    on_error : callable, optional
        Called with the path and a ``StreamError`` for every failed
        removal other than "no marker present".
    allowed_extensions : iterable of str, optional
        Initial extension allow-list (empty = all files).
    debounce_seconds : float
        Delay between a file event and the removal attempt.
    backend : StreamBackend, optional
        Stream deletion backend; defaults to the platform's.
    """

    def __init__(
        self,
        on_file_processed: Callable[[str], None] | None = None,
        on_error: Callable[[str, StreamError], None] | None = None,
        allowed_extensions: Iterable[str] | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        backend: StreamBackend | None = None,
    ):
        self._filter = ExtensionFilter(allowed_extensions)
        self._remover = MarkerRemover(
            backend=backend,
            extension_filter=self._filter,
            on_file_processed=on_file_processed,
            on_error=on_error,
        )
        self._dispatcher = DebouncedDispatcher(
            self._remover.try_remove_marker, debounce_seconds
        )
        self._registry = PathRegistry(self._on_change)
        self._shutdown_lock = threading.Lock()
        self._shut_down = False

    # ---- folders ----

    def add_path(self, path: str) -> bool:
        """Start watching *path* (no-op if missing or already watched)."""
        return self._registry.add_path(path)

    def remove_path(self, path: str) -> bool:
        """Stop watching *path* (no-op if not watched)."""
        return self._registry.remove_path(path)

    def list_paths(self) -> list[str]:
        """Return a snapshot of the watched folders."""
        return self._registry.list_paths()

    # ---- filtering ----

    def set_allowed_extensions(self, extensions: Iterable[str] | None) -> None:
        """Replace the extension allow-list (empty = all files)."""
        self._filter.set_allowed(extensions)

    @property
    def allowed_extensions(self) -> list[str]:
        return self._filter.allowed

    def is_allowed(self, path: str) -> bool:
        return self._filter.is_allowed(path)

    # ---- cleaning ----

    def try_remove_marker(self, path: str) -> bool:
        """Remove the marker from one file now.  True if one was removed."""
        return self._remover.try_remove_marker(path)

    def clean_folder(self, path: str) -> int:
        """Sweep *path* recursively; return the number of markers removed."""
        return self._remover.clean_folder(path)

    def clean_all(self) -> int:
        """Sweep every watched folder; return the total removed."""
        return sum(self.clean_folder(folder) for folder in self.list_paths())

    # ---- debounce ----

    @property
    def debounce_seconds(self) -> float:
        return self._dispatcher.delay

    @debounce_seconds.setter
    def debounce_seconds(self, value: float) -> None:
        self._dispatcher.delay = value

    @property
    def pending_count(self) -> int:
        """Number of removal attempts waiting for their debounce delay."""
        return self._dispatcher.pending_count

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Wait for pending removal attempts to finish."""
        return self._dispatcher.wait_idle(timeout)

    # ---- status ----

    @property
    def stats(self) -> CleanupStats:
        return self._remover.stats

    @property
    def backend_name(self) -> str:
        return self._remover.backend.name

    # ---- lifecycle ----

    def shutdown(self) -> None:
        """Release every folder watcher.  Safe to call more than once.

        Removal attempts already waiting on their debounce delay still
        run; they are harmless once the watchers are gone.
        """
        with self._shutdown_lock:
            if self._shut_down:
                return
            self._shut_down = True
        self._registry.close()
        logger.info("Zone cleaner shut down.")

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    def __enter__(self) -> ZoneCleaner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # ---- internals ----

    def _on_change(self, path: str) -> None:
        if not self._filter.is_allowed(path):
            logger.debug("Ignoring %s (extension not allowed)", path)
            return
        self._dispatcher.schedule(path)
