"""
Zone.Identifier removal for Zone Cleaner.

Removes the ``Zone.Identifier`` stream from single files or whole
folder trees, classifies every attempt and reports the result through
callbacks.  Nothing here raises across the public methods: a missing
file or missing stream is a quiet negative result, any other OS
failure is reported to ``on_error``.
"""

import enum
import logging
import os
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from zone_clean.filters import ExtensionFilter
from zone_clean.streams import (
    ZONE_IDENTIFIER_STREAM,
    StreamBackend,
    StreamError,
    default_backend,
)
from zone_clean.walker import walk_files

logger = logging.getLogger(__name__)

_HISTORY_LIMIT = 1000


class CleanupOutcome(enum.Enum):
    """Result of one removal attempt."""

    REMOVED = "removed"
    NOT_PRESENT = "not_present"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class CleanupRecord:
    """Record of a single removal attempt."""
    path: str
    outcome: CleanupOutcome
    reason: str = ""
    error: StreamError | None = None
    finished: float = field(default_factory=time.time)

    @property
    def removed(self) -> bool:
        return self.outcome is CleanupOutcome.REMOVED


@dataclass
class CleanupStats:
    """Aggregated removal statistics."""
    total_removed: int = 0
    total_not_present: int = 0
    total_skipped: int = 0
    total_failed: int = 0
    last_removed_file: str = ""
    history: list[CleanupRecord] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, rec: CleanupRecord) -> None:
        with self._lock:
            if rec.outcome is CleanupOutcome.REMOVED:
                self.total_removed += 1
                self.last_removed_file = rec.path
            elif rec.outcome is CleanupOutcome.NOT_PRESENT:
                self.total_not_present += 1
                # Most files have no marker; keep them out of the history
                return
            elif rec.outcome is CleanupOutcome.SKIPPED:
                self.total_skipped += 1
            else:
                self.total_failed += 1
            self.history.append(rec)
            if len(self.history) > _HISTORY_LIMIT:
                self.history = self.history[-_HISTORY_LIMIT:]

    def recent(self, limit: int = 50) -> list[CleanupRecord]:
        """Return up to *limit* of the most recent notable records."""
        with self._lock:
            return list(self.history[-limit:])


class MarkerRemover:
    """
    Deletes the Zone.Identifier stream from files.

    Parameters
    ----------
    backend : StreamBackend, optional
        Stream deletion backend; defaults to the platform's.
    extension_filter : ExtensionFilter, optional
        Applied to bulk sweeps.  Single-file calls are never filtered.
    on_file_processed : callable, optional
        Called with the file path after each successful removal.
    on_error : callable, optional
        Called with the file path and a ``StreamError`` when removal
        fails for any reason other than the stream being absent.
    stream : str
        Name of the stream to remove.
    """

    def __init__(
        self,
        backend: StreamBackend | None = None,
        extension_filter: ExtensionFilter | None = None,
        on_file_processed: Callable[[str], None] | None = None,
        on_error: Callable[[str, StreamError], None] | None = None,
        stream: str = ZONE_IDENTIFIER_STREAM,
    ):
        self._backend = backend if backend is not None else default_backend()
        self._filter = extension_filter or ExtensionFilter()
        self._on_file_processed = on_file_processed
        self._on_error = on_error
        self._stream = stream
        self.stats = CleanupStats()

    @property
    def backend(self) -> StreamBackend:
        return self._backend

    def try_remove_marker(self, path: str) -> bool:
        """Remove the marker from *path*; return True only if one was removed."""
        return self.remove(path).removed

    def remove(self, path: str) -> CleanupRecord:
        """Attempt removal on *path* and return the classified record."""
        rec = self._attempt(path)
        self.stats.record(rec)

        if rec.outcome is CleanupOutcome.REMOVED:
            logger.info("Removed %s from %s", self._stream, path)
            self._emit_processed(path)
        elif rec.outcome is CleanupOutcome.FAILED:
            logger.warning("Could not remove %s from %s: %s", self._stream, path, rec.error)
            self._emit_error(path, rec.error)
        else:
            logger.debug("Nothing to do for %s (%s)", path, rec.reason)
        return rec

    def clean_folder(self, folder: str) -> int:
        """
        Sweep *folder* recursively and remove every marker found.

        Only files passing the extension filter are touched.  Returns
        the number of markers removed; a missing folder yields 0.
        """
        if not os.path.isdir(folder):
            logger.info("Folder does not exist, nothing to clean: %s", folder)
            return 0

        count = 0
        scanned = 0
        for path in walk_files(folder):
            if not self._filter.is_allowed(path):
                continue
            scanned += 1
            if self.try_remove_marker(path):
                count += 1
        logger.info("Cleaned %s: %d of %d file(s) had a marker", folder, count, scanned)
        return count

    # ---- internals ----

    def _attempt(self, path: str) -> CleanupRecord:
        if not os.path.isfile(path):
            return CleanupRecord(path, CleanupOutcome.SKIPPED, reason="file no longer exists")

        try:
            self._backend.delete(path, self._stream)
        except StreamError as exc:
            if exc.not_found:
                return CleanupRecord(path, CleanupOutcome.NOT_PRESENT, reason="no marker")
            return CleanupRecord(path, CleanupOutcome.FAILED, reason=str(exc), error=exc)
        except OSError as exc:
            code = getattr(exc, "winerror", None) or exc.errno
            err = StreamError(path, code, exc.strerror or str(exc))
            err.__cause__ = exc
            if err.not_found:
                return CleanupRecord(path, CleanupOutcome.NOT_PRESENT, reason="no marker")
            return CleanupRecord(path, CleanupOutcome.FAILED, reason=str(err), error=err)
        except Exception as exc:
            logger.exception("Unexpected error removing marker from %s", path)
            err = StreamError(path, None, str(exc))
            err.__cause__ = exc
            return CleanupRecord(path, CleanupOutcome.FAILED, reason=str(err), error=err)

        return CleanupRecord(path, CleanupOutcome.REMOVED)

    def _emit_processed(self, path: str) -> None:
        if self._on_file_processed:
            try:
                self._on_file_processed(path)
            except Exception:
                logger.exception("Error in on_file_processed callback")

    def _emit_error(self, path: str, error: StreamError | None) -> None:
        if self._on_error and error is not None:
            try:
                self._on_error(path, error)
            except Exception:
                logger.exception("Error in on_error callback")
