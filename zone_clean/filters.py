"""Extension allow-list for Zone Cleaner."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable

logger = logging.getLogger(__name__)


def normalize_extension(ext: str) -> str:
    """Return *ext* lower-cased with a leading dot (``"PDF"`` -> ``".pdf"``).

    The empty string stays empty: it is the entry that admits files
    without an extension.
    """
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


class ExtensionFilter:
    """Thread-safe allow-list of file extensions.

    An empty list means every file is eligible.  The list is replaced
    as a whole, so each ``is_allowed`` check sees one consistent set.
    """

    def __init__(self, extensions: Iterable[str] | None = None):
        self._allowed: frozenset[str] = frozenset()
        self._lock = threading.Lock()
        if extensions:
            self.set_allowed(extensions)

    def set_allowed(self, extensions: Iterable[str] | None) -> None:
        """Replace the allow-list.  Whitespace-only entries are ignored."""
        allowed = frozenset(
            normalize_extension(e) for e in extensions or () if e == "" or e.strip()
        )
        with self._lock:
            self._allowed = allowed
        if allowed:
            logger.info("Allowed extensions: %s", ", ".join(sorted(allowed)))
        else:
            logger.info("Extension filter cleared; all files eligible.")

    @property
    def allowed(self) -> list[str]:
        with self._lock:
            return sorted(self._allowed)

    @property
    def active(self) -> bool:
        with self._lock:
            return bool(self._allowed)

    def is_allowed(self, path: str) -> bool:
        """Return whether *path* passes the filter."""
        with self._lock:
            allowed = self._allowed
        if not allowed:
            return True
        return os.path.splitext(path)[1].lower() in allowed
