"""Alternate data stream access for Zone Cleaner.

Everything that touches the ``Zone.Identifier`` stream goes through a
small backend object with a single ``delete(path, stream)`` method, so
the engine can run (and be tested) against a fake.

- Windows: ``win32file.DeleteFile`` from pywin32.  Given an ADS path
  such as ``C:\\file.pdf:Zone.Identifier`` it deletes only that stream
  and leaves the file's primary content alone.
- Other platforms: there are no alternate data streams, so every
  delete reports ``ERROR_FILE_NOT_FOUND`` and nothing is touched.
"""

from __future__ import annotations

import logging
from typing import Protocol

from zone_clean.platform_utils import IS_WINDOWS

logger = logging.getLogger(__name__)

ZONE_IDENTIFIER_STREAM = "Zone.Identifier"

# Win32 error codes the engine cares about
ERROR_FILE_NOT_FOUND = 2
ERROR_ACCESS_DENIED = 5
ERROR_SHARING_VIOLATION = 32

_HAS_WIN32 = False
if IS_WINDOWS:
    try:
        import pywintypes  # type: ignore[import-untyped]
        import win32file  # type: ignore[import-untyped]

        _HAS_WIN32 = True
    except ImportError:
        logger.warning(
            "pywin32 not installed — Zone.Identifier removal disabled."
        )


class StreamError(OSError):
    """A failed stream deletion, carrying the Win32 error code.

    ``filename`` is the file whose stream was targeted (not the ADS
    path) and ``code`` the raw OS error code, or None when the failure
    did not come from the OS.
    """

    def __init__(self, path: str, code: int | None, message: str = ""):
        super().__init__(code, message or f"OS error {code}", path)
        self.code = code

    @property
    def not_found(self) -> bool:
        """True when the stream simply does not exist."""
        return self.code == ERROR_FILE_NOT_FOUND


def stream_path(path: str, stream: str = ZONE_IDENTIFIER_STREAM) -> str:
    """Return the ADS address of *stream* on *path* (``path:stream``)."""
    return f"{path}:{stream}"


class StreamBackend(Protocol):
    """Deletes a named alternate data stream."""

    name: str

    def delete(self, path: str, stream: str = ZONE_IDENTIFIER_STREAM) -> None:
        """Delete *stream* from *path*, raising ``StreamError`` on failure."""
        ...


class Win32StreamBackend:
    """Stream deletion through the Win32 ``DeleteFile`` API."""

    name = "win32"

    def delete(self, path: str, stream: str = ZONE_IDENTIFIER_STREAM) -> None:
        try:
            win32file.DeleteFile(stream_path(path, stream))
        except pywintypes.error as exc:
            raise StreamError(path, exc.winerror, exc.strerror) from exc


class NullStreamBackend:
    """Backend for platforms without alternate data streams.

    Every stream is reported missing, so no file is ever modified.
    """

    name = "null"

    def delete(self, path: str, stream: str = ZONE_IDENTIFIER_STREAM) -> None:
        raise StreamError(
            path,
            ERROR_FILE_NOT_FOUND,
            "Alternate data streams are not supported on this platform",
        )


def default_backend() -> StreamBackend:
    """Return the best stream backend for the running platform."""
    if _HAS_WIN32:
        return Win32StreamBackend()
    if IS_WINDOWS:
        logger.warning("Falling back to the no-op stream backend.")
    else:
        logger.info("No alternate data streams on this platform; cleaning is a no-op.")
    return NullStreamBackend()
