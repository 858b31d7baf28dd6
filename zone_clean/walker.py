"""Resilient folder-tree enumeration for bulk sweeps."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)


def _list_dir(directory: str) -> tuple[list[str], list[str]]:
    """Return ``(files, subdirectories)`` of *directory* as full paths.

    Symlinked directories are reported as neither, so a link loop can
    never trap the walk.
    """
    files: list[str] = []
    dirs: list[str] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    dirs.append(entry.path)
                elif entry.is_file():
                    files.append(entry.path)
            except OSError:
                logger.debug("Cannot stat %s", entry.path, exc_info=True)
    return files, dirs


def walk_files(
    root: str,
    on_error: Callable[[str, OSError], None] | None = None,
) -> Iterator[str]:
    """
    Yield every regular file below *root*, depth first.

    Uses an explicit stack rather than recursion.  A directory that
    cannot be listed (permission denied, I/O error, vanished mid-walk)
    is skipped; the rest of the tree is still visited.  Each call is an
    independent walk.
    """
    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            files, dirs = _list_dir(directory)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            if on_error is not None:
                on_error(directory, exc)
            continue
        yield from files
        stack.extend(dirs)
