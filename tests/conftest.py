"""Shared fixtures for the Zone Cleaner test suite."""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable

import pytest

from zone_clean.engine import ZoneCleaner
from zone_clean.streams import ERROR_FILE_NOT_FOUND, ZONE_IDENTIFIER_STREAM, StreamError

DEBOUNCE = 0.05


def _norm(path: str) -> str:
    return os.path.normcase(os.path.abspath(path))


class FakeStreamBackend:
    """In-memory stand-in for the Win32 backend.

    ``mark(path)`` gives a file a Zone.Identifier stream; ``fail(path,
    code)`` makes every deletion on it fail with *code*.
    """

    name = "fake"

    def __init__(self) -> None:
        self._marked: set[str] = set()
        self._failures: dict[str, int] = {}
        self._lock = threading.Lock()
        self.calls: list[tuple[str, str]] = []

    def mark(self, path: str | os.PathLike) -> None:
        with self._lock:
            self._marked.add(_norm(os.fspath(path)))

    def fail(self, path: str | os.PathLike, code: int) -> None:
        with self._lock:
            self._failures[_norm(os.fspath(path))] = code

    def has_marker(self, path: str | os.PathLike) -> bool:
        with self._lock:
            return _norm(os.fspath(path)) in self._marked

    def delete(self, path: str, stream: str = ZONE_IDENTIFIER_STREAM) -> None:
        key = _norm(path)
        with self._lock:
            self.calls.append((path, stream))
            if key in self._failures:
                raise StreamError(path, self._failures[key], "simulated failure")
            if key not in self._marked:
                raise StreamError(path, ERROR_FILE_NOT_FOUND, "The system cannot find the file specified")
            self._marked.discard(key)


class EventLog:
    """Collects engine callbacks from any thread."""

    def __init__(self) -> None:
        self.processed: list[str] = []
        self.errors: list[tuple[str, StreamError]] = []
        self._lock = threading.Lock()

    def on_processed(self, path: str) -> None:
        with self._lock:
            self.processed.append(path)

    def on_error(self, path: str, error: StreamError) -> None:
        with self._lock:
            self.errors.append((path, error))

    def processed_for(self, path: str | os.PathLike) -> list[str]:
        key = _norm(os.fspath(path))
        with self._lock:
            return [p for p in self.processed if _norm(p) == key]


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.02) -> bool:
    """Poll *predicate* until it is true or *timeout* elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def backend() -> FakeStreamBackend:
    return FakeStreamBackend()


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def cleaner(backend, events):
    engine = ZoneCleaner(
        on_file_processed=events.on_processed,
        on_error=events.on_error,
        debounce_seconds=DEBOUNCE,
        backend=backend,
    )
    yield engine
    engine.shutdown()
    engine.wait_idle(timeout=5)


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a ``{relative_path: content}`` mapping."""

    def _make(files: dict[str, str]):
        paths = {}
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            paths[rel] = path
        return paths

    return _make
