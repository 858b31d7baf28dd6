import time

from tests.conftest import DEBOUNCE, wait_for
from zone_clean.engine import ZoneCleaner
from zone_clean.streams import ERROR_ACCESS_DENIED


def test_add_missing_path_leaves_registry_unchanged(cleaner, tmp_path):
    cleaner.add_path(str(tmp_path / "does-not-exist"))
    assert cleaner.list_paths() == []


def test_add_twice_registers_once(cleaner, tmp_path):
    assert cleaner.add_path(str(tmp_path))
    assert not cleaner.add_path(str(tmp_path))
    assert cleaner.list_paths() == [str(tmp_path)]


def test_marker_removed_after_debounce(cleaner, backend, events, tmp_path):
    cleaner.add_path(str(tmp_path))
    target = tmp_path / "attachment.pdf"
    backend.mark(target)
    target.write_bytes(b"primary content")

    assert wait_for(lambda: events.processed_for(target))
    assert cleaner.wait_idle(timeout=5)
    assert not backend.has_marker(target)
    assert len(events.processed_for(target)) == 1
    assert target.read_bytes() == b"primary content"
    assert events.errors == []


def test_nothing_happens_before_the_delay(backend, events, tmp_path):
    with ZoneCleaner(
        on_file_processed=events.on_processed,
        debounce_seconds=1.0,
        backend=backend,
    ) as engine:
        engine.add_path(str(tmp_path))
        target = tmp_path / "slow.pdf"
        backend.mark(target)
        target.write_text("still writing")
        assert wait_for(lambda: engine.pending_count > 0)
        assert backend.has_marker(target)
        assert engine.wait_idle(timeout=5)
    assert not backend.has_marker(target)


def test_renamed_file_is_cleaned(cleaner, backend, events, tmp_path):
    partial = tmp_path / "download.pdf.part"
    partial.write_text("data")
    cleaner.set_allowed_extensions([".pdf"])
    cleaner.add_path(str(tmp_path))

    final = tmp_path / "download.pdf"
    backend.mark(final)
    partial.rename(final)

    assert wait_for(lambda: events.processed_for(final))


def test_files_in_new_subfolders_are_cleaned(cleaner, backend, events, tmp_path):
    sub = tmp_path / "inbox"
    sub.mkdir()
    cleaner.add_path(str(tmp_path))
    target = sub / "report.xlsx"
    backend.mark(target)
    target.write_text("cells")

    assert wait_for(lambda: events.processed_for(target))


def test_filtered_extensions_are_left_alone(cleaner, backend, events, tmp_path):
    cleaner.set_allowed_extensions(["pdf"])
    cleaner.add_path(str(tmp_path))
    ignored = tmp_path / "notes.txt"
    backend.mark(ignored)
    ignored.write_text("x")
    cleaned = tmp_path / "scan.PDF"
    backend.mark(cleaned)
    cleaned.write_text("y")

    assert wait_for(lambda: events.processed_for(cleaned))
    assert cleaner.wait_idle(timeout=5)
    assert backend.has_marker(ignored)
    assert events.processed_for(ignored) == []


def test_remove_path_stops_notifications(cleaner, backend, events, tmp_path):
    cleaner.add_path(str(tmp_path))
    first = tmp_path / "first.pdf"
    backend.mark(first)
    first.write_text("1")
    assert wait_for(lambda: events.processed_for(first))

    assert cleaner.remove_path(str(tmp_path))
    assert cleaner.list_paths() == []
    assert cleaner.wait_idle(timeout=5)

    second = tmp_path / "second.pdf"
    backend.mark(second)
    second.write_text("2")
    time.sleep(DEBOUNCE * 6)
    assert cleaner.wait_idle(timeout=5)

    assert events.processed_for(second) == []
    assert backend.has_marker(second)


def test_errors_reach_the_subscriber(cleaner, backend, events, tmp_path):
    cleaner.add_path(str(tmp_path))
    target = tmp_path / "locked.docx"
    backend.fail(target, ERROR_ACCESS_DENIED)
    target.write_text("x")

    assert wait_for(lambda: events.errors)
    path, err = events.errors[0]
    assert path == str(target)
    assert err.code == ERROR_ACCESS_DENIED


def test_try_remove_marker_twice(cleaner, backend, events, tmp_path):
    target = tmp_path / "a.zip"
    target.write_bytes(b"PK")
    backend.mark(target)

    assert cleaner.try_remove_marker(str(target)) is True
    assert cleaner.try_remove_marker(str(target)) is False
    assert events.processed == [str(target)]
    assert cleaner.stats.total_removed == 1


def test_clean_folder_counts_markers(cleaner, backend, make_tree, tmp_path):
    paths = make_tree({"a.pdf": "a", "b.pdf": "b", "sub/c.pdf": "c", "sub/d.pdf": "d"})
    backend.mark(paths["a.pdf"])
    backend.mark(paths["sub/c.pdf"])

    assert cleaner.clean_folder(str(tmp_path)) == 2


def test_clean_all_sums_registered_folders(cleaner, backend, make_tree, tmp_path):
    paths = make_tree({"one/a.pdf": "a", "two/b.pdf": "b", "three/c.pdf": "c"})
    for p in paths.values():
        backend.mark(p)
    cleaner.add_path(str(tmp_path / "one"))
    cleaner.add_path(str(tmp_path / "two"))

    assert cleaner.clean_all() == 2
    assert backend.has_marker(paths["three/c.pdf"])


def test_shutdown_is_idempotent(backend, tmp_path):
    engine = ZoneCleaner(backend=backend, debounce_seconds=DEBOUNCE)
    engine.add_path(str(tmp_path))
    engine.shutdown()
    engine.shutdown()
    assert engine.is_shut_down
    assert engine.list_paths() == []
    assert engine.add_path(str(tmp_path)) is False


def test_debounce_is_adjustable(cleaner):
    cleaner.debounce_seconds = 2.5
    assert cleaner.debounce_seconds == 2.5
    cleaner.debounce_seconds = -1
    assert cleaner.debounce_seconds == 0.0
