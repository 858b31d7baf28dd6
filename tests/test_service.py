import threading

import pytest

from tests.conftest import wait_for
from zone_clean import config as config_module
from zone_clean import service
from zone_clean.config import Config


@pytest.fixture
def cfg(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "_platform_default_folders", lambda: [])
    cfg = Config(tmp_path / "config.json")
    cfg.debounce_ms = 20
    return cfg


def test_clean_once_sweeps_given_folders(cfg, backend, make_tree, tmp_path, capsys):
    paths = make_tree({"a/x.pdf": "x", "a/y.pdf": "y", "b/z.pdf": "z"})
    for p in paths.values():
        backend.mark(p)

    total = service.clean_once(cfg, [str(tmp_path / "a")], backend=backend)

    assert total == 2
    assert backend.has_marker(paths["b/z.pdf"])
    assert "2 removed" in capsys.readouterr().out


def test_clean_once_defaults_to_configured_folders(cfg, backend, make_tree, tmp_path):
    paths = make_tree({"b/z.pdf": "z", "b/skip.txt": "t"})
    for p in paths.values():
        backend.mark(p)
    cfg.monitored_folders = [str(tmp_path / "b")]
    cfg.allowed_extensions = [".pdf"]

    assert service.clean_once(cfg, [], backend=backend) == 1
    assert backend.has_marker(paths["b/skip.txt"])


def test_run_foreground_watches_until_stopped(cfg, backend, tmp_path):
    watched = tmp_path / "watched"
    watched.mkdir()
    cfg.monitored_folders = [str(watched)]
    stop = threading.Event()
    runner = threading.Thread(
        target=service.run_foreground, args=(cfg, stop, backend), daemon=True
    )
    runner.start()
    try:
        target = watched / "mail.pdf"
        backend.mark(target)

        def touched_and_cleaned():
            # The watcher may not be registered yet; rewrite until it is seen
            target.write_text("body")
            return not backend.has_marker(target)

        assert wait_for(touched_and_cleaned, timeout=10, interval=0.2)
    finally:
        stop.set()
        runner.join(timeout=10)
    assert not runner.is_alive()
