"""
Headless mode for Zone Cleaner.

Runs the cleaning engine without the tray icon, using the saved
configuration:

    python -m zone_clean --service start            watch until Ctrl-C
    python -m zone_clean --service clean [FOLDER…]  sweep once and exit

Without folders, ``clean`` sweeps the configured ones.
"""

import logging
import logging.handlers
import signal
import sys
import threading

from zone_clean import __app_name__
from zone_clean.config import Config, get_log_path
from zone_clean.engine import ZoneCleaner
from zone_clean.streams import StreamBackend, StreamError

logger = logging.getLogger(__name__)


def _setup_logging(cfg: Config) -> None:
    """Log to the rotating file and to stderr."""
    handler = logging.handlers.RotatingFileHandler(
        str(get_log_path()),
        maxBytes=cfg.max_log_size_mb * 1024 * 1024,
        backupCount=cfg.log_backup_count,
        encoding="utf-8",
    )
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[handler, logging.StreamHandler(sys.stderr)],
    )


def _log_error(path: str, error: StreamError) -> None:
    logger.error("Error processing %s: %s", path, error)


def build_cleaner(cfg: Config, backend: StreamBackend | None = None) -> ZoneCleaner:
    """Create an engine configured from *cfg* (no folders registered yet)."""
    return ZoneCleaner(
        on_error=_log_error,
        allowed_extensions=cfg.allowed_extensions,
        debounce_seconds=cfg.debounce_seconds,
        backend=backend,
    )


def run_foreground(
    cfg: Config,
    stop: threading.Event | None = None,
    backend: StreamBackend | None = None,
) -> None:
    """Watch the configured folders until SIGINT/SIGTERM or *stop* is set."""
    if stop is None:
        stop = threading.Event()
    cleaner = build_cleaner(cfg, backend)

    if threading.current_thread() is threading.main_thread():

        def _handler(sig, frame):
            stop.set()

        signal.signal(signal.SIGINT, _handler)
        signal.signal(signal.SIGTERM, _handler)

    with cleaner:
        for folder in cfg.monitored_folders:
            if not cleaner.add_path(folder):
                logger.warning("Not watching %s (missing or duplicate).", folder)
        print(f"{__app_name__} watching {len(cleaner.list_paths())} folder(s) "
              "(press Ctrl-C to stop)…")
        while not stop.wait(timeout=1):
            pass
        cleaner.wait_idle(timeout=5)
    print(f"{__app_name__} stopped.")


def clean_once(
    cfg: Config,
    folders: list[str],
    backend: StreamBackend | None = None,
) -> int:
    """Sweep *folders* (default: configured folders); return markers removed."""
    targets = folders or cfg.monitored_folders
    with build_cleaner(cfg, backend) as cleaner:
        total = 0
        for folder in targets:
            count = cleaner.clean_folder(folder)
            print(f"{folder}: {count} removed")
            total += count
    return total


def main(argv: list[str] | None = None) -> None:
    """Entry point for headless control."""
    args = sys.argv[1:] if argv is None else argv
    cmd = args[0] if args else ""

    cfg = Config()
    _setup_logging(cfg)

    if cmd == "start":
        run_foreground(cfg)
    elif cmd == "clean":
        total = clean_once(cfg, args[1:])
        print(f"Removed {total} Zone.Identifier stream(s).")
    else:
        _show_help()


def _show_help() -> None:
    print(f"{__app_name__} — headless mode")
    print()
    print("Usage:")
    print("  python -m zone_clean --service start            Watch configured folders (Ctrl-C to stop)")
    print("  python -m zone_clean --service clean [FOLDER…]  Sweep folders once and exit")


if __name__ == "__main__":
    main()
