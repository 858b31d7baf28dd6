"""System tray icon for Zone Cleaner.

Provides a persistent system-tray presence with a context menu to
manage the watched folders, sweep them now, toggle start at login and
quit.  The menu shows how many markers have been removed so far, and
balloon notifications announce removals.
"""

import contextlib
import logging
import threading
from typing import Any, Protocol

import pystray
from PIL import Image, ImageDraw
from PIL.Image import Image as PILImage

from zone_clean import __app_name__

logger = logging.getLogger(__name__)

_ICON_COLOR = "#1F6FB2"


class TrayCallbacks(Protocol):
    """Expected callback interface for the tray icon owner."""

    def on_manage_folders(self) -> None:
        """Open the folder manager."""
        ...

    def on_clean_now(self) -> None:
        """Sweep every watched folder."""
        ...

    def on_toggle_startup(self) -> None:
        """Toggle start at login."""
        ...

    def on_quit(self) -> None:
        """Quit the application."""
        ...

    def is_startup_enabled(self) -> bool:
        """Return whether start at login is on."""
        ...

    def get_processed_count(self) -> int:
        """Return how many markers have been removed this session."""
        ...


def _create_icon_image(color: str = _ICON_COLOR, size: int = 64) -> PILImage:
    """Draw a simple shield: a rounded plate with a white check mark."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.rounded_rectangle(
        [(4, 2), (size - 4, size - 2)],
        radius=size // 4,
        fill=color,
    )
    width = max(3, size // 10)
    draw.line(
        [
            (size * 0.28, size * 0.52),
            (size * 0.44, size * 0.68),
            (size * 0.74, size * 0.34),
        ],
        fill="white",
        width=width,
    )
    return img


class SysTray:
    """Manages the system-tray icon and its context menu.

    The tray runs on its own thread so it does not block the wx main loop.
    """

    def __init__(self, callbacks: TrayCallbacks):
        """Create the tray icon bound to *callbacks*."""
        self._callbacks = callbacks
        self._icon: Any | None = None
        self._thread: threading.Thread | None = None

    def _build_menu(self) -> pystray.Menu:
        """Build the context menu with the current count."""
        count = self._callbacks.get_processed_count()
        return pystray.Menu(
            pystray.MenuItem(__app_name__, None, enabled=False),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(f"Files processed: {count}", None, enabled=False),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                "Monitored folders…",
                lambda: self._callbacks.on_manage_folders(),
                default=True,
            ),
            pystray.MenuItem("Clean folders now", lambda: self._callbacks.on_clean_now()),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                "Start at login",
                lambda: self._callbacks.on_toggle_startup(),
                checked=lambda item: self._callbacks.is_startup_enabled(),
            ),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Quit", lambda: self._callbacks.on_quit()),
        )

    def start(self) -> None:
        """Start the tray icon on a daemon thread."""
        icon = pystray.Icon(
            name="ZoneCleaner",
            icon=_create_icon_image(),
            title=f"{__app_name__}\nMonitoring files…",
            menu=self._build_menu(),
        )
        self._icon = icon
        self._thread = threading.Thread(target=icon.run, daemon=True, name="SysTray")
        self._thread.start()
        logger.info("System tray icon started.")

    def stop(self) -> None:
        """Remove the tray icon and stop its thread."""
        if self._icon:
            with contextlib.suppress(Exception):
                self._icon.stop()
            self._icon = None
        logger.info("System tray icon stopped.")

    def notify(self, title: str, text: str) -> None:
        """Show a balloon notification if the tray backend supports it."""
        icon = self._icon
        if not icon or not getattr(icon, "HAS_NOTIFICATION", False):
            logger.debug("Notification (not shown): %s — %s", title, text)
            return
        try:
            icon.notify(text, title)
        except Exception:
            logger.debug("Could not show notification.", exc_info=True)

    def refresh_menu(self) -> None:
        """Rebuild the context menu (e.g. after a file was processed)."""
        if self._icon:
            self._icon.menu = self._build_menu()
            self._icon.update_menu()
