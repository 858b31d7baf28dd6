"""Entry point for Zone Cleaner.

Usage:
    python -m zone_clean                     Launch the tray application
    python -m zone_clean --service start     Watch folders without the tray
    python -m zone_clean --service clean     Sweep folders once and exit
"""

import sys


def main() -> None:
    """Launch the tray app or delegate to the headless CLI."""
    if len(sys.argv) > 1 and sys.argv[1] in ("--service", "service"):
        from zone_clean.service import main as service_main

        service_main(sys.argv[2:])
    else:
        from zone_clean.app import App

        app = App()
        app.run()


if __name__ == "__main__":
    main()
