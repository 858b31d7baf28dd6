"""Zone Cleaner — removes the Zone.Identifier marker from downloaded files.

Watches a set of folders and strips the ``Zone.Identifier`` alternate
data stream Windows attaches to files from the internet or e-mail, so
they no longer trigger "unblock" prompts.  Folders can also be swept
on demand.
"""

from zone_clean.engine import ZoneCleaner

__version__ = "1.0.0"
__app_name__ = "Zone Cleaner"

__all__ = ["ZoneCleaner", "__app_name__", "__version__"]
