"""File watching for mdtail.

Provides polling-based change detection for the documents shown in the
viewer. Changes are reported by document index.
"""

from mdtail.watching.watcher import ChangeWatcher, WatchRegistration

__all__ = [
    "ChangeWatcher",
    "WatchRegistration",
]
