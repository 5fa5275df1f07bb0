"""mdtail - Terminal markdown viewer with live refresh."""

from mdtail.coordinator import CoordinatorState, RenderCoordinator
from mdtail.documents import Document, DocumentSet
from mdtail.errors import (
    DocumentReadError,
    EmptySetError,
    IndexOutOfRangeError,
    MdTailError,
    WatchIOError,
)
from mdtail.navigation import Direction, navigate
from mdtail.watching import ChangeWatcher

__all__ = [
    "ChangeWatcher",
    "CoordinatorState",
    "Direction",
    "Document",
    "DocumentReadError",
    "DocumentSet",
    "EmptySetError",
    "IndexOutOfRangeError",
    "MdTailError",
    "RenderCoordinator",
    "WatchIOError",
    "navigate",
]

__version__ = "0.1.0"
