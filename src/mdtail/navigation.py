"""Tab navigation with wraparound."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdtail.documents import DocumentSet


class Direction(Enum):
    PREVIOUS = "previous"
    NEXT = "next"


def navigate(direction: Direction, documents: DocumentSet) -> bool:
    """Move the selection one tab in ``direction``.

    Returns:
        True if the selected index changed. Sets with fewer than two
        documents and unknown directions are left untouched.
    """
    length = len(documents)
    if length <= 1:
        return False

    current = documents.selected_index
    if direction is Direction.PREVIOUS:
        documents.set_selected((current - 1 + length) % length)
    elif direction is Direction.NEXT:
        documents.set_selected((current + 1) % length)
    else:
        return False
    return True
