"""Watched documents and the ordered, deduplicated set that holds them."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from mdtail.errors import EmptySetError, IndexOutOfRangeError


@dataclass
class Document:
    """A watched text file.

    ``mtime`` is the last modification token seen by the watcher. Only the
    watcher writes it.
    """

    path: str
    mtime: float | None = None
    display_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.display_name = os.path.basename(self.path)


class DocumentSet:
    """Ordered collection of documents plus the selected tab index.

    Paths are unique and keep first-seen order. Once initialized the set is
    never empty and ``0 <= selected_index < len(self)`` always holds.
    """

    def __init__(self) -> None:
        self._documents: list[Document] = []
        self._selected = 0

    def initialize(self, paths: Iterable[str]) -> None:
        """Replace the contents with ``paths``, deduplicated by exact equality.

        Raises:
            EmptySetError: If no paths remain.
        """
        unique = list(dict.fromkeys(paths))
        if not unique:
            raise EmptySetError()
        self._documents = [Document(path) for path in unique]
        self._selected = 0

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __getitem__(self, index: int) -> Document:
        return self._documents[index]

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(self._documents)

    @property
    def paths(self) -> list[str]:
        return [doc.path for doc in self._documents]

    @property
    def selected_index(self) -> int:
        return self._selected

    def selected(self) -> Document:
        """Return the currently selected document."""
        if not self._documents:
            raise IndexOutOfRangeError(self._selected, 0)
        return self._documents[self._selected]

    def set_selected(self, index: int) -> None:
        """Select the document at ``index``.

        Raises:
            IndexOutOfRangeError: If ``index`` is not in ``[0, len(self))``.
        """
        if not 0 <= index < len(self._documents):
            raise IndexOutOfRangeError(index, len(self._documents))
        self._selected = index
