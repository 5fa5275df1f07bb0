"""Error types raised by mdtail.

Startup errors (``EmptySetError``) end the process. Errors raised while
watching (``DocumentReadError``, ``WatchIOError``) are reported and the
watch loop carries on.
"""

from __future__ import annotations


class MdTailError(Exception):
    """Base class for mdtail errors, with an optional user-facing hint."""

    def __init__(self, message: str, suggestion: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\n  {self.suggestion}"
        return self.message


class EmptySetError(MdTailError):
    """No documents were left to watch after resolution and deduplication."""

    def __init__(self) -> None:
        super().__init__(
            "No markdown files found to watch",
            "Try:\n"
            "    mdtail README.md - to watch a specific file\n"
            "    mdtail *.md - to watch all markdown files\n"
            "    Create a TODO.md file in the current directory",
        )


class IndexOutOfRangeError(MdTailError, IndexError):
    """A selection index fell outside the document set."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Document index {index} out of range for {length} document(s)")
        self.index = index
        self.length = length


class DocumentReadError(MdTailError):
    """Reading a document's content failed."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(
            f"Unable to read file: {path}",
            f"Check file permissions. Error: {cause}",
        )
        self.path = path
        self.cause = cause


class WatchIOError(MdTailError):
    """A poll cycle could not stat a watched document."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Unable to check file: {path} ({cause})")
        self.path = path
        self.cause = cause
