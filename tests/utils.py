"""Shared test utilities for mdtail tests."""

from __future__ import annotations

import asyncio
import io
import os
from collections.abc import Callable
from pathlib import Path


class TerminalStream(io.StringIO):
    """A StringIO that claims to be a terminal."""

    def isatty(self) -> bool:
        return True


def bump_mtime(path: Path, seconds: int = 2) -> None:
    """Move a file's modification time forward.

    Avoids depending on the filesystem's timestamp granularity when a test
    writes the same file twice in quick succession.
    """
    st = os.stat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + seconds * 1_000_000_000))


def rewrite(path: Path, content: str) -> None:
    """Replace a file's content and make sure the change is visible to polling."""
    path.write_text(content, encoding="utf-8")
    bump_mtime(path)


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll ``predicate`` until it holds.

    Raises:
        asyncio.TimeoutError: If timeout is exceeded
    """

    async def _wait() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_wait(), timeout=timeout)
