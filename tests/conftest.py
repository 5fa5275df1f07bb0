"""Root pytest configuration for all tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from mdtail.display import TerminalPainter
from mdtail.watching import ChangeWatcher


@pytest.fixture
def md_files(tmp_path: Path) -> list[Path]:
    """Three markdown files with distinct content."""
    files = []
    for name, body in (("a.md", "# Alpha"), ("b.md", "# Bravo"), ("c.md", "# Charlie")):
        path = tmp_path / name
        path.write_text(body, encoding="utf-8")
        files.append(path)
    return files


@pytest.fixture
def painter() -> Mock:
    """A painter that records calls instead of writing to the terminal."""
    return Mock(spec=TerminalPainter)


@pytest.fixture
def watcher() -> Mock:
    return Mock(spec=ChangeWatcher)
