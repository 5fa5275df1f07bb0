"""Turning command-line arguments into the list of documents to watch.

An argument naming an existing file is taken literally even if it contains
glob characters. Bad entries produce a warning and are skipped; resolution itself never
fails. An empty result is reported later when the document set is built.
"""

from __future__ import annotations

import glob
import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from mdtail.config.schema import DEFAULT_FILE
from mdtail.logging import get_logger

log = get_logger("resolver")

GLOB_CHARS = frozenset("*?[")


def is_glob(arg: str) -> bool:
    return any(ch in GLOB_CHARS for ch in arg)


def _has_extension(path: Path, extensions: Iterable[str]) -> bool:
    suffix = path.suffix.lower()
    return any(suffix == ext.lower() for ext in extensions)


def _expand(pattern: str, base: Path) -> list[Path]:
    """Expand a glob. Relative patterns are matched under ``base`` only, so
    metacharacters in the directory name itself are taken literally."""
    if os.path.isabs(pattern):
        return [Path(m) for m in glob.glob(pattern)]
    return [base / m for m in glob.glob(pattern, root_dir=base)]


def resolve_paths(
    args: Sequence[str],
    cwd: str | Path,
    default_file: str = DEFAULT_FILE,
    extensions: Sequence[str] = (".md",),
    warn: Callable[[str], None] | None = None,
) -> list[str]:
    """Resolve arguments to absolute, deduplicated document paths.

    Args:
        args: Raw positional arguments (paths or glob patterns).
        cwd: Directory that relative paths and patterns are resolved against.
        default_file: Watched when ``args`` is empty, if it exists.
        extensions: Allowed file suffixes.
        warn: Receives one human-readable message per skipped entry.
              Defaults to logging a warning.

    Returns:
        Absolute paths in first-seen order.
    """
    report = warn or log.warning
    base = Path(cwd).resolve()
    found: list[str] = []

    if not args:
        default_path = base / default_file
        if default_path.is_file():
            found.append(str(default_path))
        return found

    for arg in args:
        literal = (base / arg).resolve()
        if is_glob(arg) and not literal.is_file():
            matches = sorted(
                p for p in _expand(arg, base)
                if p.is_file() and _has_extension(p, extensions)
            )
            if not matches:
                report(f"{arg} matched no markdown files")
            found.extend(str(p.resolve()) for p in matches)
            continue

        if not _has_extension(literal, extensions):
            report(f"{arg} is not a markdown file")
        elif not literal.is_file():
            report(f"{arg} not found")
        else:
            found.append(str(literal))

    return list(dict.fromkeys(found))
