"""Command-line interface for mdtail."""

from __future__ import annotations

import argparse
import asyncio
import math
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from mdtail import __version__
from mdtail.errors import EmptySetError

console = Console(stderr=True, highlight=False)

DESCRIPTION = "mdtail - Terminal markdown viewer with live refresh"

EPILOG = """\
Navigation:
  ← / → Arrow Keys                   Switch between tabs
  Ctrl+C                             Exit

Examples:
  mdtail README.md                   Watch README.md
  mdtail todo.md notes.md            Watch multiple files with tabs
  mdtail '*.md'                      Watch all markdown files in tabs
"""


def positive_float(value: str) -> float:
    """argparse type for intervals: a finite number greater than zero."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if not math.isfinite(number) or number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mdtail",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Markdown files or glob patterns to watch (default: TODO.md)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=None,
        help="Increase log verbosity (can be repeated)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Extra config file layered over the system, user and project configs",
    )
    parser.add_argument(
        "--interval",
        type=positive_float,
        help="Seconds between checks of each file (default: 0.1)",
    )
    return parser


def _overrides(parsed: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if parsed.interval is not None:
        overrides["watch"] = {"poll_interval": parsed.interval}
    if parsed.verbose is not None:
        overrides["logging"] = {"verbose": parsed.verbose}
    return overrides


def run_cli(args: Sequence[str], cwd: str | None = None) -> int:
    """Run the CLI with the given arguments.

    Returns:
        Exit code: 0 after a normal exit, 1 when nothing can be watched.
    """
    parser = create_parser()
    parsed = parser.parse_args(args)
    cwd = cwd or os.getcwd()

    from mdtail.config import load_config
    from mdtail.logging import setup_logging

    config = load_config(
        project_root=cwd,
        config_path=parsed.config,
        overrides=_overrides(parsed),
    )
    setup_logging(config.logging)

    from mdtail.resolver import resolve_paths

    paths = resolve_paths(
        parsed.files,
        cwd,
        default_file=config.documents.default_file,
        extensions=config.documents.extensions,
        warn=lambda msg: console.print(f"[yellow]Warning:[/yellow] {escape(msg)}"),
    )

    from mdtail.app import run_viewer

    try:
        return asyncio.run(run_viewer(paths, config))
    except EmptySetError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        console.print(f"  {escape(e.suggestion)}", style="dim")
        console.print('Run "mdtail --help" for usage information')
        return 1
    except KeyboardInterrupt:
        return 0
