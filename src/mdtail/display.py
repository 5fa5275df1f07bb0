"""Terminal painting with rich.

The painter is pure presentation: it is told what to show and never decides
when. Cursor and clear-screen control is best-effort; rich already skips it
when output is not a terminal.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

if TYPE_CHECKING:
    from mdtail.errors import DocumentReadError

HEAVY_RULE = "═"
LIGHT_RULE = "─"
TAB_SEPARATOR = " │ "
ACTIVE_TAB_STYLE = "bold reverse"


class TerminalPainter:
    """Writes tabs, document content and the navigation footer."""

    def __init__(
        self,
        console: Console | None = None,
        error_console: Console | None = None,
        width: int | None = None,
    ) -> None:
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self._width = width

    @property
    def width(self) -> int:
        return self._width or self.console.width

    def clear_screen(self) -> None:
        with contextlib.suppress(OSError):
            self.console.clear()

    def hide_cursor(self) -> None:
        with contextlib.suppress(OSError):
            self.console.show_cursor(False)

    def show_cursor(self) -> None:
        with contextlib.suppress(OSError):
            self.console.show_cursor(True)

    def render_tabs(self, paths: Sequence[str], selected: int) -> Text:
        """Build the tab line. Empty for fewer than two documents."""
        tabs = Text()
        if len(paths) <= 1:
            return tabs
        for index, path in enumerate(paths):
            if index:
                tabs.append(TAB_SEPARATOR)
            name = os.path.basename(path)
            if index == selected:
                tabs.append(f"[{name}]", style=ACTIVE_TAB_STYLE)
            else:
                tabs.append(f" {name} ")
        return tabs

    def render_navigation(self, selected: int, total: int) -> str:
        if total > 1:
            return f"Tab {selected + 1} of {total} │ ← → Navigate │ Ctrl+C Exit"
        return "Watching for changes... (Ctrl+C to exit)"

    def format_content(self, content: str, name: str) -> str:
        rule = HEAVY_RULE * self.width
        return "\n".join(["", rule, name.upper(), rule, "", content, "", rule])

    def paint(
        self,
        content: str,
        name: str,
        paths: Sequence[str],
        selected: int,
    ) -> None:
        """Repaint the whole screen for the selected document."""
        self.clear_screen()
        self.hide_cursor()

        rule = HEAVY_RULE * self.width
        out = self.console
        out.print()
        out.print(rule, markup=False)
        if len(paths) > 1:
            out.print(self.render_tabs(paths, selected), overflow="ellipsis", no_wrap=True)
            out.print(LIGHT_RULE * self.width, markup=False)
        else:
            out.print(name.upper(), markup=False)
            out.print(rule, markup=False)
        out.print()
        out.print(content, markup=False, emoji=False, highlight=False)
        out.print()
        out.print(rule, markup=False)
        out.print(self.render_navigation(selected, len(paths)), markup=False)

    def show_file_list(self, count: int) -> None:
        self.console.print(f"\nWatching {count} files. Use arrow keys to navigate.", markup=False)

    def report_error(self, error: DocumentReadError) -> None:
        """One line on stderr; the screen is left as it was."""
        self.error_console.print(
            f"Error reading {error.path}: {error.cause}", markup=False, style="red"
        )

    def farewell(self) -> None:
        self.console.print("\n\nStopping mdtail...", markup=False)
