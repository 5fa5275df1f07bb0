"""Keyboard input for tab navigation.

Arrow keys and Ctrl+C are read in raw mode through prompt_toolkit's input
layer and turned into coordinator events. When stdin is not a terminal the
source does nothing.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TextIO

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.keys import Keys

from mdtail.events import Event, NavigateNext, NavigatePrev, Terminate
from mdtail.logging import get_logger

if TYPE_CHECKING:
    from prompt_toolkit.key_binding import KeyPress

log = get_logger("keyboard")

KEY_EVENTS: dict[str | Keys, Callable[[], Event]] = {
    Keys.Left: NavigatePrev,
    Keys.Right: NavigateNext,
    Keys.ControlC: Terminate,
}


class KeyboardInput:
    """Posts navigation and terminate events for key presses."""

    def __init__(self, post: Callable[[Event], None], stdin: TextIO | None = None) -> None:
        self._post = post
        self._stdin = stdin if stdin is not None else sys.stdin
        self._input: Input | None = None

    @property
    def interactive(self) -> bool:
        try:
            return self._stdin.isatty()
        except (AttributeError, ValueError):
            return False

    @staticmethod
    def translate(key_presses: Iterable[KeyPress]) -> list[Event]:
        """Map key presses to events, dropping keys with no meaning here."""
        events: list[Event] = []
        for press in key_presses:
            factory = KEY_EVENTS.get(press.key)
            if factory is not None:
                events.append(factory())
        return events

    @contextmanager
    def listening(self) -> Iterator[None]:
        """Hold raw mode and deliver key events while the block runs.

        Must be entered from within a running event loop. Cooked mode is
        restored on every exit path.
        """
        if not self.interactive:
            log.debug("stdin is not a terminal, keyboard navigation disabled")
            yield
            return

        self._input = create_input(self._stdin)
        try:
            with self._input.raw_mode(), self._input.attach(self._on_ready):
                yield
        finally:
            self._input.close()
            self._input = None

    def _on_ready(self) -> None:
        if self._input is None:
            return
        for event in self.translate(self._input.read_keys()):
            self._post(event)
