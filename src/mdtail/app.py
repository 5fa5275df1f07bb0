"""Wires the viewer together and owns process-wide terminal state.

Raw keyboard mode, signal handlers, the hidden cursor and held-back stderr
logging are acquired for the lifetime of ``run_viewer`` and released on
every exit path.
"""

from __future__ import annotations

import asyncio
import contextlib
import signal
from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING

from mdtail.coordinator import RenderCoordinator
from mdtail.display import TerminalPainter
from mdtail.documents import DocumentSet
from mdtail.events import Event, Terminate
from mdtail.keyboard import KeyboardInput
from mdtail.logging import get_logger, screen_session
from mdtail.reader import ContentReader
from mdtail.watching import ChangeWatcher

if TYPE_CHECKING:
    from mdtail.config import Config

log = get_logger("app")

_TERMINATING_SIGNALS = ("SIGINT", "SIGTERM")


@contextlib.contextmanager
def terminate_on_signals(post: Callable[[Event], None]) -> Iterator[None]:
    """Post Terminate on SIGINT/SIGTERM while the block runs.

    Skipped on loops that don't support signal handlers (Windows).
    """
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for name in _TERMINATING_SIGNALS:
        sig = getattr(signal, name, None)
        if sig is None:
            continue
        try:
            loop.add_signal_handler(sig, post, Terminate())
        except (NotImplementedError, RuntimeError):
            log.debug("Signal handler for %s not supported", name)
            continue
        installed.append(sig)
    try:
        yield
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


def build_coordinator(
    paths: Sequence[str],
    config: Config,
    painter: TerminalPainter | None = None,
) -> RenderCoordinator:
    """Create the document set and everything the coordinator drives.

    Raises:
        EmptySetError: If ``paths`` is empty.
    """
    documents = DocumentSet()
    documents.initialize(paths)
    return RenderCoordinator(
        documents,
        ChangeWatcher(poll_interval=config.watch.poll_interval),
        ContentReader(encoding=config.documents.encoding),
        painter or TerminalPainter(width=config.display.width),
        settle_delay=config.watch.settle_delay,
    )


async def run_viewer(
    paths: Sequence[str],
    config: Config,
    painter: TerminalPainter | None = None,
    keyboard_factory: Callable[[Callable[[Event], None]], KeyboardInput] = KeyboardInput,
) -> int:
    """Watch ``paths`` until terminated.

    Returns:
        Process exit code.

    Raises:
        EmptySetError: Before any terminal state is touched.
    """
    coordinator = build_coordinator(paths, config, painter)
    keyboard = keyboard_factory(coordinator.post)
    log.info("Watching %d document(s)", len(coordinator.documents))

    with screen_session():
        try:
            with terminate_on_signals(coordinator.post), keyboard.listening():
                await coordinator.start()
                await coordinator.run()
        finally:
            coordinator.shutdown()
    return 0
