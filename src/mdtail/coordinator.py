"""The render coordinator: decides when the selected document is repainted.

All inputs arrive as events on a single queue and are handled one at a
time, so the selected index is only ever touched by this class (through
navigation). Rendering always re-reads the document from disk.

States::

    IDLE --start()--> RENDERING --> WATCHING
    WATCHING --change of selected doc / navigation / settle--> RENDERING --> WATCHING
    any --shutdown()--> TERMINATED
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING

from mdtail.config.schema import DEFAULT_SETTLE_DELAY
from mdtail.errors import DocumentReadError
from mdtail.events import (
    ChangeDetected,
    Event,
    NavigateNext,
    NavigatePrev,
    RenderReason,
    RenderRequest,
    SettleElapsed,
    Terminate,
)
from mdtail.logging import VERBOSE, get_logger
from mdtail.navigation import Direction, navigate

if TYPE_CHECKING:
    from mdtail.display import TerminalPainter
    from mdtail.documents import DocumentSet
    from mdtail.reader import ContentReader
    from mdtail.watching import ChangeWatcher

log = get_logger("coordinator")


class CoordinatorState(Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    WATCHING = "watching"
    TERMINATED = "terminated"


class RenderCoordinator:
    """Owns the watch/render state machine for one viewer session."""

    def __init__(
        self,
        documents: DocumentSet,
        watcher: ChangeWatcher,
        reader: ContentReader,
        painter: TerminalPainter,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ) -> None:
        self.documents = documents
        self.watcher = watcher
        self.reader = reader
        self.painter = painter
        self.settle_delay = settle_delay

        self._state = CoordinatorState.IDLE
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._settle_handle: asyncio.TimerHandle | None = None
        self.last_request: RenderRequest | None = None

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state not in (CoordinatorState.IDLE, CoordinatorState.TERMINATED)

    def post(self, event: Event) -> None:
        """Queue an event. Ignored once the coordinator has shut down."""
        if self._state is CoordinatorState.TERMINATED:
            log.log(VERBOSE, "Dropping %s after shutdown", event)
            return
        self._queue.put_nowait(event)

    def on_change(self, index: int) -> None:
        """Watcher callback."""
        self.post(ChangeDetected(index))

    async def start(self) -> None:
        """Begin watching and paint the selected document once.

        With more than one document a repaint is scheduled after the settle
        delay, to draw over anything printed while starting up.
        """
        if self._state is not CoordinatorState.IDLE:
            raise RuntimeError(f"Cannot start coordinator in state {self._state.value}")

        self.watcher.start_watching(self.documents, self.on_change)
        self._state = CoordinatorState.WATCHING
        await self._render(RenderReason.STARTUP)

        if len(self.documents) > 1 and self.running:
            self.painter.show_file_list(len(self.documents))
            loop = asyncio.get_running_loop()
            self._settle_handle = loop.call_later(self.settle_delay, self.post, SettleElapsed())

    async def run(self) -> None:
        """Consume events until a Terminate event or shutdown."""
        while self.running:
            event = await self._queue.get()
            if isinstance(event, Terminate):
                self.shutdown()
                break
            await self.handle(event)

    async def handle(self, event: Event) -> bool:
        """Apply one event.

        Returns:
            True if a render was attempted.
        """
        if not self.running:
            return False

        if isinstance(event, ChangeDetected):
            # A single document always redraws on its own change; with tabs
            # only the visible one does. Hidden tabs are re-read on navigation.
            if event.index == self.documents.selected_index or len(self.documents) == 1:
                return await self._render(RenderReason.CHANGE)
            log.debug("Change in background tab %d, not redrawing", event.index)
            return False

        if isinstance(event, NavigatePrev | NavigateNext):
            direction = Direction.PREVIOUS if isinstance(event, NavigatePrev) else Direction.NEXT
            if navigate(direction, self.documents):
                return await self._render(RenderReason.NAVIGATION)
            return False

        if isinstance(event, SettleElapsed):
            self._settle_handle = None
            return await self._render(RenderReason.SETTLE)

        if isinstance(event, Terminate):
            self.shutdown()
            return False

        log.warning("Ignoring unknown event %r", event)
        return False

    async def _render(self, reason: RenderReason) -> bool:
        request = RenderRequest(index=self.documents.selected_index, reason=reason)
        self.last_request = request
        document = self.documents[request.index]
        log.log(VERBOSE, "Rendering %s (%s)", document.display_name, reason.value)

        self._state = CoordinatorState.RENDERING
        try:
            content = await self.reader.read(document.path)
        except DocumentReadError as e:
            log.warning("%s", e.message)
            if self._state is CoordinatorState.RENDERING:
                self.painter.report_error(e)
            return True
        finally:
            if self._state is CoordinatorState.RENDERING:
                self._state = CoordinatorState.WATCHING

        # Shutdown may have happened while the read was in flight.
        if self._state is not CoordinatorState.WATCHING:
            return True

        self.painter.paint(
            content,
            document.display_name,
            self.documents.paths,
            self.documents.selected_index,
        )
        return True

    def shutdown(self) -> None:
        """Stop all watches and restore the terminal. Safe to call twice."""
        if self._state is CoordinatorState.TERMINATED:
            return
        was_running = self._state is not CoordinatorState.IDLE
        self._state = CoordinatorState.TERMINATED

        if self._settle_handle is not None:
            self._settle_handle.cancel()
            self._settle_handle = None

        self.watcher.stop_watching(self.documents)
        self.painter.show_cursor()
        if was_running:
            self.painter.farewell()
        log.debug("Coordinator shut down")
