"""Per-document change detection using polling.

Polling is preferred over native file watchers for cross-platform
reliability. Each watched document gets its own asyncio task that stats the
file every ``poll_interval`` seconds and reports the document's index when
its modification time moves.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from mdtail.config.schema import DEFAULT_POLL_INTERVAL, MIN_POLL_INTERVAL
from mdtail.documents import Document
from mdtail.errors import WatchIOError
from mdtail.logging import get_logger

log = get_logger("watching")


@dataclass
class WatchRegistration:
    """An active poll task for one document."""

    index: int
    document: Document
    task: asyncio.Task[None]
    failing: bool = False  # Last poll could not stat the file


class ChangeWatcher:
    """Watches documents for on-disk modification.

    Example:
        watcher = ChangeWatcher(poll_interval=0.1)
        watcher.start_watching(documents, lambda index: print(index))
        ...
        watcher.stop_watching(documents)
    """

    def __init__(
        self,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        on_error: Callable[[WatchIOError], None] | None = None,
    ) -> None:
        """Initialize the watcher.

        Args:
            poll_interval: Seconds between polls of one document (default 0.1).
                           Values below MIN_POLL_INTERVAL are raised to it.
            on_error: Called when a poll cannot stat a document. Defaults to
                      logging the first failure of each failure streak
                      as a warning.
        """
        self.poll_interval = poll_interval
        self._on_error = on_error
        self._registrations: dict[str, WatchRegistration] = {}

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @poll_interval.setter
    def poll_interval(self, value: float) -> None:
        self._poll_interval = max(MIN_POLL_INTERVAL, value)

    @property
    def watched_count(self) -> int:
        return len(self._registrations)

    def is_watching(self, document: Document) -> bool:
        return document.path in self._registrations

    def start_watching(
        self,
        documents: Iterable[Document],
        on_change: Callable[[int], None],
    ) -> None:
        """Begin polling every document.

        The modification token is captured now; later polls compare against
        it. Must be called from within a running event loop. Documents that
        are already watched are left alone.
        """
        for index, document in enumerate(documents):
            if document.path in self._registrations:
                continue
            try:
                document.mtime = self._stat(document)
            except WatchIOError as e:
                document.mtime = None
                self._report(e)
            task = asyncio.create_task(
                self._poll_loop(index, document, on_change),
                name=f"watch:{document.display_name}",
            )
            self._registrations[document.path] = WatchRegistration(index, document, task)
            log.debug("Watching %s (index %d)", document.path, index)

    def stop_watching(self, documents: Iterable[Document]) -> None:
        """Cancel polling for ``documents``. Unwatched documents are ignored."""
        for document in documents:
            registration = self._registrations.pop(document.path, None)
            if registration is None:
                continue
            registration.task.cancel()
            log.debug("Stopped watching %s", document.path)

    def poll(self, document: Document) -> bool:
        """Run one poll cycle for ``document``.

        Returns:
            True if the modification token changed. The stored token is
            updated so the same state is never reported twice.
        """
        registration = self._registrations.get(document.path)
        try:
            current = self._stat(document)
        except WatchIOError as e:
            if registration is None or not registration.failing:
                self._report(e)
            if registration is not None:
                registration.failing = True
            return False

        if registration is not None and registration.failing:
            registration.failing = False
            log.info("%s is readable again", document.path)
        if current == document.mtime:
            return False
        document.mtime = current
        return True

    async def _poll_loop(
        self,
        index: int,
        document: Document,
        on_change: Callable[[int], None],
    ) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            if document.path not in self._registrations:
                break
            if not self.poll(document):
                continue
            log.debug("Change detected in %s", document.path)
            try:
                on_change(index)
            except Exception as e:
                log.error("Error in file change callback: %s", e)

    @staticmethod
    def _stat(document: Document) -> float:
        try:
            return os.stat(document.path).st_mtime
        except OSError as e:
            raise WatchIOError(document.path, e) from e

    def _report(self, error: WatchIOError) -> None:
        if self._on_error is not None:
            self._on_error(error)
        else:
            log.warning("%s", error)
