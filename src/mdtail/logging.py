"""Logging for mdtail.

The viewer repaints the whole terminal, so a log line written to stderr
while it runs is either wiped by the next paint or tears the screen. Records
for a terminal stderr are therefore held back for the length of a screen
session and written out once the terminal is handed back. A log file, set in
config or through MDTAIL_LOG, receives records as they happen.

Verbosity follows the number of ``-v`` flags::

    (none)  warning
    -v      info      documents watched, files becoming readable again
    -vv     verbose   every render and why it happened
    -vvv    debug     poll tasks, background changes, key handling
"""

from __future__ import annotations

import logging
import os
import sys
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from mdtail.config.schema import LoggingConfig

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_ENV_VAR = "MDTAIL_LOG"
HELD_RECORD_LIMIT = 200

logger = logging.getLogger("mdtail")

_initialized = False

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, VERBOSE, logging.DEBUG)


def level_for(config: LoggingConfig | None) -> int:
    """Log level for ``config``. A ``-v`` count wins over a level name."""
    if config is None:
        return logging.WARNING
    if config.verbose is not None:
        count = max(config.verbose, 0)
        return _VERBOSITY_LEVELS[min(count, len(_VERBOSITY_LEVELS) - 1)]
    if config.level:
        return _LEVEL_NAMES.get(config.level.upper(), logging.WARNING)
    return logging.WARNING


class ScreenAwareHandler(logging.StreamHandler):
    """Stderr handler that stays quiet while the viewer owns the screen.

    Between ``hold()`` and ``release()`` records are queued instead of
    written, keeping the newest ``limit`` of them. Holding only happens when
    the stream is a terminal; redirected stderr is written straight through.
    """

    def __init__(self, stream: TextIO | None = None, limit: int = HELD_RECORD_LIMIT) -> None:
        super().__init__(stream if stream is not None else sys.stderr)
        self._held: deque[logging.LogRecord] = deque(maxlen=limit)
        self._holding = False
        self.dropped = 0

    @property
    def holding(self) -> bool:
        return self._holding

    def _is_terminal(self) -> bool:
        try:
            return self.stream.isatty()
        except (AttributeError, ValueError):
            return False

    def hold(self) -> None:
        self._holding = self._is_terminal()

    def emit(self, record: logging.LogRecord) -> None:
        if not self._holding:
            super().emit(record)
            return
        if len(self._held) == self._held.maxlen:
            self.dropped += 1
        self._held.append(record)

    def release(self) -> None:
        """Stop holding and write out everything held so far."""
        self._holding = False
        held = list(self._held)
        self._held.clear()
        if self.dropped:
            self.stream.write(f"[mdtail] {self.dropped} earlier log message(s) dropped\n")
            self.dropped = 0
        for record in held:
            super().emit(record)
        self.flush()


def _formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S"
    )


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Attach handlers to the ``mdtail`` logger. Only the first call counts.

    With a log file, records go to the file only. Without one, or when the
    file cannot be opened, they go to a ``ScreenAwareHandler`` on stderr.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = level_for(config)
    logger.setLevel(level)

    log_path = config.file if config and config.file else os.environ.get(LOG_ENV_VAR)
    if log_path:
        try:
            handler: logging.Handler = logging.FileHandler(
                os.path.expanduser(log_path), mode="a", encoding="utf-8"
            )
        except OSError as e:
            print(f"[mdtail] Failed to open log file: {e}", file=sys.stderr)
            handler = ScreenAwareHandler()
    else:
        handler = ScreenAwareHandler()

    handler.setLevel(level)
    handler.setFormatter(_formatter())
    logger.addHandler(handler)


@contextmanager
def screen_session() -> Iterator[None]:
    """Hold stderr log output while the block owns the terminal."""
    handlers = [h for h in logger.handlers if isinstance(h, ScreenAwareHandler)]
    for handler in handlers:
        handler.hold()
    try:
        yield
    finally:
        for handler in handlers:
            handler.release()


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the ``mdtail`` logger, or a child such as ``mdtail.watching``."""
    if name:
        return logger.getChild(name)
    return logger
