"""Configuration schema dataclasses for mdtail.

Defines the structure of configuration at all levels (system, user, project).
Every field has a default so partial configs merge together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_POLL_INTERVAL = 0.1
MIN_POLL_INTERVAL = 0.01
DEFAULT_SETTLE_DELAY = 1.5
DEFAULT_FILE = "TODO.md"


@dataclass
class WatchConfig:
    """File watching configuration.

    Example config.yaml:
        watch:
          poll_interval: 0.25
          settle_delay: 1.5
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL  # Seconds between polls of one document
    settle_delay: float = DEFAULT_SETTLE_DELAY  # Seconds before the startup repaint


@dataclass
class DocumentsConfig:
    """Which files are picked up and how they are decoded."""

    default_file: str = DEFAULT_FILE  # Watched when no arguments are given
    extensions: list[str] = field(default_factory=lambda: [".md"])
    encoding: str = "utf-8"


@dataclass
class DisplayConfig:
    """Terminal display configuration."""

    width: int | None = None  # Default: terminal width


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # -v count, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    documents: DocumentsConfig = field(default_factory=DocumentsConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown top-level keys
