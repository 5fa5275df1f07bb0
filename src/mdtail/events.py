"""Typed events consumed by the render coordinator.

Producers (the change watcher, keyboard input, signal handlers and the
startup settle timer) never touch viewer state directly; they post one of
these onto the coordinator's queue.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ChangeDetected:
    """The document at ``index`` changed on disk."""

    index: int


@dataclass(frozen=True)
class NavigatePrev:
    pass


@dataclass(frozen=True)
class NavigateNext:
    pass


@dataclass(frozen=True)
class Terminate:
    pass


@dataclass(frozen=True)
class SettleElapsed:
    """The post-startup settle delay ran out."""


Event = ChangeDetected | NavigatePrev | NavigateNext | Terminate | SettleElapsed


class RenderReason(Enum):
    STARTUP = "startup"
    NAVIGATION = "navigation"
    CHANGE = "change"
    SETTLE = "settle"


@dataclass(frozen=True)
class RenderRequest:
    """One render cycle: which document to show and why."""

    index: int
    reason: RenderReason
