"""Tests for viewer wiring and scoped terminal resources."""

from __future__ import annotations

import asyncio
import signal
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from unittest.mock import Mock

import pytest

from mdtail.app import build_coordinator, run_viewer, terminate_on_signals
from mdtail.config import Config
from mdtail.errors import EmptySetError
from mdtail.events import Event, Terminate
from mdtail.logging import ScreenAwareHandler, get_logger
from tests.utils import TerminalStream


class ScriptedKeyboard:
    """Stands in for KeyboardInput: posts a Terminate shortly after starting."""

    instances: list[ScriptedKeyboard] = []

    def __init__(self, post: Callable[[Event], None], delay: float = 0.05) -> None:
        self.post = post
        self.delay = delay
        self.entered = False
        self.exited = False
        ScriptedKeyboard.instances.append(self)

    @contextmanager
    def listening(self) -> Iterator[None]:
        self.entered = True
        asyncio.get_running_loop().call_later(self.delay, self.post, Terminate())
        try:
            yield
        finally:
            self.exited = True


def test_build_coordinator_uses_config(md_files, painter) -> None:
    config = Config()
    config.watch.poll_interval = 0.3
    config.watch.settle_delay = 4.0

    coordinator = build_coordinator([str(p) for p in md_files], config, painter)

    assert len(coordinator.documents) == 3
    assert coordinator.watcher.poll_interval == 0.3
    assert coordinator.settle_delay == 4.0
    assert coordinator.painter is painter


def test_build_coordinator_rejects_empty(painter) -> None:
    with pytest.raises(EmptySetError):
        build_coordinator([], Config(), painter)


class TestRunViewer:
    @pytest.mark.asyncio
    async def test_runs_until_terminated(self, md_files, painter) -> None:
        ScriptedKeyboard.instances.clear()

        code = await asyncio.wait_for(
            run_viewer([str(md_files[0])], Config(), painter, ScriptedKeyboard), timeout=2.0
        )

        assert code == 0
        keyboard = ScriptedKeyboard.instances[0]
        assert keyboard.entered and keyboard.exited
        painter.paint.assert_called_once_with("# Alpha", "a.md", [str(md_files[0])], 0)
        painter.show_cursor.assert_called_once()
        painter.farewell.assert_called_once()

    @pytest.mark.asyncio
    async def test_empty_set_touches_nothing(self, painter) -> None:
        with pytest.raises(EmptySetError):
            await run_viewer([], Config(), painter, ScriptedKeyboard)
        assert painter.method_calls == []

    @pytest.mark.asyncio
    async def test_cleanup_on_error(self, md_files, painter) -> None:
        ScriptedKeyboard.instances.clear()
        painter.paint.side_effect = RuntimeError("terminal went away")

        with pytest.raises(RuntimeError):
            await run_viewer([str(md_files[0])], Config(), painter, ScriptedKeyboard)

        assert ScriptedKeyboard.instances[0].exited
        painter.show_cursor.assert_called_once()
        painter.farewell.assert_called_once()

    @pytest.mark.asyncio
    async def test_stderr_logging_held_while_screen_is_owned(self, md_files, painter) -> None:
        stream = TerminalStream()
        handler = ScreenAwareHandler(stream)
        logger = get_logger()
        logger.addHandler(handler)
        seen_during_paint: list[str] = []

        def paint(*args) -> None:
            get_logger("coordinator").warning("logged mid-paint")
            seen_during_paint.append(stream.getvalue())

        painter.paint.side_effect = paint
        try:
            await asyncio.wait_for(
                run_viewer([str(md_files[0])], Config(), painter, ScriptedKeyboard), timeout=2.0
            )
        finally:
            logger.removeHandler(handler)

        assert seen_during_paint == [""]
        assert "logged mid-paint" in stream.getvalue()
        assert not handler.holding


@pytest.mark.skipif(sys.platform == "win32", reason="loop signal handlers are Unix-only")
class TestSignals:
    @pytest.mark.asyncio
    async def test_sigterm_posts_terminate(self) -> None:
        post = Mock()
        with terminate_on_signals(post):
            signal.raise_signal(signal.SIGTERM)
            await asyncio.sleep(0.01)

        post.assert_called_once_with(Terminate())

    @pytest.mark.asyncio
    async def test_handlers_removed_afterwards(self) -> None:
        loop = asyncio.get_running_loop()
        with terminate_on_signals(Mock()):
            pass
        assert loop.remove_signal_handler(signal.SIGTERM) is False
