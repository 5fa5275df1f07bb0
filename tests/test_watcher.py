"""Tests for polling-based change detection."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from unittest.mock import Mock

import pytest
import pytest_asyncio

from mdtail.config.schema import MIN_POLL_INTERVAL
from mdtail.documents import Document
from mdtail.errors import WatchIOError
from mdtail.watching import ChangeWatcher
from mdtail.watching.watcher import WatchRegistration
from tests.utils import bump_mtime, rewrite, wait_until


@pytest_asyncio.fixture
async def fast_watcher():
    watcher = ChangeWatcher(poll_interval=0.01)
    watched: list[Document] = []
    yield watcher, watched
    watcher.stop_watching(watched)


class TestPoll:
    """Single poll cycles, without the background tasks."""

    def test_unchanged_file_reports_nothing(self, tmp_path: Path) -> None:
        path = tmp_path / "a.md"
        path.write_text("x")
        doc = Document(str(path), mtime=os.stat(path).st_mtime)

        assert ChangeWatcher().poll(doc) is False

    def test_change_fires_once(self, tmp_path: Path) -> None:
        path = tmp_path / "a.md"
        path.write_text("x")
        doc = Document(str(path), mtime=os.stat(path).st_mtime)
        watcher = ChangeWatcher()

        bump_mtime(path)
        assert watcher.poll(doc) is True
        assert doc.mtime == os.stat(path).st_mtime
        assert watcher.poll(doc) is False

    def test_identical_token_is_not_a_change(self, tmp_path: Path) -> None:
        """A rewrite that leaves the mtime unchanged goes unnoticed."""
        path = tmp_path / "a.md"
        path.write_text("before")
        st = os.stat(path)
        doc = Document(str(path), mtime=st.st_mtime)

        path.write_text("after")
        os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns))
        assert ChangeWatcher().poll(doc) is False

    def test_missing_file_reports_error_not_change(self, tmp_path: Path) -> None:
        errors: list[WatchIOError] = []
        doc = Document(str(tmp_path / "gone.md"), mtime=1.0)
        watcher = ChangeWatcher(on_error=errors.append)

        assert watcher.poll(doc) is False
        assert len(errors) == 1
        assert errors[0].path == doc.path
        assert doc.mtime == 1.0


class TestStartStop:
    @pytest.mark.asyncio
    async def test_start_captures_token(self, tmp_path: Path, fast_watcher) -> None:
        watcher, watched = fast_watcher
        path = tmp_path / "a.md"
        path.write_text("x")
        doc = Document(str(path))
        watched.append(doc)

        watcher.start_watching(watched, lambda index: None)

        assert doc.mtime == os.stat(path).st_mtime
        assert watcher.is_watching(doc)
        assert watcher.watched_count == 1

    @pytest.mark.asyncio
    async def test_start_is_idempotent_per_document(self, md_files, fast_watcher) -> None:
        watcher, watched = fast_watcher
        watched.extend(Document(str(p)) for p in md_files)

        watcher.start_watching(watched, lambda index: None)
        watcher.start_watching(watched, lambda index: None)

        assert watcher.watched_count == 3

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self, md_files) -> None:
        watcher = ChangeWatcher(poll_interval=0.01)
        docs = [Document(str(p)) for p in md_files]
        watcher.start_watching(docs[:2], lambda index: None)

        watcher.stop_watching(docs)
        watcher.stop_watching(docs)

        assert watcher.watched_count == 0
        assert not any(watcher.is_watching(d) for d in docs)

    @pytest.mark.asyncio
    async def test_stop_cancels_poll_task(self, tmp_path: Path) -> None:
        path = tmp_path / "a.md"
        path.write_text("x")
        doc = Document(str(path))
        changes: list[int] = []
        watcher = ChangeWatcher(poll_interval=0.01)

        watcher.start_watching([doc], changes.append)
        watcher.stop_watching([doc])
        bump_mtime(path)
        await asyncio.sleep(0.05)

        assert changes == []


class TestPolling:
    """Background polling end to end."""

    @pytest.mark.asyncio
    async def test_detects_modification(self, md_files, fast_watcher) -> None:
        watcher, watched = fast_watcher
        watched.extend(Document(str(p)) for p in md_files)
        changes: list[int] = []

        watcher.start_watching(watched, changes.append)
        await asyncio.sleep(0.05)
        assert changes == []

        rewrite(md_files[1], "# Bravo 2")
        await wait_until(lambda: bool(changes))
        await asyncio.sleep(0.05)

        assert changes == [1]

    @pytest.mark.asyncio
    async def test_each_modification_reported(self, md_files, fast_watcher) -> None:
        watcher, watched = fast_watcher
        watched.append(Document(str(md_files[0])))
        changes: list[int] = []
        watcher.start_watching(watched, changes.append)

        bump_mtime(md_files[0])
        await wait_until(lambda: len(changes) == 1)
        bump_mtime(md_files[0])
        await wait_until(lambda: len(changes) == 2)

        assert changes == [0, 0]

    @pytest.mark.asyncio
    async def test_deleted_document_does_not_stop_others(self, md_files, fast_watcher) -> None:
        watcher, watched = fast_watcher
        watched.extend(Document(str(p)) for p in md_files[:2])
        changes: list[int] = []
        watcher.start_watching(watched, changes.append)

        md_files[0].unlink()
        await asyncio.sleep(0.03)
        bump_mtime(md_files[1])
        await wait_until(lambda: bool(changes))

        assert changes == [1]

    @pytest.mark.asyncio
    async def test_failure_streak_reported_once(self, tmp_path: Path) -> None:
        path = tmp_path / "a.md"
        path.write_text("x")
        doc = Document(str(path))
        errors: list[WatchIOError] = []
        watcher = ChangeWatcher(poll_interval=60, on_error=errors.append)
        watcher.start_watching([doc], lambda index: None)
        try:
            path.unlink()
            watcher.poll(doc)
            watcher.poll(doc)
            assert len(errors) == 1

            path.write_text("back")
            bump_mtime(path)
            assert watcher.poll(doc) is True

            path.unlink()
            watcher.poll(doc)
            assert len(errors) == 2
        finally:
            watcher.stop_watching([doc])

    @pytest.mark.asyncio
    async def test_callback_error_keeps_polling(self, md_files, fast_watcher) -> None:
        watcher, watched = fast_watcher
        watched.append(Document(str(md_files[0])))
        calls: list[int] = []

        def on_change(index: int) -> None:
            calls.append(index)
            if len(calls) == 1:
                raise RuntimeError("boom")

        watcher.start_watching(watched, on_change)
        bump_mtime(md_files[0])
        await wait_until(lambda: len(calls) == 1)
        bump_mtime(md_files[0])
        await wait_until(lambda: len(calls) == 2)


class TestPollInterval:
    @pytest.mark.parametrize("value", [0, -1, 0.0001])
    def test_too_small_is_clamped(self, value: float) -> None:
        assert ChangeWatcher(poll_interval=value).poll_interval == MIN_POLL_INTERVAL

    def test_setter_clamps(self) -> None:
        watcher = ChangeWatcher(poll_interval=0.5)
        assert watcher.poll_interval == 0.5
        watcher.poll_interval = -3
        assert watcher.poll_interval == MIN_POLL_INTERVAL

    @pytest.mark.asyncio
    async def test_zero_interval_does_not_spin(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "a.md"
        path.write_text("x")
        doc = Document(str(path))
        watcher = ChangeWatcher(poll_interval=0)
        polls: list[float] = []
        real_poll = watcher.poll

        def counting_poll(document: Document) -> bool:
            polls.append(asyncio.get_running_loop().time())
            return real_poll(document)

        monkeypatch.setattr(watcher, "poll", counting_poll)
        watcher.start_watching([doc], lambda index: None)
        try:
            await asyncio.sleep(0.1)
        finally:
            watcher.stop_watching([doc])

        assert 0 < len(polls) <= 0.1 / MIN_POLL_INTERVAL + 1


class TestFailureLogging:
    def test_streak_logged_as_warning_then_recovery(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "a.md"
        doc = Document(str(path), mtime=1.0)
        watcher = ChangeWatcher()
        watcher._registrations[doc.path] = WatchRegistration(0, doc, Mock())
        caplog.set_level(logging.INFO, logger="mdtail.watching")

        watcher.poll(doc)
        watcher.poll(doc)
        path.write_text("x")
        assert watcher.poll(doc) is True

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert doc.path in warnings[0].getMessage()
        assert any("readable again" in r.getMessage() for r in caplog.records)
