"""Tests for inbox filtering, watching and sequential dispatch."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from watchdog.events import DirCreatedEvent, FileCreatedEvent, FileMovedEvent

from inkwell.config.models import InboxConfig
from inkwell.inbox import (
    InboxDispatcher,
    Outcome,
    ProcessResult,
    build_dispatcher,
    is_binary_file,
    is_processable,
    pending_files,
    wait_until_settled,
)
from inkwell.inbox.watcher import _InboxEventHandler

FAST = InboxConfig(settle_seconds=0, poll_interval=0.01)


class _RecordingProcessor:
    """Stands in for InboxProcessor; records call order and overlap."""

    def __init__(self, expected: int, stop: asyncio.Event, fail_on: str | None = None):
        self.expected = expected
        self.stop = stop
        self.fail_on = fail_on
        self.seen: list[str] = []
        self.active = 0
        self.max_active = 0

    async def process(self, path):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0.01)
            self.seen.append(path.name)
            if path.name == self.fail_on:
                raise RuntimeError("unexpected")
            return ProcessResult(filename=path.name, outcome=Outcome.processed)
        finally:
            self.active -= 1
            if len(self.seen) == self.expected:
                self.stop.set()


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    def test_accepts_text_files(self, tmp_path):
        for name in ("a.txt", "b.md", "c.markdown", "D.TXT"):
            (tmp_path / name).write_text("hello")
            assert is_processable(tmp_path / name, FAST)

    def test_rejects_hidden_and_control_file(self, tmp_path):
        (tmp_path / ".draft.txt").write_text("x")
        (tmp_path / "README.md").write_text("x")
        assert not is_processable(tmp_path / ".draft.txt", FAST)
        assert not is_processable(tmp_path / "README.md", FAST)

    def test_rejects_unsupported_extension(self, tmp_path, caplog):
        (tmp_path / "photo.png").write_text("x")
        with caplog.at_level("WARNING", logger="inkwell.inbox.filters"):
            assert not is_processable(tmp_path / "photo.png", FAST)
        assert "unsupported extension" in caplog.text

    def test_rejects_nul_byte_content(self, tmp_path):
        path = tmp_path / "sneaky.txt"
        path.write_bytes(b"looks like text\x00but is not")
        assert is_binary_file(path)
        assert not is_processable(path, FAST)

    def test_nul_beyond_sniff_window_is_allowed(self, tmp_path):
        path = tmp_path / "long.txt"
        path.write_bytes(b"a" * 2048 + b"\x00")
        assert not is_binary_file(path, sniff_bytes=1024)

    def test_missing_file_counts_as_binary(self, tmp_path):
        assert is_binary_file(tmp_path / "gone.txt")

    def test_rejects_directories(self, tmp_path):
        (tmp_path / "folder.txt").mkdir()
        assert not is_processable(tmp_path / "folder.txt", FAST)

    def test_pending_files_sorted_and_filtered(self, tmp_path):
        for name in ("b.txt", "a.md", "README.md", ".hidden.txt", "img.png"):
            (tmp_path / name).write_text("x")
        (tmp_path / ".processed").mkdir()
        assert [p.name for p in pending_files(tmp_path, FAST)] == ["a.md", "b.txt"]

    def test_pending_files_missing_dir(self, tmp_path):
        assert pending_files(tmp_path / "nope", FAST) == []


# ---------------------------------------------------------------------------
# Watcher
# ---------------------------------------------------------------------------


class TestInboxEventHandler:
    def _handler(self, tmp_path, debounce=10.0):
        calls: list[str] = []
        return _InboxEventHandler(tmp_path, calls.append, debounce), calls

    def test_forwards_created_file(self, tmp_path):
        handler, calls = self._handler(tmp_path)
        handler.on_created(FileCreatedEvent(str(tmp_path / "new.txt")))
        assert calls == [str(tmp_path / "new.txt")]

    def test_forwards_move_destination(self, tmp_path):
        handler, calls = self._handler(tmp_path)
        handler.on_moved(
            FileMovedEvent(str(tmp_path / ".failed" / "x.txt"), str(tmp_path / "x.txt"))
        )
        assert calls == [str(tmp_path / "x.txt")]

    def test_ignores_directories_nested_and_hidden(self, tmp_path):
        handler, calls = self._handler(tmp_path)
        handler.on_created(DirCreatedEvent(str(tmp_path / "sub")))
        handler.on_created(FileCreatedEvent(str(tmp_path / ".processed" / "a.txt")))
        handler.on_created(FileCreatedEvent(str(tmp_path / ".swp")))
        handler.on_created(FileCreatedEvent(str(tmp_path / "README.md")))
        assert calls == []

    def test_debounces_repeated_events(self, tmp_path):
        handler, calls = self._handler(tmp_path)
        event = FileCreatedEvent(str(tmp_path / "a.txt"))
        handler.on_created(event)
        handler.on_created(event)
        assert len(calls) == 1

    def test_callback_errors_are_logged(self, tmp_path, caplog):
        handler = _InboxEventHandler(tmp_path, MagicMock(side_effect=RuntimeError("x")), 0)
        with caplog.at_level("ERROR", logger="inkwell.inbox.watcher"):
            handler.on_created(FileCreatedEvent(str(tmp_path / "a.txt")))
        assert "Watcher callback failed" in caplog.text


class TestWaitUntilSettled:
    @pytest.mark.asyncio
    async def test_settled_file(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("done")
        assert await wait_until_settled(path, 0, poll_interval=0.01)

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        assert not await wait_until_settled(tmp_path / "gone.txt", 0, poll_interval=0.01)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class TestRunOnce:
    @pytest.mark.asyncio
    async def test_end_to_end(self, inkwell_config, mock_llm_provider, inbox_dir, notes_dir):
        (inbox_dir / "sync.txt").write_text("we met")
        (inbox_dir / "README.md").write_text("drop files here")
        (inbox_dir / "photo.png").write_bytes(b"\x89PNG\x00")

        dispatcher = build_dispatcher(inkwell_config, mock_llm_provider)
        results = await dispatcher.run_once()

        assert [r.filename for r in results] == ["sync.txt"]
        assert results[0].outcome == Outcome.processed
        assert (notes_dir / "weekly-sync.md").exists()
        assert (inbox_dir / "README.md").exists()
        assert (inbox_dir / "photo.png").exists()
        assert mock_llm_provider.invoke.await_count == 1

    @pytest.mark.asyncio
    async def test_empty_inbox(self, inkwell_config, mock_llm_provider):
        dispatcher = build_dispatcher(inkwell_config, mock_llm_provider)
        assert await dispatcher.run_once() == []
        mock_llm_provider.invoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_missing_inbox(self, tmp_path):
        inbox = tmp_path / "new" / "inbox"
        dispatcher = InboxDispatcher(MagicMock(), FAST, inbox)
        await dispatcher.run_once()
        assert inbox.is_dir()

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_stop_the_chain(self, tmp_path):
        for name in ("a.txt", "b.txt"):
            (tmp_path / name).write_text("x")
        processor = MagicMock()
        processor.process = AsyncMock(
            side_effect=[RuntimeError("boom"), ProcessResult(filename="b.txt", outcome=Outcome.processed)]
        )
        dispatcher = InboxDispatcher(processor, FAST, tmp_path)
        results = await dispatcher.run_once()
        assert [r.filename for r in results] == ["b.txt"]


class TestWatch:
    def test_enqueue_requires_watch(self, tmp_path):
        dispatcher = InboxDispatcher(MagicMock(), FAST, tmp_path)
        with pytest.raises(RuntimeError, match="not watching"):
            dispatcher.enqueue(tmp_path / "a.txt")

    @pytest.mark.asyncio
    @patch("inkwell.inbox.dispatcher.InboxWatcher")
    async def test_processes_existing_then_new_files_serially(self, mock_watcher_cls, tmp_path):
        for name in ("a.txt", "b.txt", "c.txt"):
            (tmp_path / name).write_text(f"content of {name}")
        stop = asyncio.Event()
        processor = _RecordingProcessor(expected=3, stop=stop)
        dispatcher = InboxDispatcher(processor, FAST, tmp_path)

        # Only a and b exist "at startup"; c arrives through the watcher.
        with patch(
            "inkwell.inbox.dispatcher.pending_files",
            return_value=[tmp_path / "a.txt", tmp_path / "b.txt"],
        ):
            mock_watcher_cls.return_value.start.side_effect = lambda: dispatcher.enqueue(
                tmp_path / "c.txt"
            )
            await asyncio.wait_for(dispatcher.watch(stop), timeout=5)

        assert processor.seen == ["a.txt", "b.txt", "c.txt"]
        assert processor.max_active == 1
        assert len(dispatcher.results) == 3
        mock_watcher_cls.return_value.stop.assert_called_once()
        with pytest.raises(RuntimeError):
            dispatcher.enqueue(tmp_path / "late.txt")

    @pytest.mark.asyncio
    @patch("inkwell.inbox.dispatcher.InboxWatcher")
    async def test_worker_survives_unexpected_error(self, mock_watcher_cls, tmp_path):
        for name in ("a.txt", "b.txt"):
            (tmp_path / name).write_text("x")
        stop = asyncio.Event()
        processor = _RecordingProcessor(expected=2, stop=stop, fail_on="a.txt")
        dispatcher = InboxDispatcher(processor, FAST, tmp_path)

        await asyncio.wait_for(dispatcher.watch(stop), timeout=5)

        assert processor.seen == ["a.txt", "b.txt"]
        assert [r.filename for r in dispatcher.results] == ["b.txt"]

    @pytest.mark.asyncio
    @patch("inkwell.inbox.dispatcher.InboxWatcher")
    async def test_vanished_and_ineligible_files_are_skipped(self, mock_watcher_cls, tmp_path):
        (tmp_path / "ok.txt").write_text("x")
        (tmp_path / "bin.txt").write_bytes(b"\x00\x01")
        stop = asyncio.Event()
        processor = _RecordingProcessor(expected=1, stop=stop)
        dispatcher = InboxDispatcher(processor, FAST, tmp_path)

        def _start():
            dispatcher.enqueue(tmp_path / "gone.txt")
            dispatcher.enqueue(tmp_path / "bin.txt")
            dispatcher.enqueue(tmp_path / "ok.txt")

        with patch("inkwell.inbox.dispatcher.pending_files", return_value=[]):
            mock_watcher_cls.return_value.start.side_effect = _start
            await asyncio.wait_for(dispatcher.watch(stop), timeout=5)

        assert processor.seen == ["ok.txt"]
