"""Inbox dispatcher: feeds inbox files to the processor strictly one at a time.

Slug uniqueness and archive renames are check-then-act operations on the
filesystem; they are only safe because a single worker drains a single
queue. Running two dispatchers against the same content store is not
supported.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from pathlib import Path

from inkwell.config.models import InboxConfig, InkwellConfig
from inkwell.drafter.context import ContextBuilder
from inkwell.drafter.drafter import NoteDrafter
from inkwell.inbox.filters import is_processable, pending_files
from inkwell.inbox.models import ProcessResult
from inkwell.inbox.processor import InboxProcessor
from inkwell.inbox.watcher import InboxWatcher, wait_until_settled
from inkwell.llm.base import LLMProvider
from inkwell.output.writer import NoteWriter

logger = logging.getLogger(__name__)


class InboxDispatcher:
    """Discovers inbox files and runs them through the processor sequentially.

    Two modes:
      - ``run_once()``: process what is in the inbox now, then return.
      - ``watch()``: process what is there, then keep processing new files
        as the watcher reports them, until cancelled or ``stop`` is set.
    """

    def __init__(
        self,
        processor: InboxProcessor,
        config: InboxConfig,
        inbox_dir: Path,
    ) -> None:
        self.processor = processor
        self.config = config
        self.inbox_dir = Path(inbox_dir)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[Path] | None = None
        # Most recent results from watch mode
        self.results: deque[ProcessResult] = deque(maxlen=100)

    def ensure_inbox(self) -> None:
        if not self.inbox_dir.exists():
            self.inbox_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created inbox directory: %s", self.inbox_dir)

    async def run_once(self) -> list[ProcessResult]:
        """Process every eligible file currently in the inbox, in order."""
        self.ensure_inbox()
        pending = pending_files(self.inbox_dir, self.config)
        if not pending:
            logger.info("No files to process in %s", self.inbox_dir)
            return []

        logger.info("Processing %d file(s) from %s...", len(pending), self.inbox_dir)
        results: list[ProcessResult] = []
        for path in pending:
            result = await self._run_one(path)
            if result is not None:
                results.append(result)
        logger.info("Done.")
        return results

    async def watch(self, stop: asyncio.Event | None = None) -> None:
        """Process existing files, then watch for new ones until stopped."""
        self.ensure_inbox()
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()

        existing = pending_files(self.inbox_dir, self.config)
        if existing:
            logger.info("Found %d existing file(s), processing...", len(existing))
        for path in existing:
            self._queue.put_nowait(path)

        worker = asyncio.create_task(self._worker(), name="inkwell-inbox-worker")
        watcher = InboxWatcher(self.inbox_dir, callback=self.enqueue)
        watcher.start()
        logger.info("Press Ctrl+C to stop.")
        try:
            await (stop or asyncio.Event()).wait()
        finally:
            watcher.stop()
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass
            self._queue = None
            self._loop = None

    def enqueue(self, path: str | Path) -> None:
        """Queue a path for processing. Safe to call from any thread."""
        if self._loop is None or self._queue is None:
            raise RuntimeError("Dispatcher is not watching")
        self._loop.call_soon_threadsafe(self._queue.put_nowait, Path(path))

    async def _worker(self) -> None:
        assert self._queue is not None
        while True:
            path = await self._queue.get()
            try:
                result = await self._handle(path)
                if result is not None:
                    self.results.append(result)
            except Exception:
                logger.exception("Unexpected queue error for %s", path.name)
            finally:
                self._queue.task_done()

    async def _handle(self, path: Path) -> ProcessResult | None:
        if not await wait_until_settled(
            path, self.config.settle_seconds, self.config.poll_interval
        ):
            logger.debug("%s disappeared before processing", path.name)
            return None
        if not is_processable(path, self.config):
            return None
        return await self.processor.process(path)

    async def _run_one(self, path: Path) -> ProcessResult | None:
        try:
            return await self.processor.process(path)
        except Exception:
            # One bad item never stops the chain
            logger.exception("Unexpected queue error for %s", path.name)
            return None


def build_dispatcher(config: InkwellConfig, llm: LLMProvider) -> InboxDispatcher:
    """Wire context, drafter, writer and processor from one config object."""
    drafter = NoteDrafter(llm, ContextBuilder(config.project))
    writer = NoteWriter(config.notes_dir)
    processor = InboxProcessor(drafter, writer, config.inbox)
    return InboxDispatcher(processor, config.inbox, config.inbox_dir)
