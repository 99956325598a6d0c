"""Inbox watcher: reports files created in (or moved into) the inbox."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from inkwell.inbox.filters import is_ignored_name

logger = logging.getLogger(__name__)

_MAX_TRACKED = 1000


class _InboxEventHandler(FileSystemEventHandler):
    """Forwards new top-level inbox files to the callback, once per debounce window."""

    def __init__(
        self,
        inbox_dir: Path,
        callback: Callable[[str], None],
        debounce_seconds: float,
    ) -> None:
        super().__init__()
        self._inbox_dir = inbox_dir
        self._callback = callback
        self._debounce = debounce_seconds
        self._lock = threading.Lock()
        self._last_event: dict[str, float] = {}

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Renames into the inbox (editors, manual retries out of .failed/)
        if not event.is_directory:
            self._forward(event.dest_path)

    def _forward(self, raw_path: str | bytes) -> None:
        path = Path(raw_path.decode() if isinstance(raw_path, bytes) else raw_path)
        if path.parent != self._inbox_dir or is_ignored_name(path.name):
            return

        key = str(path)
        now = time.monotonic()
        with self._lock:
            last = self._last_event.get(key)
            if last is not None and now - last < self._debounce:
                return
            self._last_event[key] = now
            if len(self._last_event) > _MAX_TRACKED:
                self._last_event = {
                    k: t for k, t in self._last_event.items() if now - t < self._debounce
                }

        try:
            self._callback(key)
        except Exception:
            logger.exception("Watcher callback failed for %s", path.name)


class InboxWatcher:
    """Watches the inbox directory (not recursively) for new files.

    Uses watchdog; events arrive on the observer thread, so the callback must
    be thread-safe. Hidden entries (including .processed/ and .failed/) and
    the control file are ignored.
    """

    def __init__(
        self,
        inbox_dir: Path,
        callback: Callable[[str], None],
        debounce_seconds: float = 1.0,
    ) -> None:
        self._inbox_dir = Path(inbox_dir).resolve()
        self._handler = _InboxEventHandler(self._inbox_dir, callback, debounce_seconds)
        self._observer: Observer | None = None

    def start(self) -> None:
        if self._observer is not None:
            return
        self._observer = Observer()
        self._observer.schedule(self._handler, str(self._inbox_dir), recursive=False)
        self._observer.start()
        logger.info("Watching %s for new files", self._inbox_dir)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info("Stopped watching %s", self._inbox_dir)


async def wait_until_settled(
    path: Path,
    settle_seconds: float,
    poll_interval: float = 0.1,
) -> bool:
    """Wait until ``path`` has kept the same size for ``settle_seconds``.

    Returns False if the file disappears while waiting.
    """
    last_size = -1
    stable_since = time.monotonic()
    while True:
        try:
            size = path.stat().st_size
        except FileNotFoundError:
            return False
        now = time.monotonic()
        if size != last_size:
            last_size = size
            stable_since = now
        elif now - stable_since >= settle_seconds:
            return True
        await asyncio.sleep(poll_interval)
