"""Single-file ingestion pipeline.

    reading → generating → slugging → writing → archiving (.processed/)
                 └──────────── any error ───────────┴──→ archiving (.failed/ + .error)

A file that cannot be read at all is logged and left in the inbox.
Nothing is retried; a failed file is only picked up again if an operator
moves it back into the inbox.
"""

from __future__ import annotations

import logging
from pathlib import Path

from inkwell.config.models import InboxConfig
from inkwell.drafter.drafter import NoteDrafter
from inkwell.inbox.archive import FAILED_DIR, archive_failed, archive_processed
from inkwell.inbox.models import (
    ArchiveError,
    InboxItem,
    Outcome,
    PayloadTooLargeError,
    ProcessingState,
    ProcessResult,
    ReadError,
)
from inkwell.output.slugs import derive_slug, safe_timestamp
from inkwell.output.writer import NoteWriter

logger = logging.getLogger(__name__)


class InboxProcessor:
    """Runs one inbox file through generation, placement and archival."""

    def __init__(
        self,
        drafter: NoteDrafter,
        writer: NoteWriter,
        config: InboxConfig,
    ) -> None:
        self.drafter = drafter
        self.writer = writer
        self.config = config

    async def process(self, path: Path) -> ProcessResult:
        path = Path(path)
        timestamp = safe_timestamp()
        logger.info("Processing: %s", path.name)

        try:
            item, raw_text = self._read(path)
        except ReadError as e:
            logger.error("%s (left in place)", e)
            return ProcessResult(
                filename=path.name,
                outcome=Outcome.unread,
                failed_state=ProcessingState.reading,
                error=str(e),
            )

        state = ProcessingState.generating
        slug: str | None = None
        output_path: Path | None = None
        try:
            logger.debug("%s: %s", state.value, item.filename)
            self._check_size(item, raw_text)
            generated = await self.drafter.generate(item.filename, raw_text)

            state = ProcessingState.slugging
            logger.debug("%s: %s", state.value, item.filename)
            slug = derive_slug(generated, item.filename, self.writer.notes_dir)

            state = ProcessingState.writing
            logger.debug("%s: %s", state.value, item.filename)
            output_path = self.writer.write(slug, generated)
            logger.info("Written: %s/%s.md", self.writer.notes_dir.name, slug)

            state = ProcessingState.archiving
            logger.debug("%s: %s", state.value, item.filename)
            record = archive_processed(item, timestamp)
        except Exception as e:
            logger.error("Error processing %s (%s): %s", item.filename, state.value, e)
            result = self._fail(item, timestamp, state, e)
            return result.model_copy(update={"slug": slug, "output_path": output_path})

        logger.info("Archived to %s/%s", record.archived_path.parent.name, record.archived_path.name)
        return ProcessResult(
            filename=item.filename,
            outcome=Outcome.processed,
            slug=slug,
            output_path=output_path,
            archive=record,
        )

    def _read(self, path: Path) -> tuple[InboxItem, str | None]:
        """Stat and decode the file; oversize files are not loaded (text is None)."""
        logger.debug("%s: %s", ProcessingState.reading.value, path.name)
        try:
            item = InboxItem.from_path(path)
            if item.size > self.config.max_input_bytes:
                return item, None
            raw_text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ReadError(path, e) from e
        return item, raw_text

    def _check_size(self, item: InboxItem, raw_text: str | None) -> None:
        limit = self.config.max_input_bytes
        if raw_text is None:
            raise PayloadTooLargeError(item.size, limit)
        # Replacement characters can make the decoded text larger than the file.
        size = len(raw_text.encode("utf-8"))
        if size > limit:
            raise PayloadTooLargeError(size, limit)

    def _fail(
        self,
        item: InboxItem,
        timestamp: str,
        state: ProcessingState,
        error: Exception,
    ) -> ProcessResult:
        try:
            record = archive_failed(item, timestamp, error)
        except ArchiveError as archive_err:
            # The move itself failed: the original is still in the inbox.
            logger.error("Also failed to archive to %s/: %s", FAILED_DIR, archive_err)
            record = None
        else:
            if record.error_report is None:
                logger.error("Moved %s to %s/ without error report", item.filename, FAILED_DIR)
            else:
                logger.error("Moved %s to %s/ with error report", item.filename, FAILED_DIR)

        return ProcessResult(
            filename=item.filename,
            outcome=Outcome.failed,
            archive=record,
            failed_state=state,
            error=str(error),
        )
