"""Terminal placement of inbox files: .processed/ on success, .failed/ on error."""

from __future__ import annotations

import logging
import traceback
from datetime import UTC, datetime
from pathlib import Path

from inkwell.inbox.models import ArchiveError, ArchiveRecord, InboxItem, Outcome

logger = logging.getLogger(__name__)

PROCESSED_DIR = ".processed"
FAILED_DIR = ".failed"
ERROR_REPORT_SUFFIX = ".error"


def archive_processed(item: InboxItem, timestamp: str) -> ArchiveRecord:
    """Move a successfully ingested file to ``<inbox>/.processed/<timestamp>-<name>``."""
    dest = item.path.parent / PROCESSED_DIR / f"{timestamp}-{item.filename}"
    _move(item.path, dest)
    return ArchiveRecord(outcome=Outcome.processed, original=item.path, archived_path=dest)


def archive_failed(
    item: InboxItem,
    timestamp: str,
    error: BaseException,
    now: datetime | None = None,
) -> ArchiveRecord:
    """Move a failed file to ``<inbox>/.failed/<timestamp>-<name>`` and write its report.

    Raises ArchiveError only if the move fails. Once the original is in
    ``.failed/`` a report that cannot be written is logged and the record
    carries ``error_report=None``.
    """
    dest = item.path.parent / FAILED_DIR / f"{timestamp}-{item.filename}"
    _move(item.path, dest)

    report_path: Path | None = dest.with_name(dest.name + ERROR_REPORT_SUFFIX)
    try:
        report_path.write_text(
            format_error_report(item.filename, error, now), encoding="utf-8"
        )
    except OSError as e:
        logger.warning(
            "Archived %s but could not write %s: %s", item.filename, report_path.name, e
        )
        report_path = None

    return ArchiveRecord(
        outcome=Outcome.failed,
        original=item.path,
        archived_path=dest,
        error_report=report_path,
    )


def format_error_report(
    filename: str, error: BaseException, now: datetime | None = None
) -> str:
    """Human-readable failure report stored next to the archived original."""
    now = now or datetime.now(UTC)
    lines = [
        f"File: {filename}",
        f"Time: {now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')}",
        f"Error: {error}",
    ]
    if error.__traceback__ is not None:
        stack = "".join(traceback.format_exception(error)).rstrip()
        lines.append(f"\nStack:\n{stack}")
    return "\n".join(lines) + "\n"


def _move(src: Path, dest: Path) -> None:
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        src.rename(dest)
    except OSError as e:
        raise ArchiveError(src, dest, e) from e
    logger.debug("moved %s -> %s", src, dest)
