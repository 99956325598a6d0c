"""Inbox ingestion: filtering, watching, dispatching and per-file processing."""

from inkwell.inbox.archive import (
    FAILED_DIR,
    PROCESSED_DIR,
    archive_failed,
    archive_processed,
    format_error_report,
)
from inkwell.inbox.dispatcher import InboxDispatcher, build_dispatcher
from inkwell.inbox.filters import is_binary_file, is_processable, pending_files
from inkwell.inbox.models import (
    ArchiveError,
    ArchiveRecord,
    InboxItem,
    Outcome,
    PayloadTooLargeError,
    ProcessingState,
    ProcessResult,
    ReadError,
)
from inkwell.inbox.processor import InboxProcessor
from inkwell.inbox.watcher import InboxWatcher, wait_until_settled

__all__ = [
    "FAILED_DIR",
    "PROCESSED_DIR",
    "ArchiveError",
    "ArchiveRecord",
    "InboxDispatcher",
    "InboxItem",
    "InboxProcessor",
    "InboxWatcher",
    "Outcome",
    "PayloadTooLargeError",
    "ProcessResult",
    "ProcessingState",
    "ReadError",
    "archive_failed",
    "archive_processed",
    "build_dispatcher",
    "format_error_report",
    "is_binary_file",
    "is_processable",
    "pending_files",
    "wait_until_settled",
]
