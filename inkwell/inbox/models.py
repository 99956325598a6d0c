"""Inbox models, processing states and per-item errors."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class PayloadTooLargeError(Exception):
    """Input exceeds the configured byte ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Input too large ({size} bytes). Max allowed is {limit} bytes")


class ReadError(Exception):
    """The inbox file could not be read. The file is left where it is."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        super().__init__(f"Failed to read {path.name}: {cause}")
        self.__cause__ = cause


class ArchiveError(Exception):
    """Moving an item into .processed/ or .failed/ failed."""

    def __init__(self, path: Path, destination: Path, cause: Exception) -> None:
        self.path = path
        self.destination = destination
        super().__init__(f"Failed to archive {path.name} to {destination}: {cause}")
        self.__cause__ = cause


class ProcessingState(str, Enum):
    """States a single inbox file moves through."""

    reading = "reading"
    generating = "generating"
    slugging = "slugging"
    writing = "writing"
    archiving = "archiving"


class Outcome(str, Enum):
    """Terminal outcome for one inbox file."""

    processed = "processed"
    failed = "failed"
    unread = "unread"  # could not be read; left in the inbox


class InboxItem(BaseModel):
    """A file picked up from the inbox. Never modified in place, only moved."""

    model_config = ConfigDict(frozen=True)

    path: Path
    filename: str
    size: int

    @classmethod
    def from_path(cls, path: Path) -> InboxItem:
        path = Path(path)
        return cls(path=path, filename=path.name, size=path.stat().st_size)


class ArchiveRecord(BaseModel):
    """Where an inbox file ended up."""

    outcome: Outcome
    original: Path
    archived_path: Path
    error_report: Path | None = None


class ProcessResult(BaseModel):
    """Result of running one inbox file through the pipeline."""

    filename: str
    outcome: Outcome
    slug: str | None = None
    output_path: Path | None = None
    archive: ArchiveRecord | None = None
    failed_state: ProcessingState | None = None
    error: str | None = None
