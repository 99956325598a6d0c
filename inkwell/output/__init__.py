"""Output subsystem: slug resolution and writes into the content store."""

from inkwell.output.slugs import (
    derive_slug,
    safe_timestamp,
    slugify,
    timestamp_slug,
    unique_slug,
)
from inkwell.output.writer import NoteWriter

__all__ = [
    "NoteWriter",
    "derive_slug",
    "safe_timestamp",
    "slugify",
    "timestamp_slug",
    "unique_slug",
]
