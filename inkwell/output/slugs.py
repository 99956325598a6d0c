"""Slug derivation for generated notes.

A slug is the filename stem of a note in the content store: lowercase ASCII
letters, digits and single hyphens. Candidates are tried in order (front
matter title, original filename, timestamp) and the first one that survives
normalization is made unique against the notes already on disk.

The uniqueness check and the later write are separate filesystem operations.
That is safe only because the dispatcher runs one file at a time.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import UTC, datetime
from pathlib import Path

from inkwell.drafter.frontmatter import extract_title

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(value: str) -> str:
    """Normalize arbitrary text to a slug; may return an empty string."""
    value = unicodedata.normalize("NFD", value.lower())
    value = "".join(ch for ch in value if not unicodedata.combining(ch))
    value = _DISALLOWED.sub("", value).strip()
    value = _WHITESPACE.sub("-", value)
    value = _HYPHENS.sub("-", value)
    return value.strip("-")


def safe_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp (millisecond precision) with ':' and '.' replaced by '-'.

    e.g. ``2026-02-19T08-30-00-123Z``
    """
    now = now or datetime.now(UTC)
    iso = now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


def timestamp_slug(now: datetime | None = None) -> str:
    return f"note-{safe_timestamp(now)}"


def unique_slug(base: str, notes_dir: Path) -> str:
    """Return ``base``, or ``base-2``, ``base-3``... whichever has no ``.md`` in notes_dir."""
    slug = base
    counter = 2
    while (Path(notes_dir) / f"{slug}.md").exists():
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def derive_slug(generated: str, original_filename: str, notes_dir: Path) -> str:
    """Pick a collision-free slug for a generated note.

    Priority: front matter title, then the original filename without its
    extension, then a timestamp.
    """
    title = extract_title(generated)
    if title:
        slug = slugify(title)
        if slug:
            return unique_slug(slug, notes_dir)

    slug = slugify(Path(original_filename).stem)
    if slug:
        return unique_slug(slug, notes_dir)

    return unique_slug(timestamp_slug(), notes_dir)
