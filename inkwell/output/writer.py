"""NoteWriter: places generated notes in the content store."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class NoteWriter:
    """Writes notes to ``<notes_dir>/<slug>.md``.

    Slugs are expected to come from ``derive_slug``; the writer does not
    re-check uniqueness.
    """

    def __init__(self, notes_dir: Path) -> None:
        self.notes_dir = Path(notes_dir)

    def path_for(self, slug: str) -> Path:
        return self.notes_dir / f"{slug}.md"

    def write(self, slug: str, content: str) -> Path:
        """Write a note and return its path."""
        dest = self.path_for(slug)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(content, encoding="utf-8")
        logger.debug("wrote %s (%d bytes)", dest, len(content.encode("utf-8")))
        return dest
