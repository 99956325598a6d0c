"""Context builder: turns live project files into the system prompt."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel

from inkwell.config.models import ProjectConfig
from inkwell.drafter.prompts import (
    EXAMPLE_TEMPLATE,
    NO_EXAMPLES_NOTICE,
    SYSTEM_PROMPT_TEMPLATE,
)

logger = logging.getLogger(__name__)


class ExampleNote(BaseModel):
    """An existing note embedded verbatim as a formatting example."""

    name: str
    content: str


class ContextBuilder:
    """Assembles the system prompt from the overview, format guide and recent notes.

    Nothing is cached: every call re-reads the project files, so edits to
    the format guide or newly written notes shape the very next generation.
    """

    def __init__(self, project: ProjectConfig) -> None:
        self.project = project

    @property
    def notes_dir(self) -> Path:
        return self.project.resolve(self.project.notes_dir)

    def build_system_prompt(self) -> str:
        overview = _read_optional(self.project.resolve(self.project.overview_file))
        format_guide = _read_optional(self.project.resolve(self.project.format_guide))
        examples = self.load_examples()
        return SYSTEM_PROMPT_TEMPLATE.format(
            overview=overview,
            format_guide=format_guide,
            examples=_format_examples(examples),
        )

    def load_examples(self) -> list[ExampleNote]:
        """Return up to ``max_examples`` notes, most recently modified first."""
        limit = self.project.max_examples
        notes_dir = self.notes_dir
        if limit == 0 or not notes_dir.is_dir():
            return []

        candidates: list[tuple[float, Path]] = []
        for path in notes_dir.glob("*.md"):
            try:
                candidates.append((path.stat().st_mtime, path))
            except OSError:
                continue
        candidates.sort(key=lambda item: item[0], reverse=True)

        examples: list[ExampleNote] = []
        for _, path in candidates[:limit]:
            try:
                content = path.read_text(encoding="utf-8")
            except OSError as e:
                logger.warning("Skipping example %s: %s", path.name, e)
                continue
            examples.append(ExampleNote(name=path.name, content=content))
        return examples


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_optional(path: Path) -> str:
    """Read a project file, treating a missing or unreadable file as empty."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
        return ""


def _format_examples(examples: list[ExampleNote]) -> str:
    if not examples:
        return NO_EXAMPLES_NOTICE
    return "\n\n".join(
        EXAMPLE_TEMPLATE.format(name=ex.name, content=ex.content.strip())
        for ex in examples
    )
