"""Prompt templates for note generation."""

from __future__ import annotations

SYSTEM_PROMPT_TEMPLATE = """\
You are a note-writing assistant for a markdown notes application.
Your job is to take raw input text and transform it into a properly-formatted
markdown note file for this project.

OUTPUT REQUIREMENTS:
- Output ONLY a complete markdown file, nothing else.
- The file must begin with valid YAML frontmatter (title, date, tags).
- Do NOT wrap the output in a code fence. Output raw markdown directly.
- Infer the title, tags, and date from the content. Use today's date if no date is apparent.
- Preserve all meaning and facts from the original input.
- Format using the note format guide provided below.

---

## Project Overview

{overview}

---

## Note Format Guide

{format_guide}

---

## Real Note Examples from This Project

{examples}"""

EXAMPLE_TEMPLATE = """\
### Example: {name}

```md
{content}
```"""

NO_EXAMPLES_NOTICE = "_No existing notes found. Rely on the format guide above._"

BEGIN_MARKER = "--- BEGIN CONTENT ---"
END_MARKER = "--- END CONTENT ---"

USER_PROMPT_TEMPLATE = """\
Original filename: {filename}

{begin}
{raw_text}
{end}"""


def build_user_prompt(filename: str, raw_text: str) -> str:
    """Embed the original filename and raw text between explicit boundary markers."""
    return USER_PROMPT_TEMPLATE.format(
        filename=filename,
        begin=BEGIN_MARKER,
        raw_text=raw_text,
        end=END_MARKER,
    )
