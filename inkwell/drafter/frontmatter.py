"""YAML front matter helpers for generated notes."""

from __future__ import annotations

import yaml


def split_frontmatter(text: str) -> tuple[dict, str]:
    """Split a markdown note into (frontmatter dict, body text).

    Expects optional YAML front matter between '---' fences at the top.
    Returns ({}, full_text) when no parseable front matter is found.
    """
    if not text.startswith("---"):
        return {}, text

    lines = text.split("\n")
    if lines[0].strip() != "---":
        return {}, text

    for idx in range(1, len(lines)):
        if lines[idx].strip() == "---":
            break
    else:
        return {}, text

    try:
        fm = yaml.safe_load("\n".join(lines[1:idx]))
    except yaml.YAMLError:
        return {}, text

    if not isinstance(fm, dict):
        return {}, text

    return fm, "\n".join(lines[idx + 1:]).lstrip("\n")


def extract_title(text: str) -> str | None:
    """Return the front matter ``title`` if it is a non-blank string."""
    fm, _ = split_frontmatter(text)
    title = fm.get("title")
    if not isinstance(title, str):
        return None
    return title.strip() or None
