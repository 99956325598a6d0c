"""Drafter subsystem: prompt assembly and note generation."""

from inkwell.drafter.context import ContextBuilder, ExampleNote
from inkwell.drafter.drafter import NoteDrafter, strip_markdown_fence
from inkwell.drafter.frontmatter import extract_title, split_frontmatter

__all__ = [
    "ContextBuilder",
    "ExampleNote",
    "NoteDrafter",
    "extract_title",
    "split_frontmatter",
    "strip_markdown_fence",
]
