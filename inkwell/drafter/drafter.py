"""Drafter orchestrator: turns a raw inbox file into a markdown note via the LLM."""

from __future__ import annotations

import logging
import re

from inkwell.drafter.context import ContextBuilder
from inkwell.drafter.prompts import build_user_prompt
from inkwell.llm.base import LLMProvider

logger = logging.getLogger(__name__)

_OUTER_FENCE = re.compile(r"```(?:markdown)?\n(.*?)```", re.DOTALL)


def strip_markdown_fence(text: str) -> str:
    """Remove a single outer ``` / ```markdown fence, if the whole text is wrapped in one."""
    text = text.strip()
    match = _OUTER_FENCE.fullmatch(text)
    return match.group(1).strip() if match else text


class NoteDrafter:
    """Generates a note from raw text.

    Pipeline:
        ContextBuilder → system prompt
        filename + raw text → user prompt
        LLMProvider.invoke → strip_markdown_fence → note
    """

    def __init__(self, llm: LLMProvider, context: ContextBuilder) -> None:
        self.llm = llm
        self.context = context

    async def generate(self, filename: str, raw_text: str) -> str:
        system = self.context.build_system_prompt()
        user = build_user_prompt(filename, raw_text)
        logger.debug(
            "Requesting note for %s (%d-char system prompt, %d-char input)",
            filename,
            len(system),
            len(raw_text),
        )
        raw_response = await self.llm.invoke(system, user)
        return strip_markdown_fence(raw_response)
