"""Abstract LLM interface for inkwell."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from inkwell.llm.models import LLMConfig, LLMResponse

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Provider-agnostic interface: one system prompt, one user message, one text back.

    Each adapter owns its transport and its response-shape rule; whatever the
    provider returns is normalized to plain text in ``LLMResponse.content``.
    Adapters never retry: a failed call surfaces as ProviderCallError and an
    answer without usable text as EmptyResponseError.
    """

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @abstractmethod
    async def generate(self, system: str, user: str) -> LLMResponse:
        """Generate a complete response (one-shot)."""
        ...

    async def invoke(self, system: str, user: str) -> str:
        """Generate and return only the text."""
        response = await self.generate(system, user)
        logger.debug(
            "%s/%s used %d input + %d output tokens",
            self.config.provider,
            response.model,
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        return response.content
