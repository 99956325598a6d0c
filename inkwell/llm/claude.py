"""Anthropic Claude adapter for inkwell."""

from __future__ import annotations

from typing import Any

import httpx
from anthropic import APIError, AsyncAnthropic, RateLimitError

from inkwell.llm.base import LLMProvider
from inkwell.llm.models import (
    EmptyResponseError,
    LLMConfig,
    LLMResponse,
    ProviderCallError,
    TokenUsage,
)


def extract_anthropic_content(message: Any) -> str:
    """Return the text of the first content block carrying non-blank text."""
    for block in getattr(message, "content", None) or []:
        text = getattr(block, "text", None)
        if isinstance(text, str) and text.strip():
            return text
    raise EmptyResponseError("anthropic")


class ClaudeProvider(LLMProvider):
    """Claude adapter using the Anthropic async SDK."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._client = AsyncAnthropic(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout, connect=10.0),
            max_retries=0,
        )

    async def generate(self, system: str, user: str) -> LLMResponse:
        try:
            message = await self._client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
        except APIError as e:
            raise ProviderCallError(
                "anthropic", "generate", e, retryable=isinstance(e, RateLimitError)
            ) from e

        content = extract_anthropic_content(message)
        usage = getattr(message, "usage", None)
        return LLMResponse(
            content=content,
            usage=TokenUsage(
                input_tokens=getattr(usage, "input_tokens", 0) or 0,
                output_tokens=getattr(usage, "output_tokens", 0) or 0,
            ),
            model=getattr(message, "model", None) or self.config.model,
        )
