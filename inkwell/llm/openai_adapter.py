"""OpenAI-compatible chat completion adapter (OpenAI, OpenRouter)."""

from __future__ import annotations

from typing import Any

import httpx
from openai import APIError, AsyncOpenAI, RateLimitError

from inkwell.llm.base import LLMProvider
from inkwell.llm.models import (
    EmptyResponseError,
    LLMConfig,
    LLMResponse,
    ProviderCallError,
    TokenUsage,
)

_DEFAULT_BASE_URLS: dict[str, str] = {
    "openrouter": "https://openrouter.ai/api/v1",
}


def extract_openai_content(completion: Any, provider: str = "openai") -> str:
    """Return the first choice's message content, or raise EmptyResponseError."""
    choices = getattr(completion, "choices", None) or []
    if not choices:
        raise EmptyResponseError(provider)
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content.strip():
        raise EmptyResponseError(provider)
    return content


class OpenAIProvider(LLMProvider):
    """Chat completions via the OpenAI async SDK; also serves OpenRouter."""

    default_base_url: str | None = None

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._client = AsyncOpenAI(
            api_key=self._resolve_api_key(),
            base_url=self.base_url,
            timeout=httpx.Timeout(config.timeout, connect=10.0),
            max_retries=0,
        )

    @property
    def base_url(self) -> str | None:
        return (
            self.config.base_url
            or _DEFAULT_BASE_URLS.get(self.config.provider)
            or self.default_base_url
        )

    def _resolve_api_key(self) -> str | None:
        return self.config.api_key

    async def generate(self, system: str, user: str) -> LLMResponse:
        try:
            completion = await self._client.chat.completions.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            )
        except APIError as e:
            raise ProviderCallError(
                self.config.provider,
                "generate",
                e,
                retryable=isinstance(e, RateLimitError),
            ) from e

        content = extract_openai_content(completion, self.config.provider)
        usage = getattr(completion, "usage", None)
        return LLMResponse(
            content=content,
            usage=TokenUsage(
                input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            ),
            model=getattr(completion, "model", None) or self.config.model,
        )
