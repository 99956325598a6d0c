"""Google Gemini adapter for inkwell."""

from __future__ import annotations

import inspect
from typing import Any

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from inkwell.llm.base import LLMProvider
from inkwell.llm.models import (
    EmptyResponseError,
    LLMConfig,
    LLMResponse,
    ProviderCallError,
    TokenUsage,
)


async def extract_gemini_content(response: Any) -> str:
    """Resolve ``response.text`` (a string or a sync/async accessor) to non-blank text.

    The SDK's ``text`` property raises ValueError when the candidate was
    blocked or carries no parts; that is an empty response too.
    """
    try:
        text = getattr(response, "text", None)
        if callable(text):
            text = text()
            if inspect.isawaitable(text):
                text = await text
    except ValueError as e:
        raise EmptyResponseError("gemini") from e
    if not isinstance(text, str) or not text.strip():
        raise EmptyResponseError("gemini")
    return text


class GeminiProvider(LLMProvider):
    """Gemini adapter using the google-generativeai async SDK."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        if config.base_url:
            genai.configure(
                api_key=config.api_key,
                client_options={"api_endpoint": config.base_url},
            )
        else:
            genai.configure(api_key=config.api_key)

    async def generate(self, system: str, user: str) -> LLMResponse:
        # system_instruction is fixed per model object and the prompt is rebuilt per call
        model = genai.GenerativeModel(self.config.model, system_instruction=system)
        try:
            response = await model.generate_content_async(
                user,
                generation_config=genai.types.GenerationConfig(
                    max_output_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                ),
                request_options={"timeout": self.config.timeout},
            )
        except google_exceptions.GoogleAPIError as e:
            raise ProviderCallError(
                "gemini",
                "generate",
                e,
                retryable=isinstance(e, google_exceptions.ResourceExhausted),
            ) from e

        content = await extract_gemini_content(response)
        usage = getattr(response, "usage_metadata", None)
        return LLMResponse(
            content=content,
            usage=TokenUsage(
                input_tokens=getattr(usage, "prompt_token_count", 0) or 0,
                output_tokens=getattr(usage, "candidates_token_count", 0) or 0,
            ),
            model=self.config.model,
        )
