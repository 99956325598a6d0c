"""Pydantic models and errors for the LLM subsystem."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

ProviderName = Literal["openai", "openrouter", "ollama", "anthropic", "gemini"]


class ProviderCallError(Exception):
    """Wraps provider-specific exceptions with context."""

    def __init__(
        self, provider: str, operation: str, cause: Exception, retryable: bool = False
    ) -> None:
        self.provider = provider
        self.operation = operation
        self.retryable = retryable
        super().__init__(f"{provider} {operation} failed: {cause}")
        self.__cause__ = cause


class EmptyResponseError(Exception):
    """The provider answered, but with no usable text."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"LLM returned empty response ({provider})")


class LLMConfig(BaseModel):
    """Resolved configuration for a single provider instance."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderName
    model: str
    max_tokens: int = 4096
    temperature: float = 0.3
    timeout: float = 300.0
    api_key: str | None = None
    base_url: str | None = None


class TokenUsage(BaseModel):
    """Token usage stats from a single LLM call."""

    input_tokens: int = 0
    output_tokens: int = 0


class LLMResponse(BaseModel):
    """Structured response from an LLM provider."""

    content: str
    usage: TokenUsage
    model: str
