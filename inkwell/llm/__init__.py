"""LLM provider abstraction layer."""

import os
from collections.abc import Mapping

from inkwell.config.loader import ConfigurationError
from inkwell.config.models import LLMSettings
from inkwell.llm.base import LLMProvider
from inkwell.llm.claude import ClaudeProvider, extract_anthropic_content
from inkwell.llm.gemini import GeminiProvider, extract_gemini_content
from inkwell.llm.models import (
    EmptyResponseError,
    LLMConfig,
    LLMResponse,
    ProviderCallError,
    TokenUsage,
)
from inkwell.llm.ollama import OllamaProvider
from inkwell.llm.openai_adapter import OpenAIProvider, extract_openai_content

_PROVIDER_MAP: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "openrouter": OpenAIProvider,
    "ollama": OllamaProvider,
    "anthropic": ClaudeProvider,
    "gemini": GeminiProvider,
}

# Providers that run locally and need no credential
_KEYLESS_PROVIDERS = frozenset({"ollama"})


def create_llm_provider(
    settings: LLMSettings, env: Mapping[str, str] | None = None
) -> LLMProvider:
    """Create an LLM provider from app-level settings.

    Resolves the API key from the env var named in settings.api_key_env, then
    bridges the app-level LLMSettings to the provider-level LLMConfig.
    """
    env = os.environ if env is None else env
    provider = settings.provider
    if not provider:
        raise ConfigurationError("No LLM provider selected (set LLM_PROVIDER)")

    cls = _PROVIDER_MAP.get(provider)
    if cls is None:
        raise ConfigurationError(
            f"Unknown LLM provider: {provider!r}. "
            f"Valid values: {', '.join(_PROVIDER_MAP)}"
        )

    api_key = env.get(settings.api_key_env) or None
    if api_key is None and provider not in _KEYLESS_PROVIDERS:
        raise ConfigurationError(
            f"Missing API key: set environment variable {settings.api_key_env!r}"
        )

    llm_config = LLMConfig(
        provider=provider,
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        timeout=settings.timeout,
        api_key=api_key,
        base_url=settings.base_url,
    )
    try:
        return cls(llm_config)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {provider} settings: {e}") from e


__all__ = [
    "ClaudeProvider",
    "EmptyResponseError",
    "GeminiProvider",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "OllamaProvider",
    "OpenAIProvider",
    "ProviderCallError",
    "TokenUsage",
    "create_llm_provider",
    "extract_anthropic_content",
    "extract_gemini_content",
    "extract_openai_content",
]
