"""Ollama adapter, speaking Ollama's OpenAI-compatible endpoint."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from inkwell.llm.models import LLMConfig
from inkwell.llm.openai_adapter import OpenAIProvider

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "http://localhost:11434/v1"

# Ollama ignores the key, but the OpenAI SDK insists on a non-empty one.
_PLACEHOLDER_API_KEY = "ollama"


def _validate_base_url(url: str) -> str:
    """Validate Ollama base_url for SSRF and injection risks.

    Raises ValueError if the URL is malformed or contains injection patterns.
    Warns if the URL is not localhost (remote Ollama is valid but uncommon).
    """
    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Ollama base_url must be http(s), got {parsed.scheme}")

    if "\r" in url or "\n" in url:
        raise ValueError("CRLF injection detected in base_url")

    allowed_hosts = {"localhost", "127.0.0.1", "::1", "0.0.0.0"}
    if parsed.hostname not in allowed_hosts:
        logger.warning(
            "Ollama base_url %s is not localhost, ensure this is intentional",
            parsed.hostname,
        )

    return url


class OllamaProvider(OpenAIProvider):
    """Local Ollama models; no credential required."""

    default_base_url = _DEFAULT_BASE_URL

    def __init__(self, config: LLMConfig) -> None:
        _validate_base_url((config.base_url or _DEFAULT_BASE_URL).rstrip("/"))
        super().__init__(config)

    def _resolve_api_key(self) -> str:
        return self.config.api_key or _PLACEHOLDER_API_KEY
