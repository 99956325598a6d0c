"""YAML config loading with env var expansion and environment overrides."""

import os
import re
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import InkwellConfig


class ConfigurationError(ValueError):
    """Configuration is missing or invalid. Fatal at startup."""


# Environment variables that override file-based settings: env var -> (section, key)
_ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "LLM_PROVIDER": ("llm", "provider"),
    "LLM_MODEL": ("llm", "model"),
    "LLM_BASE_URL": ("llm", "base_url"),
    "INBOX_DIR": ("inbox", "path"),
    "INKWELL_LOG_LEVEL": (None, "log_level"),
}

_SECTIONS = ("llm", "inbox", "project")


def load_config(
    cli_path: str | None = None,
    env: Mapping[str, str] | None = None,
) -> InkwellConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    Environment overrides (LLM_PROVIDER, LLM_MODEL, ...) are applied on top of
    whichever source won.
    """
    env = os.environ if env is None else env
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./inkwell.yaml"),
        Path.home() / ".inkwell" / "config.yaml",
    ]

    if cli_path and not Path(cli_path).exists():
        raise ConfigurationError(f"Config file not found: {cli_path}")

    raw: dict = {}
    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
            if loaded is None:
                continue
            if not isinstance(loaded, dict):
                raise ConfigurationError(f"Invalid config in {path}: expected a mapping")
            raw = _expand_env_vars(loaded, env)
            break

    raw = _apply_env_overrides(raw, env)
    try:
        return InkwellConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config: {e}") from e


def require_provider(config: InkwellConfig) -> str:
    """Return the selected provider or raise ConfigurationError if none is set."""
    if not config.llm.provider:
        raise ConfigurationError(
            "LLM_PROVIDER is not set. Set it in the environment (or .env) "
            "or under llm.provider in inkwell.yaml."
        )
    return config.llm.provider


def _expand_env_vars(obj: object, env: Mapping[str, str]) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: env.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v, env) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v, env) for v in obj]
    return obj


def _apply_env_overrides(raw: dict, env: Mapping[str, str]) -> dict:
    # A section whose children are all commented out loads as None: use defaults.
    merged = {
        k: (dict(v) if isinstance(v, dict) else v)
        for k, v in raw.items()
        if not (k in _SECTIONS and v is None)
    }
    for section in _SECTIONS:
        if section in merged and not isinstance(merged[section], dict):
            raise ConfigurationError(f"Invalid config: '{section}' must be a mapping")

    for var, (section, key) in _ENV_OVERRIDES.items():
        value = env.get(var)
        if not value:
            continue
        if section is None:
            merged[key] = value.lower() if key == "log_level" else value
        else:
            merged.setdefault(section, {})[key] = value
    return merged


# Default YAML template for `inkwell config init`
DEFAULT_CONFIG_TEMPLATE = """\
# inkwell.yaml

# Model provider (LLM_PROVIDER / LLM_MODEL / LLM_BASE_URL override these)
llm:
  # provider: "openai"         # openai | openrouter | ollama | anthropic | gemini
  model: "gpt-4o"
  api_key_env: "LLM_API_KEY"   # env var holding the credential (not needed for ollama)
  # base_url: ""               # optional endpoint override
  max_tokens: 4096
  temperature: 0.3
  timeout: 300                 # seconds to wait on a single model call

# Inbox (INBOX_DIR overrides path)
inbox:
  path: "content/inbox"
  extensions: [".txt", ".md", ".markdown"]
  max_input_bytes: 102400
  settle_seconds: 0.5

# Project context and content store
project:
  root: "."
  notes_dir: "content/notes"
  overview_file: "README.md"
  format_guide: "docs/note-format.md"
  max_examples: 3

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
