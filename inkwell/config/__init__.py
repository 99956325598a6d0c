from .loader import ConfigurationError, load_config, require_provider
from .models import (
    InboxConfig,
    InkwellConfig,
    LLMSettings,
    ProjectConfig,
)

__all__ = [
    "ConfigurationError",
    "InboxConfig",
    "InkwellConfig",
    "LLMSettings",
    "ProjectConfig",
    "load_config",
    "require_provider",
]
