"""inkwell - watches an inbox directory and turns dropped text into markdown notes."""

from inkwell.config import ConfigurationError, InkwellConfig, load_config
from inkwell.drafter import ContextBuilder, NoteDrafter
from inkwell.inbox import InboxDispatcher, InboxProcessor, build_dispatcher
from inkwell.llm import LLMProvider, create_llm_provider
from inkwell.output import NoteWriter, derive_slug

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ContextBuilder",
    "InboxDispatcher",
    "InboxProcessor",
    "InkwellConfig",
    "LLMProvider",
    "NoteDrafter",
    "NoteWriter",
    "build_dispatcher",
    "create_llm_provider",
    "derive_slug",
    "load_config",
]
