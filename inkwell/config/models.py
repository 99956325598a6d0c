from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class LLMSettings(BaseModel):
    provider: str | None = None
    model: str = "gpt-4o"
    api_key_env: str = "LLM_API_KEY"
    base_url: str | None = None
    max_tokens: int = Field(default=4096, gt=0)
    temperature: float = Field(default=0.3, ge=0)
    timeout: int = Field(default=300, gt=0)

    @field_validator("provider", "base_url", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("provider")
    @classmethod
    def _normalize_provider(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None


class InboxConfig(BaseModel):
    path: str = "content/inbox"
    extensions: list[str] = Field(default_factory=lambda: [".txt", ".md", ".markdown"])
    max_input_bytes: int = Field(default=100 * 1024, gt=0)
    binary_sniff_bytes: int = Field(default=1024, gt=0)
    settle_seconds: float = Field(default=0.5, ge=0)
    poll_interval: float = Field(default=0.1, gt=0)

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, v: list[str]) -> list[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


class ProjectConfig(BaseModel):
    root: str = "."
    notes_dir: str = "content/notes"
    overview_file: str = "README.md"
    format_guide: str = "docs/note-format.md"
    max_examples: int = Field(default=3, ge=0)

    def resolve(self, path: str) -> Path:
        """Resolve a path relative to the project root (absolute paths pass through)."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return Path(self.root).expanduser().resolve() / candidate


class InkwellConfig(BaseModel):
    llm: LLMSettings = Field(default_factory=LLMSettings)
    inbox: InboxConfig = Field(default_factory=InboxConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

    @property
    def inbox_dir(self) -> Path:
        return self.project.resolve(self.inbox.path)

    @property
    def notes_dir(self) -> Path:
        return self.project.resolve(self.project.notes_dir)
