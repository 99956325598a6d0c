"""Shared test fixtures for inkwell."""

import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from inkwell.config.models import InboxConfig, InkwellConfig, ProjectConfig
from inkwell.llm.base import LLMProvider
from inkwell.llm.models import LLMConfig, LLMResponse, TokenUsage

SAMPLE_NOTE = """\
---
title: "Weekly Sync"
date: 2026-02-19
tags: [meetings, team]
---

# Weekly Sync

- Shipped the importer
- See [[roadmap|the roadmap]]
"""


@pytest.fixture(autouse=True)
def _reset_inkwell_logger():
    """CLI runs configure the package logger; restore propagation for caplog."""
    yield
    logger = logging.getLogger("inkwell")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sample_note():
    return SAMPLE_NOTE


@pytest.fixture
def project_root(tmp_path) -> Path:
    """A project with an overview, a format guide, an inbox and an empty notes dir."""
    (tmp_path / "README.md").write_text("# Notes App\nA markdown notes application.")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "note-format.md").write_text("Use YAML frontmatter with title, date, tags.")
    (tmp_path / "content" / "inbox").mkdir(parents=True)
    (tmp_path / "content" / "notes").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def inkwell_config(project_root) -> InkwellConfig:
    return InkwellConfig(
        llm={"provider": "openai", "model": "test-model"},
        inbox=InboxConfig(settle_seconds=0, poll_interval=0.01),
        project=ProjectConfig(root=str(project_root)),
    )


@pytest.fixture
def inbox_dir(inkwell_config) -> Path:
    return inkwell_config.inbox_dir


@pytest.fixture
def notes_dir(inkwell_config) -> Path:
    return inkwell_config.notes_dir


@pytest.fixture
def mock_llm_provider(sample_note):
    provider = MagicMock(spec=LLMProvider)
    provider.config = LLMConfig(provider="openai", model="test-model")
    provider.generate = AsyncMock(
        return_value=LLMResponse(
            content=sample_note,
            usage=TokenUsage(input_tokens=100, output_tokens=250),
            model="test-model",
        )
    )
    provider.invoke = AsyncMock(return_value=sample_note)
    return provider
