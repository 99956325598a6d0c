"""Eligibility rules for inbox entries.

Rejected entries are only logged; they never enter the pipeline and are
never archived.
"""

from __future__ import annotations

import logging
from pathlib import Path

from inkwell.config.models import InboxConfig

logger = logging.getLogger(__name__)

# Control file that documents the inbox for humans
CONTROL_FILE = "README.md"


def is_ignored_name(name: str) -> bool:
    """Hidden entries (.processed, .failed, editor temp files) and the control file."""
    return name.startswith(".") or name == CONTROL_FILE


def is_binary_file(path: Path, sniff_bytes: int = 1024) -> bool:
    """Best-effort binary check: a NUL byte in the first ``sniff_bytes`` bytes.

    Files that cannot be opened are treated as binary.
    """
    try:
        with open(path, "rb") as f:
            head = f.read(sniff_bytes)
    except OSError:
        return True
    return b"\x00" in head


def is_processable(path: Path, config: InboxConfig) -> bool:
    """Allow only regular, visible, text-like files."""
    path = Path(path)
    if is_ignored_name(path.name) or not path.is_file():
        return False

    ext = path.suffix.lower()
    if ext not in config.extensions:
        logger.warning(
            "Skipping %s: unsupported extension %r", path.name, ext or "(none)"
        )
        return False

    if is_binary_file(path, config.binary_sniff_bytes):
        logger.warning("Skipping %s: detected binary content", path.name)
        return False

    return True


def pending_files(inbox_dir: Path, config: InboxConfig) -> list[Path]:
    """Eligible files currently in the inbox, in name order."""
    inbox_dir = Path(inbox_dir)
    if not inbox_dir.is_dir():
        return []
    return [
        entry
        for entry in sorted(inbox_dir.iterdir())
        if not is_ignored_name(entry.name) and is_processable(entry, config)
    ]
