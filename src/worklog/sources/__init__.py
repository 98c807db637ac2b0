"""Activity sources that feed work items into the summarizer."""

import logging

from .base import SourceReader
from .git import GitReader
from .github import GitHubReader
from .sessions import SessionLogReader

logger = logging.getLogger(__name__)

READERS: dict[str, SourceReader] = {
    "opencode": SessionLogReader("opencode", "OpenCode"),
    "claude": SessionLogReader("claude", "Claude"),
    "codex": SessionLogReader("codex", "Codex"),
    "factory": SessionLogReader("factory", "Factory"),
    "git": GitReader(),
    "github": GitHubReader(),
}


def get_reader(name: str) -> SourceReader | None:
    return READERS.get(name)


def get_readers_by_names(names: list[str]) -> list[SourceReader]:
    """Readers for ``names`` in the given order; unknown names are skipped."""
    readers = []
    for name in names:
        reader = READERS.get(name.strip())
        if reader is None:
            logger.warning(f"Unknown source: {name}")
            continue
        readers.append(reader)
    return readers


__all__ = ["READERS", "SourceReader", "get_reader", "get_readers_by_names"]
