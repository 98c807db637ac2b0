"""Output formatters for work summaries."""

from ..models import WorkSummary
from .json_formatter import format_json
from .markdown import format_markdown
from .plain import format_plain

FORMATTERS = {
    "markdown": format_markdown,
    "json": format_json,
    "plain": format_plain,
}


def format_output(summary: WorkSummary, fmt: str = "markdown") -> str:
    """Render ``summary`` with the named formatter."""
    formatter = FORMATTERS.get(fmt)
    if formatter is None:
        raise ValueError(f"Unknown output format: {fmt}. Choose from {', '.join(FORMATTERS)}")
    return formatter(summary)


__all__ = ["FORMATTERS", "format_json", "format_markdown", "format_output", "format_plain"]
