"""Plain-text rendering of a WorkSummary."""

from ..models import WorkSummary
from ..utils.dates import format_date_range


def format_plain(summary: WorkSummary) -> str:
    lines = [f"Worklog: {format_date_range(summary.date_range)}", "=" * 50, ""]

    if summary.llm_summary:
        lines += ["Summary:", summary.llm_summary, ""]

    if not summary.items:
        lines.append("No activity recorded for this period.")
        return "\n".join(lines)

    if summary.smart_summary:
        lines += [summary.smart_summary.narrative, ""]

    indent = " " * 17
    for item in summary.items:
        lines.append(f"[{item.timestamp:%H:%M}] {item.source.upper():<8} {item.title}")
        if item.description:
            lines.append(f"{indent}{item.description}")

    return "\n".join(lines)
