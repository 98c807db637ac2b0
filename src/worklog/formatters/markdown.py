"""Markdown rendering of a WorkSummary."""

from ..models import WorkItem, WorkSummary
from ..utils.dates import format_date_range, get_period_type

SOURCE_NAMES = {
    "opencode": "OpenCode Sessions",
    "claude": "Claude Code",
    "codex": "Codex",
    "factory": "Factory",
    "git": "Git Commits",
    "github": "GitHub Activity",
}

SOURCE_ICONS = {
    "opencode": "🔧",
    "claude": "🤖",
    "codex": "💻",
    "factory": "🏭",
    "git": "📝",
    "github": "🐙",
}

HEADINGS = {
    "daily": "Daily Standup",
    "weekly": "Weekly Standup",
    "monthly": "Monthly Standup",
    "quarterly": "Quarterly Standup",
}


def group_by_source(items: list[WorkItem]) -> dict[str, list[WorkItem]]:
    groups: dict[str, list[WorkItem]] = {}
    for item in items:
        groups.setdefault(item.source, []).append(item)
    return groups


def format_markdown(summary: WorkSummary) -> str:
    heading = HEADINGS[get_period_type(summary.date_range)]
    parts = [f"# {heading} - {format_date_range(summary.date_range)}", ""]

    if summary.llm_summary:
        parts += ["## Summary", "", summary.llm_summary, ""]

    if not summary.items:
        parts.append("*No activity recorded for this period.*")
        return "\n".join(parts)

    smart = summary.smart_summary
    if smart and smart.clusters:
        parts += ["## Themes", "", smart.narrative, ""]
        for cluster in smart.clusters:
            keywords = ", ".join(cluster.keywords) or "none"
            parts.append(f"- **{cluster.theme}** ({len(cluster.items)}) · {keywords}")
        parts.append("")

    for source, items in group_by_source(summary.items).items():
        icon = SOURCE_ICONS.get(source, "•")
        parts += [f"## {icon} {SOURCE_NAMES.get(source, source)}", ""]
        for item in items:
            parts.append(f"- **{item.timestamp:%H:%M}** {item.title}")
            if item.description:
                parts.append(f"  - {item.description}")
        parts.append("")

    parts.append("---")
    parts.append(f"*Generated at {summary.generated_at:%Y-%m-%d %H:%M:%S}*")
    return "\n".join(parts)
