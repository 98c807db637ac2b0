"""Compose a prose narrative from clustered work items."""

from ..analysis.terms import DEFAULT_TOKENIZER, TokenizerConfig
from ..clustering.cluster import cluster_items
from ..clustering.relationships import find_cross_cluster_connections
from ..models import Cluster, CrossClusterConnection, SmartSummary, WorkItem

PERIOD_NOUNS = {
    "daily": "day",
    "weekly": "week",
    "monthly": "month",
    "quarterly": "quarter",
}


def period_noun(period_type: str) -> str:
    """Map a period type (daily, weekly, ...) to the noun used in prose."""
    return PERIOD_NOUNS.get(period_type, "period")


def _count(n: int, noun: str = "item") -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


def _join(parts: list[str]) -> str:
    if len(parts) <= 1:
        return "".join(parts)
    return f"{', '.join(parts[:-1])} and {parts[-1]}"


def compose_narrative(
    clusters: list[Cluster],
    connections: list[CrossClusterConnection],
    period: str = "day",
) -> str:
    """Describe the clusters and how they relate in a few sentences."""
    if not clusters:
        return f"No work items were found for this {period}."

    if len(clusters) == 1:
        cluster = clusters[0]
        sentences = [f"The {period} focused on {cluster.theme} ({_count(len(cluster.items))})."]
        if len(cluster.keywords) > 2:
            sentences.append(f"Key terms: {', '.join(cluster.keywords)}.")
        return " ".join(sentences)

    themes = [f"{c.theme} ({_count(len(c.items))})" for c in clusters]
    sentences = [f"The {period} spanned {_count(len(clusters), 'theme')}: {_join(themes)}."]

    by_id = {c.id: c for c in clusters}
    for conn in connections:
        a, b = by_id[conn.from_id], by_id[conn.to_id]
        sentences.append(f"{a.theme} and {b.theme} were linked through {conn.relationship}.")

    return " ".join(sentences)


def build_smart_summary(
    items: list[WorkItem],
    threshold: float = 0.3,
    tokenizer: TokenizerConfig = DEFAULT_TOKENIZER,
    top_k: int = 5,
    period: str = "day",
) -> SmartSummary:
    """Cluster ``items``, link the clusters and narrate the result."""
    if not items:
        return SmartSummary(
            clusters=[],
            narrative=f"No work items were found for this {period}.",
            cross_cluster_connections=[],
        )

    clusters = cluster_items(items, threshold, tokenizer, top_k)
    connections = find_cross_cluster_connections(clusters)
    return SmartSummary(
        clusters=clusters,
        narrative=compose_narrative(clusters, connections, period),
        cross_cluster_connections=connections,
    )
