"""Data models used throughout worklog."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

SOURCE_TYPES = ("opencode", "claude", "codex", "factory", "git", "github")


@dataclass(frozen=True)
class WorkItem:
    """A single unit of recorded work from one source."""
    source: str  # one of SOURCE_TYPES
    timestamp: datetime
    title: str
    description: str | None = None
    metadata: dict[str, Any] | None = field(default=None, compare=False, hash=False)


@dataclass
class DateRange:
    """Inclusive time window a summary covers."""
    start: datetime
    end: datetime


@dataclass
class Cluster:
    """A thematic group of work items."""
    id: str
    items: list[WorkItem]
    keywords: list[str] = field(default_factory=list)
    theme: str = ""
    coherence_score: float = 1.0


@dataclass
class CrossClusterConnection:
    """Keyword overlap between two clusters."""
    from_id: str
    to_id: str
    relationship: str
    shared_keywords: list[str] = field(default_factory=list)


@dataclass
class SmartSummary:
    """Clusters, their connections, and a prose narrative."""
    clusters: list[Cluster]
    narrative: str
    cross_cluster_connections: list[CrossClusterConnection] = field(default_factory=list)


@dataclass
class WorkSummary:
    """Everything a formatter needs to render a standup."""
    date_range: DateRange
    items: list[WorkItem]
    sources: list[str]
    generated_at: datetime = field(default_factory=datetime.now)
    smart_summary: SmartSummary | None = None
    llm_summary: str | None = None


@dataclass
class HistoryEntry:
    """One saved run in the history log."""
    id: str
    timestamp: datetime
    date_range: DateRange
    items: list[WorkItem]
    sources: list[str]
