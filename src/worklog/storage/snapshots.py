"""Per-period JSON snapshots of collected work items.

A snapshot stores the raw work items of one period (a day, a week, a month
or a quarter) so that summaries can be rebuilt later without re-reading the
sources. Clusters are never stored; they are recomputed from the items each
time a snapshot is rendered.

Layout under the data directory::

    daily/standup-2025-01-15.json
    weekly/standup-week-2025-01-13.json
    monthly/standup-month-2025-01.json
    quarterly/standup-quarter-2025-Q1.json
"""

import json
import logging
import re
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from ..models import DateRange, WorkItem, WorkSummary
from ..utils.dates import (
    end_of_day,
    end_of_month,
    end_of_quarter,
    format_date_range,
    get_month_label,
    get_quarter,
    get_quarter_label,
    parse_timestamp,
    start_of_day,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
SNAPSHOT_PERIODS = ("daily", "weekly", "monthly", "quarterly")

_FILENAME_PREFIXES = {
    "daily": "standup-",
    "weekly": "standup-week-",
    "monthly": "standup-month-",
    "quarterly": "standup-quarter-",
}

_KEY_PATTERNS = {
    "daily": r"\d{4}-\d{2}-\d{2}",
    "weekly": r"\d{4}-\d{2}-\d{2}",
    "monthly": r"\d{4}-\d{2}",
    "quarterly": r"\d{4}-Q[1-4]",
}

_FILENAME_RES = {
    period: re.compile(rf"^{re.escape(prefix)}({_KEY_PATTERNS[period]})\.json$")
    for period, prefix in _FILENAME_PREFIXES.items()
}


def default_data_dir() -> Path:
    return Path.home() / ".local" / "share" / "worklog"


def resolve_data_dir(root_dir: str | Path | None) -> Path:
    return Path(root_dir).expanduser() if root_dir else default_data_dir()


def _check_period(period: str) -> None:
    if period not in SNAPSHOT_PERIODS:
        raise ValueError(f"Unknown snapshot period: {period}. Use one of {', '.join(SNAPSHOT_PERIODS)}.")


def get_snapshots_dir(period: str, root_dir: str | Path | None = None) -> Path:
    _check_period(period)
    return resolve_data_dir(root_dir) / period


def get_snapshot_key(period: str, anchor: datetime) -> str:
    """Key naming the period that starts at ``anchor``."""
    _check_period(period)
    if period in ("daily", "weekly"):
        return f"{anchor:%Y-%m-%d}"
    if period == "monthly":
        return f"{anchor:%Y-%m}"
    return f"{anchor.year}-Q{get_quarter(anchor)}"


def get_snapshot_filename(period: str, key: str) -> str:
    _check_period(period)
    return f"{_FILENAME_PREFIXES[period]}{key}.json"


def get_snapshot_path(period: str, key: str, root_dir: str | Path | None = None) -> Path:
    return get_snapshots_dir(period, root_dir) / get_snapshot_filename(period, key)


def get_snapshot_date_range(period: str, key: str) -> DateRange:
    """Inclusive range covered by the snapshot ``key``."""
    _check_period(period)
    if not re.fullmatch(_KEY_PATTERNS[period], key):
        raise ValueError(f"Invalid {period} snapshot key: {key}")

    if period == "quarterly":
        year, quarter = key.split("-Q")
        start = datetime(int(year), 3 * (int(quarter) - 1) + 1, 1)
        return DateRange(start=start, end=end_of_quarter(start))

    if period == "monthly":
        start = datetime.strptime(key, "%Y-%m")
        return DateRange(start=start, end=end_of_month(start))

    start = datetime.strptime(key, "%Y-%m-%d")
    days = 6 if period == "weekly" else 0
    return DateRange(start=start, end=end_of_day(start + timedelta(days=days)))


def get_snapshot_label(period: str, key: str) -> str:
    """Human label for a snapshot, e.g. 'January 2025' or 'Q1 2025'."""
    date_range = get_snapshot_date_range(period, key)
    if period == "monthly":
        return get_month_label(date_range.start)
    if period == "quarterly":
        return get_quarter_label(date_range.start)
    return format_date_range(date_range)


def item_to_record(item: WorkItem) -> dict[str, Any]:
    record = {
        "source": item.source,
        "timestamp": item.timestamp.isoformat(),
        "title": item.title,
    }
    if item.description:
        record["description"] = item.description
    return record


def item_from_record(record: dict[str, Any]) -> WorkItem:
    return WorkItem(
        source=record["source"],
        timestamp=parse_timestamp(record["timestamp"]),
        title=record["title"],
        description=record.get("description"),
    )


def snapshot_from_summary(period: str, summary: WorkSummary) -> dict[str, Any]:
    return {
        "schemaVersion": SCHEMA_VERSION,
        "period": period,
        "dateRange": {
            "start": summary.date_range.start.isoformat(),
            "end": summary.date_range.end.isoformat(),
        },
        "generatedAt": summary.generated_at.isoformat(),
        "sources": list(summary.sources),
        "items": [item_to_record(i) for i in summary.items],
    }


def summary_from_snapshot(snapshot: dict[str, Any]) -> WorkSummary:
    """Rebuild a WorkSummary (without clusters) from stored snapshot data."""
    return WorkSummary(
        date_range=DateRange(
            start=parse_timestamp(snapshot["dateRange"]["start"]),
            end=parse_timestamp(snapshot["dateRange"]["end"]),
        ),
        items=[item_from_record(r) for r in snapshot.get("items", [])],
        sources=list(snapshot.get("sources", [])),
        generated_at=parse_timestamp(snapshot["generatedAt"]),
    )


def write_snapshot(period: str, summary: WorkSummary, root_dir: str | Path | None = None) -> tuple[str, Path]:
    """Store ``summary``'s items under the key of its start date.

    The file is written to a temporary name first and then moved into place,
    so readers never see a half-written snapshot. Returns ``(key, path)``.
    """
    key = get_snapshot_key(period, summary.date_range.start)
    path = get_snapshot_path(period, key, root_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(snapshot_from_summary(period, summary), indent=2, ensure_ascii=False) + "\n"
    tmp_path = path.parent / f".tmp-{path.name}-{time.time_ns()}"
    tmp_path.write_text(payload, encoding="utf-8")
    tmp_path.replace(path)

    logger.info(f"Wrote {period} snapshot {key} ({len(summary.items)} items) to {path}")
    return key, path


def load_snapshot(period: str, key: str, root_dir: str | Path | None = None) -> WorkSummary:
    path = get_snapshot_path(period, key, root_dir)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid snapshot JSON: {path}: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"Invalid snapshot JSON: {path}")
    if data.get("schemaVersion") != SCHEMA_VERSION:
        raise ValueError(f"Unsupported snapshot schemaVersion: {data.get('schemaVersion')}")

    return summary_from_snapshot(data)


def list_snapshot_keys(period: str, root_dir: str | Path | None = None) -> list[str]:
    """Keys of stored snapshots, newest first."""
    directory = get_snapshots_dir(period, root_dir)
    if not directory.is_dir():
        return []
    pattern = _FILENAME_RES[period]
    keys = [m.group(1) for p in directory.iterdir() if (m := pattern.match(p.name))]
    return sorted(keys, reverse=True)


def aggregate_daily_snapshots(
    start: datetime,
    end: datetime,
    root_dir: str | Path | None = None,
    now: datetime | None = None,
) -> WorkSummary:
    """Merge every daily snapshot between ``start`` and ``end`` (inclusive).

    Missing days are skipped. Items come back sorted by timestamp.
    """
    first = start_of_day(start)
    last = end_of_day(end)
    if first > last:
        raise ValueError("Start date must be <= end date")

    items: list[WorkItem] = []
    sources: list[str] = []
    cursor = first
    while cursor <= last:
        key = get_snapshot_key("daily", cursor)
        if get_snapshot_path("daily", key, root_dir).exists():
            day = load_snapshot("daily", key, root_dir)
            items.extend(day.items)
            sources.extend(s for s in day.sources if s not in sources)
        cursor += timedelta(days=1)

    items.sort(key=lambda i: i.timestamp)
    return WorkSummary(
        date_range=DateRange(start=first, end=last),
        items=items,
        sources=sources,
        generated_at=now or datetime.now(),
    )
