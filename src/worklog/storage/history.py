"""Append-only JSONL history of generated summaries."""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from ..models import DateRange, HistoryEntry, WorkItem, WorkSummary
from ..utils.dates import parse_timestamp
from ..utils.noise import filter_noise_work_items
from .snapshots import item_from_record, item_to_record, resolve_data_dir

logger = logging.getLogger(__name__)

HISTORY_FILENAME = "history.jsonl"


def get_history_path(root_dir: str | Path | None = None) -> Path:
    return resolve_data_dir(root_dir) / HISTORY_FILENAME


def _generate_id(now: datetime) -> str:
    return f"{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:6]}"


def _serialize_entry(entry: HistoryEntry) -> str:
    return json.dumps({
        "id": entry.id,
        "timestamp": entry.timestamp.isoformat(),
        "dateRange": {
            "start": entry.date_range.start.isoformat(),
            "end": entry.date_range.end.isoformat(),
        },
        "sources": entry.sources,
        "items": [item_to_record(i) for i in entry.items],
    }, ensure_ascii=False)


def _deserialize_entry(data: dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        id=data["id"],
        timestamp=parse_timestamp(data["timestamp"]),
        date_range=DateRange(
            start=parse_timestamp(data["dateRange"]["start"]),
            end=parse_timestamp(data["dateRange"]["end"]),
        ),
        items=[item_from_record(r) for r in data.get("items", [])],
        sources=list(data.get("sources", [])),
    )


def save_to_history(
    summary: WorkSummary,
    root_dir: str | Path | None = None,
    now: datetime | None = None,
) -> HistoryEntry:
    """Append the summary's items (noise removed) as one history line."""
    now = now or datetime.now()
    items = filter_noise_work_items(summary.items)
    entry = HistoryEntry(
        id=_generate_id(now),
        timestamp=now,
        date_range=summary.date_range,
        items=items,
        sources=list(dict.fromkeys(i.source for i in items)),
    )

    path = get_history_path(root_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    # A previous writer may have left the last line unterminated
    prefix = ""
    if path.exists() and path.stat().st_size:
        with open(path, "rb") as f:
            f.seek(-1, 2)
            if f.read(1) != b"\n":
                prefix = "\n"
    with open(path, "a", encoding="utf-8") as f:
        f.write(prefix + _serialize_entry(entry) + "\n")

    logger.info(f"Saved history entry {entry.id} ({len(items)} items)")
    return entry


def load_history(root_dir: str | Path | None = None) -> list[HistoryEntry]:
    """All readable entries, oldest first. Corrupt lines are logged and skipped."""
    path = get_history_path(root_dir)
    if not path.exists():
        return []

    entries = []
    for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        try:
            entries.append(_deserialize_entry(json.loads(line)))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping unreadable history line {lineno} in {path}: {e}")
    return entries


def get_all_history_items(root_dir: str | Path | None = None) -> list[WorkItem]:
    """Every item from every history entry, in file order."""
    return [item for entry in load_history(root_dir) for item in entry.items]
