"""On-disk storage for work item snapshots and summary history."""

from .history import get_all_history_items, get_history_path, load_history, save_to_history
from .snapshots import (
    SNAPSHOT_PERIODS,
    aggregate_daily_snapshots,
    get_snapshot_date_range,
    get_snapshot_key,
    get_snapshot_label,
    get_snapshot_path,
    list_snapshot_keys,
    load_snapshot,
    write_snapshot,
)

__all__ = [
    "SNAPSHOT_PERIODS",
    "aggregate_daily_snapshots",
    "get_all_history_items",
    "get_history_path",
    "get_snapshot_date_range",
    "get_snapshot_key",
    "get_snapshot_label",
    "get_snapshot_path",
    "list_snapshot_keys",
    "load_history",
    "load_snapshot",
    "save_to_history",
    "write_snapshot",
]
