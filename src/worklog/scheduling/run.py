"""Collect the previous period's work items and store them as a snapshot."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from ..models import DateRange
from ..sources.base import SourceReader
from ..storage.snapshots import SNAPSHOT_PERIODS, write_snapshot
from ..summary.report import build_work_summary, collect_work_items
from ..utils.dates import parse_date_range

logger = logging.getLogger(__name__)


def previous_period_range(period: str, now: datetime | None = None) -> DateRange:
    """The last complete day, week (Mon-Sun), month or quarter before ``now``."""
    if period not in SNAPSHOT_PERIODS:
        raise ValueError(f"Unknown snapshot period: {period}")
    if period == "daily":
        return parse_date_range(yesterday=True, reference=now)
    return parse_date_range(
        week=period == "weekly",
        month=period == "monthly",
        quarter=period == "quarterly",
        last=True,
        reference=now,
    )


def run_period(
    period: str,
    config: dict[str, Any],
    readers: list[SourceReader],
    now: datetime | None = None,
    root_dir: str | Path | None = None,
) -> tuple[str, Path]:
    """Snapshot the period before ``now``. Returns ``(key, path)``."""
    date_range = previous_period_range(period, now)
    items = collect_work_items(readers, date_range, config)
    summary = build_work_summary(items, date_range, config, smart=False, now=now)
    key, path = write_snapshot(period, summary, root_dir or config.get("data_dir"))
    logger.info(f"{period} run for {key}: {len(items)} item(s)")
    return key, path
