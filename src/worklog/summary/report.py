"""Assemble a WorkSummary from source readers and the clustering core."""

import logging
from datetime import datetime
from typing import Any

from ..config import build_tokenizer
from ..models import DateRange, WorkItem, WorkSummary
from ..sources.base import SourceReader
from ..utils.dates import get_period_type
from ..utils.noise import filter_noise_work_items
from .narrative import build_smart_summary, period_noun

logger = logging.getLogger(__name__)


def collect_work_items(
    readers: list[SourceReader],
    date_range: DateRange,
    config: dict[str, Any],
) -> list[WorkItem]:
    """Read every source, dropping noise and sorting by timestamp.

    A failing reader is logged and skipped so the rest still contribute.
    """
    items: list[WorkItem] = []
    for reader in readers:
        try:
            found = reader.read(date_range, config)
        except Exception as e:
            logger.warning(f"Failed to read {reader.name}: {e}")
            continue
        logger.info(f"{reader.name}: {len(found)} item(s)")
        items.extend(found)

    if config.get("filter_noise", True):
        before = len(items)
        items = filter_noise_work_items(items)
        if before != len(items):
            logger.info(f"Filtered {before - len(items)} noise item(s)")

    items.sort(key=lambda i: i.timestamp)
    return items


def active_sources(items: list[WorkItem]) -> list[str]:
    """Distinct sources in first-seen order."""
    return list(dict.fromkeys(item.source for item in items))


def build_work_summary(
    items: list[WorkItem],
    date_range: DateRange,
    config: dict[str, Any],
    smart: bool = True,
    now: datetime | None = None,
) -> WorkSummary:
    """Wrap items in a WorkSummary, clustering them unless ``smart`` is off."""
    summary = WorkSummary(
        date_range=date_range,
        items=items,
        sources=active_sources(items),
        generated_at=now or datetime.now(),
    )
    if smart:
        analysis = config.get("analysis", {})
        summary.smart_summary = build_smart_summary(
            items,
            threshold=analysis.get("threshold", 0.3),
            tokenizer=build_tokenizer(config),
            top_k=analysis.get("top_keywords", 5),
            period=period_noun(get_period_type(date_range)),
        )
    return summary
