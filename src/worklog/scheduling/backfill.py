"""Plan and run snapshot backfills for past periods."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable

from ..sources.base import SourceReader
from ..storage.snapshots import get_snapshot_key, get_snapshot_path
from ..utils.dates import (
    end_of_month,
    end_of_quarter,
    shift_months,
    start_of_day,
    start_of_month,
    start_of_quarter,
    start_of_week,
)
from .run import run_period

logger = logging.getLogger(__name__)


@dataclass
class BackfillPlanItem:
    """One snapshot to produce: ``now`` is the moment a scheduled run would have happened."""
    period: str
    now: datetime
    expected_key: str
    expected_path: Path
    root_dir: str | Path | None = None


@dataclass
class BackfillOutcome:
    period: str
    expected_path: Path
    status: str  # written | skipped | error
    error: str | None = None


@dataclass
class BackfillResult:
    planned: int = 0
    written: int = 0
    skipped: int = 0
    errors: int = 0
    results: list[BackfillOutcome] = field(default_factory=list)


def _at_noon(dt: datetime) -> datetime:
    return dt.replace(hour=12, minute=0, second=0, microsecond=0)


def _plan_item(period: str, period_start: datetime, run_at: datetime,
               root_dir: str | Path | None) -> BackfillPlanItem:
    key = get_snapshot_key(period, period_start)
    return BackfillPlanItem(
        period=period,
        now=_at_noon(run_at),
        expected_key=key,
        expected_path=get_snapshot_path(period, key, root_dir),
        root_dir=root_dir,
    )


def build_backfill_plan(
    now: datetime | None = None,
    weeks: int = 4,
    months: int = 1,
    daily: bool = True,
    weekly: bool = True,
    monthly: bool = True,
    quarterly: bool = False,
    since: datetime | None = None,
    until: datetime | None = None,
    root_dir: str | Path | None = None,
) -> list[BackfillPlanItem]:
    """List the snapshots needed to cover past periods.

    Without ``since``/``until`` the plan covers the last ``weeks`` weeks of
    days and weeks, the last ``months`` months and the previous quarter.
    With a range, only periods that end inside it are included (``until``
    defaults to yesterday, ``since`` to ``until``).
    """
    now = now or datetime.now()
    plan: list[BackfillPlanItem] = []

    if since or until:
        end = start_of_day(until or now - timedelta(days=1))
        start = start_of_day(since or end)

        if daily:
            cursor = start
            while cursor <= end:
                plan.append(_plan_item("daily", cursor, cursor + timedelta(days=1), root_dir))
                cursor += timedelta(days=1)

        if weekly:
            cursor = start_of_week(start)
            while cursor <= start_of_week(end):
                if cursor + timedelta(days=6) <= end:
                    plan.append(_plan_item("weekly", cursor, cursor + timedelta(weeks=1), root_dir))
                cursor += timedelta(weeks=1)

        if monthly:
            cursor = start_of_month(start)
            while cursor <= start_of_month(end):
                if end_of_month(cursor) <= end:
                    plan.append(_plan_item("monthly", cursor, shift_months(cursor, 1), root_dir))
                cursor = shift_months(cursor, 1)

        if quarterly:
            cursor = start_of_quarter(start)
            while cursor <= start_of_quarter(end):
                if end_of_quarter(cursor) <= end:
                    plan.append(_plan_item("quarterly", cursor, shift_months(cursor, 3), root_dir))
                cursor = shift_months(cursor, 3)

        return plan

    yesterday = start_of_day(now) - timedelta(days=1)

    if daily:
        days = max(weeks * 7, 1)
        cursor = yesterday - timedelta(days=days - 1)
        while cursor <= yesterday:
            plan.append(_plan_item("daily", cursor, cursor + timedelta(days=1), root_dir))
            cursor += timedelta(days=1)

    if weekly:
        this_week = start_of_week(now)
        for i in range(weeks, 0, -1):
            week_start = this_week - timedelta(weeks=i)
            plan.append(_plan_item("weekly", week_start, week_start + timedelta(weeks=1), root_dir))

    if monthly:
        this_month = start_of_month(now)
        for i in range(months, 0, -1):
            month_start = shift_months(this_month, -i)
            plan.append(_plan_item("monthly", month_start, shift_months(month_start, 1), root_dir))

    if quarterly:
        this_quarter = start_of_quarter(now)
        plan.append(_plan_item("quarterly", shift_months(this_quarter, -3), this_quarter, root_dir))

    return plan


def execute_backfill_plan(
    plan: list[BackfillPlanItem],
    config: dict[str, Any],
    readers: list[SourceReader],
    skip_existing: bool = True,
    overwrite: bool = False,
    dry_run: bool = False,
    runner: Callable[..., Any] = run_period,
) -> BackfillResult:
    """Run every plan item, counting written, skipped and failed snapshots.

    A failing item is recorded and the rest of the plan still runs.
    """
    result = BackfillResult(planned=len(plan))

    for item in plan:
        if (skip_existing and not overwrite and item.expected_path.exists()) or dry_run:
            result.skipped += 1
            result.results.append(BackfillOutcome(item.period, item.expected_path, "skipped"))
            continue

        try:
            runner(item.period, config, readers, now=item.now, root_dir=item.root_dir)
        except Exception as e:
            logger.warning(f"Backfill {item.period} {item.expected_key} failed: {e}")
            result.errors += 1
            result.results.append(BackfillOutcome(item.period, item.expected_path, "error", str(e)))
            continue

        result.written += 1
        result.results.append(BackfillOutcome(item.period, item.expected_path, "written"))

    return result
