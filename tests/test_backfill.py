"""Tests for scheduled snapshot runs and backfill planning."""

import copy
from datetime import datetime

import pytest

from worklog.config import DEFAULT_CONFIG
from worklog.models import WorkItem
from worklog.scheduling.backfill import build_backfill_plan, execute_backfill_plan
from worklog.scheduling.run import previous_period_range, run_period
from worklog.sources.base import SourceReader
from worklog.storage.snapshots import get_snapshot_key, get_snapshot_path, load_snapshot
from worklog.utils.dates import is_within_range

# A Sunday
NOW = datetime(2026, 1, 4, 12)


class DayReader(SourceReader):
    """Returns one commit at 10:00 on the first day of whatever range it is asked for."""
    name = "git"

    def read(self, date_range, config):
        ts = date_range.start.replace(hour=10)
        return [WorkItem(source="git", timestamp=ts, title=f"Commit on {ts:%Y-%m-%d}")]


def _config(tmp_path):
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["data_dir"] = str(tmp_path)
    return config


# --- previous_period_range ---

def test_previous_period_ranges():
    now = datetime(2025, 1, 10, 12)
    assert previous_period_range("daily", now).start == datetime(2025, 1, 9)

    weekly = previous_period_range("weekly", now)
    assert weekly.start == datetime(2024, 12, 30)
    assert weekly.start.weekday() == 0

    assert previous_period_range("monthly", now).start == datetime(2024, 12, 1)
    assert previous_period_range("quarterly", datetime(2025, 2, 10, 12)).start == datetime(2024, 10, 1)


def test_previous_period_unknown():
    with pytest.raises(ValueError):
        previous_period_range("hourly", NOW)


def test_run_period_writes_snapshot(tmp_path):
    key, path = run_period("daily", _config(tmp_path), [DayReader()], now=datetime(2025, 1, 10, 12))

    assert key == "2025-01-09"
    assert path == get_snapshot_path("daily", "2025-01-09", tmp_path)
    stored = load_snapshot("daily", key, tmp_path)
    assert [i.title for i in stored.items] == ["Commit on 2025-01-09"]
    assert stored.sources == ["git"]


# --- build_backfill_plan ---

def test_default_plan_covers_four_weeks_and_one_month():
    plan = build_backfill_plan(now=NOW, weeks=4, months=1, daily=True, weekly=True, monthly=True, quarterly=False)

    daily = [p for p in plan if p.period == "daily"]
    weekly = [p for p in plan if p.period == "weekly"]
    monthly = [p for p in plan if p.period == "monthly"]

    assert len(daily) == 28
    assert daily[0].expected_key == "2025-12-07"
    assert daily[-1].expected_key == "2026-01-03"
    assert [w.expected_key for w in weekly] == ["2025-12-01", "2025-12-08", "2025-12-15", "2025-12-22"]
    assert [m.expected_key for m in monthly] == ["2025-12"]


def test_range_plan_only_includes_completed_periods():
    plan = build_backfill_plan(
        now=NOW, weeks=4, months=1, daily=True, weekly=True, monthly=True, quarterly=False,
        since=datetime(2025, 12, 29), until=datetime(2026, 1, 3),
    )

    assert [p.expected_key for p in plan if p.period == "daily"] == [
        "2025-12-29", "2025-12-30", "2025-12-31", "2026-01-01", "2026-01-02", "2026-01-03",
    ]
    assert [p for p in plan if p.period == "weekly"] == []
    assert [p.expected_key for p in plan if p.period == "monthly"] == ["2025-12"]


def test_range_plan_quarter():
    plan = build_backfill_plan(
        now=NOW, daily=False, weekly=False, monthly=False, quarterly=True,
        since=datetime(2025, 9, 15), until=datetime(2026, 1, 3),
    )
    # Q3 started before --since but ends inside the range
    assert [p.expected_key for p in plan] == ["2025-Q3", "2025-Q4"]


def test_default_plan_previous_quarter():
    plan = build_backfill_plan(now=NOW, daily=False, weekly=False, monthly=False, quarterly=True)
    assert [p.expected_key for p in plan] == ["2025-Q4"]
    assert plan[0].now == datetime(2026, 1, 1, 12)


def test_plan_run_times_cover_the_planned_period():
    plan = build_backfill_plan(now=NOW, weeks=1, months=2, quarterly=True)
    for item in plan:
        covered = previous_period_range(item.period, item.now)
        assert get_snapshot_key(item.period, covered.start) == item.expected_key
        assert not is_within_range(item.now, covered)


def test_plan_paths_use_root_dir(tmp_path):
    plan = build_backfill_plan(now=NOW, weeks=1, weekly=False, monthly=False, root_dir=tmp_path)
    assert plan[0].expected_path == tmp_path / "daily" / "standup-2025-12-28.json"


# --- execute_backfill_plan ---

def test_execute_writes_missing_and_skips_existing(tmp_path):
    config = _config(tmp_path)
    plan = build_backfill_plan(now=NOW, weeks=1, weekly=False, monthly=False, root_dir=tmp_path)
    run_period("daily", config, [DayReader()], now=plan[0].now, root_dir=tmp_path)

    result = execute_backfill_plan(plan, config, [DayReader()])

    assert result.planned == 7
    assert result.skipped == 1
    assert result.written == 6
    assert result.errors == 0
    assert all(p.expected_path.exists() for p in plan)
    assert [r.status for r in result.results][:2] == ["skipped", "written"]


def test_execute_overwrite_and_dry_run(tmp_path):
    config = _config(tmp_path)
    plan = build_backfill_plan(now=NOW, weeks=1, weekly=False, monthly=False, root_dir=tmp_path)

    dry = execute_backfill_plan(plan, config, [DayReader()], dry_run=True)
    assert (dry.skipped, dry.written) == (7, 0)
    assert not any(p.expected_path.exists() for p in plan)

    execute_backfill_plan(plan, config, [DayReader()])
    again = execute_backfill_plan(plan, config, [DayReader()], overwrite=True)
    assert again.written == 7


def test_execute_records_errors_and_continues(tmp_path):
    plan = build_backfill_plan(now=NOW, weeks=1, weekly=False, monthly=False, root_dir=tmp_path)
    calls = []

    def flaky(period, config, readers, now=None, root_dir=None):
        calls.append(now)
        if len(calls) == 2:
            raise RuntimeError("disk full")

    result = execute_backfill_plan(plan, _config(tmp_path), [], runner=flaky)

    assert len(calls) == 7
    assert result.errors == 1
    assert result.written == 6
    assert result.results[1].status == "error"
    assert result.results[1].error == "disk full"
