"""Tests for date range parsing."""

from datetime import datetime, timedelta, timezone

import pytest

from worklog.models import DateRange
from worklog.utils.dates import (
    end_of_month,
    end_of_quarter,
    format_date_range,
    get_month_label,
    get_period_type,
    get_quarter,
    get_quarter_label,
    is_within_range,
    parse_date_input,
    parse_date_range,
    parse_timestamp,
    shift_months,
    start_of_quarter,
    start_of_week,
    to_local_naive,
)

# A Wednesday
REF = datetime(2025, 1, 15, 12, 30)
END_OF_DAY = timedelta(hours=23, minutes=59, seconds=59, microseconds=999999)


def _day(y, m, d):
    return datetime(y, m, d)


def test_default_is_today():
    r = parse_date_range(reference=REF)
    assert r.start == _day(2025, 1, 15)
    assert r.end == _day(2025, 1, 15) + END_OF_DAY


def test_yesterday():
    r = parse_date_range(yesterday=True, reference=REF)
    assert r.start == _day(2025, 1, 14)


def test_explicit_date_wins():
    r = parse_date_range("2025-01-10", week=True, reference=REF)
    assert r.start == _day(2025, 1, 10)
    assert r.end == _day(2025, 1, 10) + END_OF_DAY


def test_week_starts_monday():
    r = parse_date_range(week=True, reference=REF)
    assert r.start == _day(2025, 1, 13)
    assert r.end == _day(2025, 1, 19) + END_OF_DAY


def test_last_week():
    r = parse_date_range(week=True, last=True, reference=REF)
    assert r.start == _day(2025, 1, 6)
    assert r.end == _day(2025, 1, 12) + END_OF_DAY


def test_month_and_last_month():
    r = parse_date_range(month=True, reference=REF)
    assert r.start == _day(2025, 1, 1)
    assert r.end == _day(2025, 1, 31) + END_OF_DAY

    r = parse_date_range(month=True, last=True, reference=REF)
    assert r.start == _day(2024, 12, 1)
    assert r.end == _day(2024, 12, 31) + END_OF_DAY


def test_last_month_clamps_day():
    r = parse_date_range(month=True, last=True, reference=datetime(2025, 3, 31))
    assert r.start == _day(2025, 2, 1)
    assert r.end == _day(2025, 2, 28) + END_OF_DAY


def test_quarter_and_last_quarter():
    r = parse_date_range(quarter=True, reference=REF)
    assert r.start == _day(2025, 1, 1)
    assert r.end == _day(2025, 3, 31) + END_OF_DAY

    r = parse_date_range(quarter=True, last=True, reference=REF)
    assert r.start == _day(2024, 10, 1)
    assert r.end == _day(2024, 12, 31) + END_OF_DAY


def test_weekday_names():
    assert parse_date_input("mon", REF) == _day(2025, 1, 13)
    assert parse_date_input("Friday", REF) == _day(2025, 1, 10)
    # Never resolves to the reference day itself
    assert parse_date_input("wed", REF) == _day(2025, 1, 8)


def test_invalid_date():
    with pytest.raises(ValueError, match="Invalid date format"):
        parse_date_input("someday", REF)


def test_period_types():
    assert get_period_type(parse_date_range(reference=REF)) == "daily"
    assert get_period_type(parse_date_range(week=True, reference=REF)) == "weekly"
    assert get_period_type(parse_date_range(month=True, reference=REF)) == "monthly"
    assert get_period_type(parse_date_range(quarter=True, reference=REF)) == "quarterly"


def test_is_within_range():
    r = parse_date_range(reference=REF)
    assert is_within_range(REF, r)
    assert not is_within_range(REF + timedelta(days=1), r)


def test_format_date_range():
    assert format_date_range(parse_date_range(reference=REF)) == "Wed, Jan 15, 2025"
    week = parse_date_range(week=True, reference=REF)
    assert format_date_range(week) == "Mon, Jan 13, 2025 - Sun, Jan 19, 2025"


def test_labels():
    assert get_quarter_label(REF) == "Q1 2025"
    assert get_quarter_label(datetime(2025, 11, 2)) == "Q4 2025"
    assert get_month_label(REF) == "January 2025"


def test_timestamps_become_naive():
    aware = datetime(2025, 1, 15, 10, tzinfo=timezone.utc)
    assert to_local_naive(aware).tzinfo is None
    assert parse_timestamp("2025-01-15T10:00:00Z") == to_local_naive(aware)
    assert parse_timestamp("2025-01-15T10:00:00") == datetime(2025, 1, 15, 10)


def test_date_range_is_inclusive():
    r = DateRange(start=_day(2025, 1, 1), end=_day(2025, 1, 2))
    assert is_within_range(r.start, r) and is_within_range(r.end, r)


def test_period_boundaries():
    assert start_of_week(datetime(2026, 1, 4, 18)) == datetime(2025, 12, 29)
    assert get_quarter(datetime(2025, 12, 31)) == 4
    assert start_of_quarter(datetime(2025, 8, 20, 9)) == datetime(2025, 7, 1)
    assert end_of_quarter(datetime(2025, 8, 20)).date() == datetime(2025, 9, 30).date()
    assert end_of_month(datetime(2024, 2, 10)).day == 29


def test_shift_months_clamps_day():
    assert shift_months(datetime(2025, 3, 31), -1) == datetime(2025, 2, 28)
    assert shift_months(datetime(2025, 11, 15), 3) == datetime(2026, 2, 15)
