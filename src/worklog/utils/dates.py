"""Date range parsing and period labels."""

import calendar
from datetime import datetime, time, timedelta

from ..models import DateRange

WEEKDAYS = {
    "mon": 0, "monday": 0,
    "tue": 1, "tues": 1, "tuesday": 1,
    "wed": 2, "weds": 2, "wednesday": 2,
    "thu": 3, "thurs": 3, "thursday": 3,
    "fri": 4, "friday": 4,
    "sat": 5, "saturday": 5,
    "sun": 6, "sunday": 6,
}


def start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.min)


def end_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.max)


def shift_months(dt: datetime, months: int) -> datetime:
    """Move ``dt`` by whole months, clamping the day to the target month."""
    index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def get_quarter(dt: datetime) -> int:
    return (dt.month - 1) // 3 + 1


def start_of_week(dt: datetime) -> datetime:
    """Monday 00:00 of ``dt``'s week."""
    return start_of_day(dt - timedelta(days=dt.weekday()))


def start_of_month(dt: datetime) -> datetime:
    return start_of_day(dt.replace(day=1))


def end_of_month(dt: datetime) -> datetime:
    return end_of_day(dt.replace(day=calendar.monthrange(dt.year, dt.month)[1]))


def start_of_quarter(dt: datetime) -> datetime:
    return start_of_day(dt.replace(month=3 * (get_quarter(dt) - 1) + 1, day=1))


def end_of_quarter(dt: datetime) -> datetime:
    return shift_months(start_of_quarter(dt), 3) - timedelta(microseconds=1)


def _previous_weekday(target: int, reference: datetime) -> datetime:
    """Most recent ``target`` weekday strictly before ``reference``'s day."""
    delta = (reference.weekday() - target) % 7 or 7
    return start_of_day(reference) - timedelta(days=delta)


def parse_date_input(value: str, reference: datetime | None = None) -> datetime:
    """Parse an ISO date or a weekday name relative to ``reference``."""
    reference = reference or datetime.now()
    text = value.strip()

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    weekday = WEEKDAYS.get(text.lower())
    if weekday is not None:
        return _previous_weekday(weekday, reference)

    raise ValueError(f"Invalid date format: {value}. Use YYYY-MM-DD or weekday name.")


def parse_date_range(
    date_str: str | None = None,
    yesterday: bool = False,
    week: bool = False,
    month: bool = False,
    quarter: bool = False,
    last: bool = False,
    reference: datetime | None = None,
) -> DateRange:
    """Resolve CLI-style period flags into a concrete DateRange.

    An explicit ``date_str`` wins over every flag. ``last`` moves the reference
    back one unit of the selected period (one day when no period is set).
    Weeks start on Monday.
    """
    now = reference or datetime.now()

    if date_str:
        parsed = parse_date_input(date_str, now)
        return DateRange(start=start_of_day(parsed), end=end_of_day(parsed))

    if last:
        if quarter:
            now = shift_months(now, -3)
        elif week:
            now = now - timedelta(weeks=1)
        elif month:
            now = shift_months(now, -1)
        else:
            now = now - timedelta(days=1)

    if yesterday:
        day = now - timedelta(days=1)
        return DateRange(start=start_of_day(day), end=end_of_day(day))

    if quarter:
        return DateRange(start=start_of_quarter(now), end=end_of_quarter(now))

    if week:
        start = start_of_week(now)
        return DateRange(start=start, end=end_of_day(start + timedelta(days=6)))

    if month:
        return DateRange(start=start_of_month(now), end=end_of_month(now))

    return DateRange(start=start_of_day(now), end=end_of_day(now))


def is_within_range(timestamp: datetime, date_range: DateRange) -> bool:
    return date_range.start <= timestamp <= date_range.end


def _format_day(dt: datetime) -> str:
    return f"{dt:%a, %b} {dt.day}, {dt.year}"


def format_date_range(date_range: DateRange) -> str:
    """'Wed, Jan 15, 2025' for one day, otherwise 'start - end'."""
    start = _format_day(date_range.start)
    end = _format_day(date_range.end)
    if start == end:
        return start
    return f"{start} - {end}"


def get_period_type(date_range: DateRange) -> str:
    """Classify a range as daily, weekly, monthly or quarterly."""
    days = (date_range.end - date_range.start).days
    if days <= 1:
        return "daily"
    if days <= 7:
        return "weekly"
    if days <= 31:
        return "monthly"
    return "quarterly"


def get_quarter_label(dt: datetime) -> str:
    return f"Q{get_quarter(dt)} {dt.year}"


def get_month_label(dt: datetime) -> str:
    return f"{dt:%B} {dt.year}"


def to_local_naive(dt: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into naive local time."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_local_naive(datetime.fromisoformat(text))
