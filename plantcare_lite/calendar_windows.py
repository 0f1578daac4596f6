"""Week and month range calculation for calendar views - plantcare_lite."""

from __future__ import annotations

import datetime

from dateutil.relativedelta import relativedelta

MONDAY = 0
SUNDAY = 6


def _start_of_day(value: datetime.date | datetime.datetime) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        value = value.date()
    return datetime.datetime.combine(value, datetime.time.min)


def _end_of_day(value: datetime.date | datetime.datetime) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        value = value.date()
    return datetime.datetime.combine(value, datetime.time.max)


def week_window(
    reference: datetime.date | datetime.datetime,
    week_starts_on: int = MONDAY,
) -> tuple[datetime.datetime, datetime.datetime]:
    """Return the inclusive bounds of the week containing ``reference``.

    Args:
        reference: Any moment inside the week
        week_starts_on: First weekday, 0=Monday ... 6=Sunday

    Returns:
        (first day at 00:00, last day at 23:59:59.999999)
    """
    if not MONDAY <= week_starts_on <= SUNDAY:
        raise ValueError(f"week_starts_on must be 0..6, got {week_starts_on}")
    start = _start_of_day(reference)
    offset = (start.weekday() - week_starts_on) % 7
    first_day = start - datetime.timedelta(days=offset)
    return first_day, _end_of_day(first_day + datetime.timedelta(days=6))


def month_window(reference: datetime.date | datetime.datetime) -> tuple[datetime.datetime, datetime.datetime]:
    """Return the inclusive bounds of the calendar month containing ``reference``."""
    first_day = _start_of_day(reference).replace(day=1)
    last_day = first_day + relativedelta(months=1, days=-1)
    return first_day, _end_of_day(last_day)


def shift_week(reference: datetime.datetime, weeks: int) -> datetime.datetime:
    """Move a reference date by whole weeks (previous/next week navigation)."""
    return reference + datetime.timedelta(weeks=weeks)


def shift_month(reference: datetime.datetime, months: int) -> datetime.datetime:
    """Move a reference date by calendar months, clamping the day of month."""
    return reference + relativedelta(months=months)


def days_in_window(start: datetime.datetime, end: datetime.datetime) -> list[datetime.date]:
    if end < start:
        return []
    first, last = start.date(), end.date()
    return [first + datetime.timedelta(days=i) for i in range((last - first).days + 1)]


def is_same_week(
    a: datetime.date | datetime.datetime,
    b: datetime.date | datetime.datetime,
    week_starts_on: int = MONDAY,
) -> bool:
    return week_window(a, week_starts_on)[0] == week_window(b, week_starts_on)[0]
