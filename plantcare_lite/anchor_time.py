"""Anchor date parsing and time-of-day normalization - plantcare_lite.

Every point the expander compares (anchor, stepped occurrences, resume
dates) goes through this module so that same-day/same-time comparisons
and range boundary checks see identically normalized values.
"""

import logging
import re
from datetime import date, datetime, time
from typing import Optional, Union

from dateutil import parser as date_parser

from .care_exceptions import AnchorDateError
from .care_models import CareTaskRule

logger = logging.getLogger(__name__)

ALL_DAY = "all day"

_TIME_OF_DAY_RE = re.compile(r"^(\d{2}):(\d{2})$")


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local wall-clock datetime.

    Offset-aware values ("2024-01-01T09:00:00.000Z") are converted to the
    local zone before the offset is dropped, matching how the app displays
    them.

    Raises:
        AnchorDateError: Value is absent or not ISO-8601
    """
    if value is None or not str(value).strip():
        raise AnchorDateError("Missing timestamp")
    try:
        parsed = date_parser.isoparse(str(value).strip())
    except (ValueError, OverflowError) as e:
        raise AnchorDateError(f"Invalid ISO-8601 timestamp {value!r}: {e}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_time_of_day(time_of_day: Optional[str]) -> Optional[time]:
    """Return the wall-clock time for an ``HH:MM`` value, None for all-day.

    Anything that is not a valid ``HH:MM`` (including "All day" and absent
    values) means the task has no specific time.
    """
    if not time_of_day:
        return None
    value = time_of_day.strip()
    if value.lower() == ALL_DAY:
        return None
    match = _TIME_OF_DAY_RE.match(value)
    if not match:
        logger.debug("Ignoring malformed time of day %r; treating as all day", time_of_day)
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        logger.debug("Ignoring out-of-range time of day %r; treating as all day", time_of_day)
        return None
    return time(hours, minutes)


def is_all_day(time_of_day: Optional[str]) -> bool:
    return parse_time_of_day(time_of_day) is None


def apply_time_of_day(day: Union[date, datetime], time_of_day: Optional[str]) -> datetime:
    """Combine a calendar date with a task's time of day.

    All-day tasks are normalized to midnight; timed tasks get exactly
    HH:MM with seconds and microseconds zeroed.
    """
    if isinstance(day, datetime):
        day = day.date()
    wall_time = parse_time_of_day(time_of_day)
    return datetime.combine(day, wall_time or time.min)


def anchor_for(rule: CareTaskRule) -> Optional[datetime]:
    """Return the normalized anchor occurrence of a task, or None.

    A task without a readable anchor due date cannot be expanded; the
    failure is logged and the caller skips the task.
    """
    try:
        anchor_date = parse_timestamp(rule.anchor_due_date)
    except AnchorDateError as e:
        logger.warning("Invalid or missing anchor due date for task %s: %s", rule.id, e)
        return None
    return apply_time_of_day(anchor_date, rule.time_of_day)
