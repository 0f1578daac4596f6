"""Current-time provider for plantcare_lite.

All scheduling happens in naive local wall-clock time. ``now_local()`` is the
single place the package asks for "now", so tests can freeze it with the
PLANTCARE_TEST_TIME environment variable.
"""

from __future__ import annotations

import datetime
import logging
import os

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

TEST_TIME_ENV = "PLANTCARE_TEST_TIME"


def now_local() -> datetime.datetime:
    """Return the current local time as a naive datetime.

    Can be overridden for testing via PLANTCARE_TEST_TIME.
    Format: ISO 8601 datetime string (e.g., "2024-01-03T08:20:00").
    Aware override values are converted to local wall-clock time.
    """
    test_time = os.environ.get(TEST_TIME_ENV)
    if test_time:
        try:
            dt = date_parser.isoparse(test_time)
            if dt.tzinfo is not None:
                return dt.astimezone().replace(tzinfo=None)
            return dt
        except (ValueError, OverflowError) as e:
            logger.warning("Failed to parse %s=%r: %s", TEST_TIME_ENV, test_time, e)

    return datetime.datetime.now()


def today_local() -> datetime.date:
    return now_local().date()
