"""Pause/resume filtering for care task occurrences - plantcare_lite."""

from __future__ import annotations

import datetime
import logging

from .anchor_time import parse_timestamp
from .care_exceptions import AnchorDateError
from .care_models import CareTaskRule

logger = logging.getLogger(__name__)


class ActivityFilter:
    """Decides whether a task is live on a given occurrence date.

    A paused task with a resume date is a "scheduled resume": it is active
    from the resume date onward even though ``is_paused`` is still True.
    A paused task without a (readable) resume date is never active.
    """

    def active_since(self, rule: CareTaskRule) -> datetime.datetime | None:
        """Return the earliest instant the task is active.

        Returns:
            datetime.min for tasks that are not paused, the resume date for
            paused tasks scheduled to resume, or None for tasks that are
            paused indefinitely
        """
        if not rule.is_paused:
            return datetime.datetime.min
        if not rule.resume_date:
            return None
        try:
            return parse_timestamp(rule.resume_date)
        except AnchorDateError as e:
            logger.warning("Paused task %s has an unreadable resume date; treating as paused: %s", rule.id, e)
            return None

    def is_active(self, rule: CareTaskRule, occurrence: datetime.datetime) -> bool:
        """Pure predicate applied to every candidate occurrence."""
        since = self.active_since(rule)
        return since is not None and occurrence >= since

    def can_be_active_in(self, rule: CareTaskRule, range_end: datetime.datetime) -> bool:
        """Cheap rule-level check: can any occurrence up to ``range_end`` be active?"""
        since = self.active_since(rule)
        return since is not None and since <= range_end
