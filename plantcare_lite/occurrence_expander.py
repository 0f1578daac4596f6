"""Occurrence expansion for recurring care tasks - plantcare_lite.

Expands a FrequencyRule around an anchor occurrence into every concrete
occurrence inside an inclusive date range. Point ``k`` of a series is
``anchor + k * step``, always computed from the anchor so month-end
clamping never accumulates (Jan 31 -> Feb 29 -> Mar 31, not Mar 29).
"""

import functools
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from .frequency_rule import FrequencyRule

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)


@dataclass
class ExpanderConfig:
    """Configuration for occurrence expansion."""

    # Extra iterations allowed per walk on top of the range-derived bound
    iteration_safety_margin: int = 2
    enable_expansion_cache: bool = True

    @classmethod
    def from_settings(cls, settings: Any) -> "ExpanderConfig":
        """Extract expansion settings from any settings object (or None)."""
        return cls(
            iteration_safety_margin=max(0, int(getattr(settings, "iteration_safety_margin", 2))),
            enable_expansion_cache=bool(getattr(settings, "enable_expansion_cache", True)),
        )


@dataclass
class ExpansionResult:
    """Occurrences of one series inside a range.

    ``truncated`` is True when a walk hit its iteration cap while points
    were still inside the range, i.e. the set may be incomplete.
    """

    occurrences: set[datetime] = field(default_factory=set)
    truncated: bool = False


def iteration_cap(rule: FrequencyRule, range_start: datetime, range_end: datetime, margin: int = 2) -> int:
    """Upper bound on the points one walk may visit for this range.

    A series cannot place more than ``span / min_step + 1`` points in the
    range; one more visit is needed to see the walk leave it.
    """
    span = max(range_end - range_start, timedelta(0))
    min_step_days = max(rule.min_step_days, 1)
    return math.floor(span / (_ONE_DAY * min_step_days)) + 2 + max(margin, 0)


def _point(anchor: datetime, rule: FrequencyRule, k: int) -> Optional[datetime]:
    """Return point ``k`` of the series, None past the datetime limits."""
    try:
        return anchor + rule.step(k)
    except (ValueError, OverflowError):
        return None


def _estimate_index(anchor: datetime, rule: FrequencyRule, target: datetime) -> int:
    """Cheap estimate of the series index closest to ``target``."""
    unit = rule.step(1)
    if unit.days:
        return (target - anchor) // timedelta(days=unit.days)
    months_per_step = unit.years * 12 + unit.months
    month_diff = (target.year - anchor.year) * 12 + (target.month - anchor.month)
    return month_diff // months_per_step


def _first_index_at_or_after(anchor: datetime, rule: FrequencyRule, target: datetime) -> Optional[int]:
    """Smallest k with point(k) >= target; None if it cannot be represented."""
    k = _estimate_index(anchor, rule, target)
    while True:
        current = _point(anchor, rule, k)
        if current is None:
            if k > 0:
                return None
            # Below datetime.min; later points move back toward the anchor
            k += 1
            continue
        if current >= target:
            break
        k += 1
    while True:
        previous = _point(anchor, rule, k - 1)
        if previous is None or previous < target:
            return k
        k -= 1


def _last_index_at_or_before(anchor: datetime, rule: FrequencyRule, target: datetime) -> Optional[int]:
    """Largest k with point(k) <= target; None if it cannot be represented."""
    k = _estimate_index(anchor, rule, target)
    while True:
        current = _point(anchor, rule, k)
        if current is None:
            if k < 0:
                return None
            k -= 1
            continue
        if current <= target:
            break
        k -= 1
    while True:
        following = _point(anchor, rule, k + 1)
        if following is None or following > target:
            return k
        k += 1


def _walk(
    anchor: datetime,
    rule: FrequencyRule,
    start_index: int,
    direction: int,
    range_start: datetime,
    range_end: datetime,
    cap: int,
) -> tuple[set[datetime], bool]:
    """Visit points from ``start_index`` in ``direction`` until the range is left."""
    found: set[datetime] = set()
    k = start_index
    for _ in range(cap):
        current = _point(anchor, rule, k)
        if current is None or current > range_end or current < range_start:
            return found, False
        found.add(current)
        k += direction

    # Cap reached: only a truncation if the next point is still in range
    current = _point(anchor, rule, k)
    truncated = current is not None and range_start <= current <= range_end
    return found, truncated


def _expand(
    rule: FrequencyRule,
    anchor: datetime,
    range_start: datetime,
    range_end: datetime,
    margin: int,
) -> tuple[frozenset[datetime], bool]:
    if range_start > range_end:
        return frozenset(), False

    occurrences: set[datetime] = set()
    if range_start <= anchor <= range_end:
        occurrences.add(anchor)

    if rule.is_ad_hoc:
        return frozenset(occurrences), False

    cap = iteration_cap(rule, range_start, range_end, margin)
    truncated = False

    # Forward walk: k = 1, 2, ... starting at the first point inside the range
    if anchor <= range_end:
        first = _first_index_at_or_after(anchor, rule, range_start)
        if first is not None:
            found, hit_cap = _walk(anchor, rule, max(1, first), 1, range_start, range_end, cap)
            occurrences |= found
            truncated = truncated or hit_cap

    # Backward walk: k = -1, -2, ... starting at the last point inside the range
    if anchor >= range_start:
        last = _last_index_at_or_before(anchor, rule, range_end)
        if last is not None:
            found, hit_cap = _walk(anchor, rule, min(-1, last), -1, range_start, range_end, cap)
            occurrences |= found
            truncated = truncated or hit_cap

    return frozenset(occurrences), truncated


@functools.lru_cache(maxsize=1024)
def _expand_cached(
    rule: FrequencyRule,
    anchor: datetime,
    range_start: datetime,
    range_end: datetime,
    margin: int,
) -> tuple[frozenset[datetime], bool]:
    return _expand(rule, anchor, range_start, range_end, margin)


def clear_expansion_cache() -> None:
    """Drop memoized expansions (results are pure, so this only frees memory)."""
    _expand_cached.cache_clear()


class OccurrenceExpander:
    """Expands one frequency rule around its anchor, bounded by a range."""

    def __init__(self, settings: Any = None):
        """Initialize expander with configuration settings.

        Args:
            settings: Object exposing iteration_safety_margin and
                enable_expansion_cache attributes; None uses defaults
        """
        config = ExpanderConfig.from_settings(settings)
        self.safety_margin = config.iteration_safety_margin
        self.use_cache = config.enable_expansion_cache

        logger.debug(
            "OccurrenceExpander initialized: safety_margin=%d, cache=%s",
            self.safety_margin,
            self.use_cache,
        )

    def expand(
        self,
        rule: FrequencyRule,
        anchor: datetime,
        range_start: datetime,
        range_end: datetime,
    ) -> set[datetime]:
        """Return every occurrence of the series inside [range_start, range_end].

        Args:
            rule: Parsed frequency rule
            anchor: Normalized anchor occurrence (see anchor_time.anchor_for)
            range_start: Inclusive lower bound
            range_end: Inclusive upper bound

        Returns:
            Set of occurrence datetimes; ad-hoc rules yield at most the anchor
        """
        return self.expand_detailed(rule, anchor, range_start, range_end).occurrences

    def expand_detailed(
        self,
        rule: FrequencyRule,
        anchor: datetime,
        range_start: datetime,
        range_end: datetime,
    ) -> ExpansionResult:
        """Same as expand() but also reports whether a walk was truncated."""
        expand_fn = _expand_cached if self.use_cache else _expand
        occurrences, truncated = expand_fn(rule, anchor, range_start, range_end, self.safety_margin)

        if truncated:
            logger.warning(
                "Occurrence walk for %s anchored at %s hit its iteration cap; "
                "results for %s..%s may be incomplete",
                rule.label,
                anchor.isoformat(),
                range_start.isoformat(),
                range_end.isoformat(),
            )

        return ExpansionResult(occurrences=set(occurrences), truncated=truncated)
