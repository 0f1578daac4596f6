"""Frequency parsing and step arithmetic for care task recurrence - plantcare_lite.

Care tasks store their recurrence as free text ("Weekly", "Every 3 Days").
This module turns that text into a closed FrequencyRule once, at the engine
boundary, so the rest of the engine never string-matches again.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional

from dateutil.relativedelta import relativedelta

from .care_exceptions import FrequencyParseError

logger = logging.getLogger(__name__)


class FrequencyKind(str, Enum):
    """Closed set of recurrence patterns supported by care tasks."""

    AD_HOC = "ad_hoc"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    EVERY_N_DAYS = "every_n_days"
    EVERY_N_WEEKS = "every_n_weeks"
    EVERY_N_MONTHS = "every_n_months"


# kind -> relativedelta keyword
_STEP_UNITS: dict[FrequencyKind, str] = {
    FrequencyKind.DAILY: "days",
    FrequencyKind.WEEKLY: "weeks",
    FrequencyKind.MONTHLY: "months",
    FrequencyKind.YEARLY: "years",
    FrequencyKind.EVERY_N_DAYS: "days",
    FrequencyKind.EVERY_N_WEEKS: "weeks",
    FrequencyKind.EVERY_N_MONTHS: "months",
}

# Shortest possible length of one unit, in days
_MIN_UNIT_DAYS: dict[str, int] = {"days": 1, "weeks": 7, "months": 28, "years": 365}

_FIXED_TOKENS: dict[str, FrequencyKind] = {
    "ad-hoc": FrequencyKind.AD_HOC,
    "adhoc": FrequencyKind.AD_HOC,
    "ad hoc": FrequencyKind.AD_HOC,
    "as needed": FrequencyKind.AD_HOC,
    "daily": FrequencyKind.DAILY,
    "weekly": FrequencyKind.WEEKLY,
    "monthly": FrequencyKind.MONTHLY,
    "yearly": FrequencyKind.YEARLY,
}

_EVERY_N_PATTERNS: tuple[tuple[re.Pattern[str], dict[str, FrequencyKind]], ...] = (
    (
        re.compile(r"^every\s+(\d+)\s+(days?|weeks?|months?)$", re.IGNORECASE),
        {
            "day": FrequencyKind.EVERY_N_DAYS,
            "week": FrequencyKind.EVERY_N_WEEKS,
            "month": FrequencyKind.EVERY_N_MONTHS,
        },
    ),
    # Vietnamese labels produced by the localized task form
    (
        re.compile(r"^mỗi\s+(\d+)\s+(ngày|tuần|tháng)$", re.IGNORECASE),
        {
            "ngày": FrequencyKind.EVERY_N_DAYS,
            "tuần": FrequencyKind.EVERY_N_WEEKS,
            "tháng": FrequencyKind.EVERY_N_MONTHS,
        },
    ),
)

_LABEL_UNITS: dict[FrequencyKind, str] = {
    FrequencyKind.EVERY_N_DAYS: "Days",
    FrequencyKind.EVERY_N_WEEKS: "Weeks",
    FrequencyKind.EVERY_N_MONTHS: "Months",
}


@dataclass(frozen=True)
class FrequencyRule:
    """A parsed recurrence pattern.

    ``interval`` is the N of the "Every N ..." kinds and is always 1 for the
    fixed kinds. Instances are immutable and hashable so they can be used
    as cache keys.
    """

    kind: FrequencyKind
    interval: int = 1

    FORM_MODES: ClassVar[dict[str, FrequencyKind]] = {
        "adhoc": FrequencyKind.AD_HOC,
        "daily": FrequencyKind.DAILY,
        "weekly": FrequencyKind.WEEKLY,
        "monthly": FrequencyKind.MONTHLY,
        "yearly": FrequencyKind.YEARLY,
        "every_x_days": FrequencyKind.EVERY_N_DAYS,
        "every_x_weeks": FrequencyKind.EVERY_N_WEEKS,
        "every_x_months": FrequencyKind.EVERY_N_MONTHS,
    }

    def __post_init__(self) -> None:
        if self.interval < 1:
            raise FrequencyParseError(f"Frequency interval must be positive, got {self.interval}")
        if self.kind not in _LABEL_UNITS and self.interval != 1:
            raise FrequencyParseError(f"{self.kind.value} does not take an interval")

    @property
    def is_ad_hoc(self) -> bool:
        return self.kind is FrequencyKind.AD_HOC

    @property
    def min_step_days(self) -> int:
        """Lower bound, in whole days, of the distance covered by one step."""
        if self.is_ad_hoc:
            return 0
        return _MIN_UNIT_DAYS[_STEP_UNITS[self.kind]] * self.interval

    @property
    def label(self) -> str:
        """Canonical text form, as written by the task form."""
        if self.kind in _LABEL_UNITS:
            return f"Every {self.interval} {_LABEL_UNITS[self.kind]}"
        if self.is_ad_hoc:
            return "Ad-hoc"
        return self.kind.value.capitalize()

    def step(self, multiplier: int = 1) -> relativedelta:
        """Return the offset of ``multiplier`` steps from an anchor.

        Month and year offsets clamp to the last valid day of a shorter month
        (2024-01-31 + 1 month == 2024-02-29). Ad-hoc rules never move.
        """
        if self.is_ad_hoc:
            return relativedelta()
        return relativedelta(**{_STEP_UNITS[self.kind]: self.interval * multiplier})

    @classmethod
    def from_form(cls, mode: str, value: Optional[int] = None) -> "FrequencyRule":
        """Build a rule from the task form's frequency mode and number.

        Args:
            mode: One of FORM_MODES keys (e.g. "every_x_weeks")
            value: N for the every_x_* modes

        Raises:
            FrequencyParseError: Unknown mode or missing/non-positive value
        """
        kind = cls.FORM_MODES.get((mode or "").strip().lower())
        if kind is None:
            raise FrequencyParseError(f"Unknown frequency mode: {mode!r}")
        if kind in _LABEL_UNITS:
            if value is None or value < 1:
                raise FrequencyParseError(f"Frequency value is required for {mode!r} and must be at least 1")
            return cls(kind, int(value))
        return cls(kind)

    def __str__(self) -> str:
        return self.label


AD_HOC = FrequencyRule(FrequencyKind.AD_HOC)


def parse_frequency(text: Optional[str]) -> FrequencyRule:
    """Parse frequency text into a FrequencyRule.

    Matching is case-insensitive and ignores surrounding whitespace.

    Raises:
        FrequencyParseError: Empty text, unknown token, or non-positive N
    """
    if text is None or not str(text).strip():
        raise FrequencyParseError("Empty frequency")

    normalized = " ".join(str(text).split()).lower()

    kind = _FIXED_TOKENS.get(normalized)
    if kind is not None:
        return FrequencyRule(kind)

    for pattern, units in _EVERY_N_PATTERNS:
        match = pattern.match(normalized)
        if not match:
            continue
        count = int(match.group(1))
        if count < 1:
            raise FrequencyParseError(f"Frequency interval must be positive: {text!r}")
        return FrequencyRule(units[match.group(2).lower().rstrip("s")], count)

    raise FrequencyParseError(f"Unrecognized frequency: {text!r}")


def resolve_frequency(text: Optional[str], task_id: Optional[str] = None) -> FrequencyRule:
    """Parse frequency text, falling back to ad-hoc on failure.

    Unreadable frequencies must not break a calendar view: the task is
    treated as non-recurring (its anchor is its only occurrence).
    """
    try:
        return parse_frequency(text)
    except FrequencyParseError as e:
        logger.warning("Treating task %s as ad-hoc: %s", task_id or "<no-id>", e)
        return AD_HOC


def next_due_date(frequency: Optional[str], base: datetime) -> Optional[datetime]:
    """Compute the due date one step after ``base``.

    Used when a task is created or its frequency changes. Ad-hoc tasks and
    unreadable frequencies have no next due date.
    """
    try:
        rule = parse_frequency(frequency)
    except FrequencyParseError as e:
        logger.warning("Could not parse frequency for next due date: %s", e)
        return None
    if rule.is_ad_hoc:
        return None
    return base + rule.step(1)
