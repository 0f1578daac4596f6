"""plantcare_lite - recurring care-task occurrence engine for plant care calendars.

Given care task rules (frequency, time of day, pause/resume state, anchor
due date), enumerates every occurrence inside a displayed week or month,
merged across tasks and plants.
"""

__version__ = "0.1.0"

from .activity_filter import ActivityFilter
from .care_exceptions import (
    AnchorDateError,
    CareDataError,
    CareScheduleError,
    ConfigError,
    FrequencyParseError,
)
from .care_models import CareTaskRule, Occurrence, PlantMeta, TimeSlot
from .frequency_rule import FrequencyKind, FrequencyRule, next_due_date, parse_frequency
from .occurrence_aggregator import AggregationResult, CareSchedule, OccurrenceAggregator, build_schedule
from .occurrence_expander import OccurrenceExpander

__all__ = [
    "ActivityFilter",
    "AggregationResult",
    "AnchorDateError",
    "CareDataError",
    "CareSchedule",
    "CareScheduleError",
    "CareTaskRule",
    "ConfigError",
    "FrequencyKind",
    "FrequencyParseError",
    "FrequencyRule",
    "Occurrence",
    "OccurrenceAggregator",
    "OccurrenceExpander",
    "PlantMeta",
    "TimeSlot",
    "build_schedule",
    "next_due_date",
    "parse_frequency",
]
