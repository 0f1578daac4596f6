"""Occurrence aggregation across tasks and plants - plantcare_lite.

Merges the expanded occurrences of many care tasks into one ordered,
deduplicated list for a calendar range, and exposes the day / time-slot /
hour queries calendar views render from.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import ValidationError

from .activity_filter import ActivityFilter
from .anchor_time import anchor_for, is_all_day
from .calendar_windows import days_in_window
from .care_models import CareTaskRule, Occurrence, PlantMeta, TimeSlot
from .frequency_rule import resolve_frequency
from .occurrence_expander import OccurrenceExpander

logger = logging.getLogger(__name__)

# Hour rows shown by the weekly grid when not restricted to hours with tasks
DEFAULT_HOURS = list(range(7, 24))

RuleInput = Union[CareTaskRule, Mapping[str, Any]]
PlantInput = Union[PlantMeta, Mapping[str, Any]]


@dataclass
class AggregationResult:
    """Occurrences of one range plus the tasks whose expansion was truncated."""

    occurrences: list[Occurrence] = field(default_factory=list)
    truncated_task_ids: set[str] = field(default_factory=set)


def _coerce_rules(rules: Iterable[RuleInput]) -> list[CareTaskRule]:
    coerced = []
    for raw in rules:
        if isinstance(raw, CareTaskRule):
            coerced.append(raw)
            continue
        try:
            coerced.append(CareTaskRule.model_validate(raw))
        except ValidationError as e:
            task_id = raw.get("id") if isinstance(raw, Mapping) else None
            logger.warning("Skipping invalid care task %r: %s", task_id, e)
    return coerced


def _coerce_plants(plants: Iterable[PlantInput]) -> dict[str, PlantMeta]:
    by_id: dict[str, PlantMeta] = {}
    for raw in plants:
        try:
            plant = raw if isinstance(raw, PlantMeta) else PlantMeta.model_validate(raw)
        except ValidationError as e:
            logger.warning("Skipping invalid plant entry: %s", e)
            continue
        by_id[plant.id] = plant
    return by_id


class OccurrenceAggregator:
    """Builds the occurrence list of a calendar range from care task rules."""

    def __init__(
        self,
        settings: Any = None,
        expander: Optional[OccurrenceExpander] = None,
        activity_filter: Optional[ActivityFilter] = None,
    ):
        """Initialize aggregator.

        Args:
            settings: Optional settings object forwarded to the expander
            expander: OccurrenceExpander to use (one is created if omitted)
            activity_filter: ActivityFilter to use (one is created if omitted)
        """
        self.expander = expander or OccurrenceExpander(settings)
        self.activity_filter = activity_filter or ActivityFilter()

    def aggregate(
        self,
        rules: Iterable[RuleInput],
        plants: Iterable[PlantInput],
        range_start: datetime,
        range_end: datetime,
        plant_ids: Optional[Iterable[str]] = None,
    ) -> list[Occurrence]:
        """Return every active occurrence of every task inside the range.

        Args:
            rules: Care task rules (models or plain mappings)
            plants: Plant metadata (models or plain mappings)
            range_start: Inclusive lower bound
            range_end: Inclusive upper bound
            plant_ids: Optional selection; tasks of other plants are ignored

        Returns:
            Occurrences sorted by date-time, unique per (task, plant, instant)
        """
        return self.aggregate_detailed(rules, plants, range_start, range_end, plant_ids).occurrences

    def aggregate_detailed(
        self,
        rules: Iterable[RuleInput],
        plants: Iterable[PlantInput],
        range_start: datetime,
        range_end: datetime,
        plant_ids: Optional[Iterable[str]] = None,
    ) -> AggregationResult:
        """Same as aggregate() but also reports which tasks were truncated."""
        plants_by_id = _coerce_plants(plants)
        selected = set(plant_ids) if plant_ids is not None else None

        merged: dict[tuple[str, str, datetime], Occurrence] = {}
        truncated_task_ids: set[str] = set()
        task_count = 0

        for rule in _coerce_rules(rules):
            if selected is not None and rule.plant_id not in selected:
                continue

            plant = plants_by_id.get(rule.plant_id)
            if plant is None:
                logger.warning("Skipping task %s: no plant with id %s", rule.id, rule.plant_id)
                continue

            task_count += 1
            occurrences, truncated = self._occurrences_for_task(rule, plant, range_start, range_end)
            if truncated:
                truncated_task_ids.add(rule.id)
            for occurrence in occurrences:
                merged.setdefault(occurrence.key, occurrence)

        result = sorted(
            merged.values(),
            key=lambda o: (o.occurrence_datetime, o.plant_name, o.task_name, o.task_id),
        )
        logger.debug(
            "Aggregated %d occurrences from %d tasks for %s..%s",
            len(result),
            task_count,
            range_start.isoformat(),
            range_end.isoformat(),
        )
        return AggregationResult(occurrences=result, truncated_task_ids=truncated_task_ids)

    def _occurrences_for_task(
        self,
        rule: CareTaskRule,
        plant: PlantMeta,
        range_start: datetime,
        range_end: datetime,
    ) -> tuple[list[Occurrence], bool]:
        if not self.activity_filter.can_be_active_in(rule, range_end):
            logger.debug("Task %s is paused for the whole range; skipping", rule.id)
            return [], False

        anchor = anchor_for(rule)
        if anchor is None:
            return [], False

        frequency = resolve_frequency(rule.frequency, rule.id)
        expansion = self.expander.expand_detailed(frequency, anchor, range_start, range_end)

        all_day = is_all_day(rule.time_of_day)
        occurrences = [
            Occurrence(
                task_id=rule.id,
                plant_id=plant.id,
                occurrence_datetime=when,
                task_name=rule.name,
                plant_name=plant.name,
                plant_photo_url=plant.primary_photo_url,
                is_all_day=all_day,
                level=rule.level,
            )
            for when in expansion.occurrences
            if self.activity_filter.is_active(rule, when)
        ]
        return occurrences, expansion.truncated


class CareSchedule:
    """Query surface over the aggregated occurrences of one range."""

    def __init__(
        self,
        occurrences: list[Occurrence],
        range_start: datetime,
        range_end: datetime,
        daytime_start_hour: int = 7,
        nighttime_start_hour: int = 19,
        truncated_task_ids: Optional[set[str]] = None,
    ):
        self.occurrences = occurrences
        self.range_start = range_start
        self.range_end = range_end
        self.daytime_start_hour = daytime_start_hour
        self.nighttime_start_hour = nighttime_start_hour
        self.truncated_task_ids = truncated_task_ids or set()

    def __len__(self) -> int:
        return len(self.occurrences)

    def __iter__(self):
        return iter(self.occurrences)

    def days(self) -> list[date]:
        """Every calendar day covered by the range, in order."""
        return days_in_window(self.range_start, self.range_end)

    def occurrences_on_day(self, day: Union[date, datetime]) -> list[Occurrence]:
        if isinstance(day, datetime):
            day = day.date()
        on_day = [o for o in self.occurrences if o.day == day]
        return sorted(on_day, key=lambda o: o.occurrence_datetime.hour)

    def time_slot_for(self, occurrence: Occurrence) -> TimeSlot:
        """Classify an occurrence for grouping; has no effect on recurrence."""
        if occurrence.is_all_day:
            return TimeSlot.ALL_DAY
        hour = occurrence.occurrence_datetime.hour
        if self.daytime_start_hour <= hour < self.nighttime_start_hour:
            return TimeSlot.DAYTIME
        return TimeSlot.NIGHTTIME

    def occurrences_by_slot(self, day: Union[date, datetime]) -> dict[TimeSlot, list[Occurrence]]:
        slots: dict[TimeSlot, list[Occurrence]] = {slot: [] for slot in TimeSlot}
        for occurrence in self.occurrences_on_day(day):
            slots[self.time_slot_for(occurrence)].append(occurrence)
        return slots

    def occurrences_in_hour(self, day: Union[date, datetime], hour: int) -> list[Occurrence]:
        """Timed occurrences on ``day`` whose hour is ``hour``."""
        return [o for o in self.occurrences_on_day(day) if o.hour == hour]

    def hours_with_tasks(self) -> list[int]:
        """Sorted hours that have at least one timed occurrence."""
        return sorted({o.hour for o in self.occurrences if o.hour is not None})

    def hours_to_display(self, only_with_tasks: bool = True) -> list[int]:
        """Hour rows for the weekly grid.

        With ``only_with_tasks`` the grid is compacted to hours that have a
        timed occurrence (empty when every task is all-day); otherwise the
        fixed DEFAULT_HOURS rows are shown.
        """
        if not only_with_tasks:
            return list(DEFAULT_HOURS)
        return self.hours_with_tasks()


def build_schedule(
    rules: Iterable[RuleInput],
    plants: Iterable[PlantInput],
    range_start: datetime,
    range_end: datetime,
    plant_ids: Optional[Iterable[str]] = None,
    settings: Any = None,
) -> CareSchedule:
    """Aggregate a range and wrap the result in a CareSchedule.

    Args:
        settings: Optional Config (or any object with the same attributes)
    """
    aggregator = OccurrenceAggregator(settings)
    result = aggregator.aggregate_detailed(rules, plants, range_start, range_end, plant_ids)
    return CareSchedule(
        result.occurrences,
        range_start,
        range_end,
        daytime_start_hour=getattr(settings, "daytime_start_hour", 7),
        nighttime_start_hour=getattr(settings, "nighttime_start_hour", 19),
        truncated_task_ids=result.truncated_task_ids,
    )
