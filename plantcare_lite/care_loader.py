"""Loading plants and care tasks from data files - plantcare_lite.

Payloads mirror what the app's data layer returns: a ``plants`` list whose
entries may carry nested ``careTasks``, plus an optional top-level
``careTasks`` list for tasks stored separately.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .care_exceptions import CareDataError
from .care_models import CareTaskRule, PlantMeta

logger = logging.getLogger(__name__)

_TASK_KEYS = ("careTasks", "care_tasks")


@dataclass
class CareData:
    """Plants and the care task rules that reference them."""

    plants: list[PlantMeta] = field(default_factory=list)
    rules: list[CareTaskRule] = field(default_factory=list)


def _task_entries(container: Mapping[str, Any]) -> list[Any]:
    for key in _TASK_KEYS:
        entries = container.get(key)
        if entries:
            if isinstance(entries, list):
                return entries
            logger.warning("Ignoring %s: expected a list, got %s", key, type(entries).__name__)
    return []


def _parse_task(entry: Any, plant_id: str | None = None) -> CareTaskRule | None:
    if not isinstance(entry, Mapping):
        logger.warning("Skipping care task entry that is not a mapping: %r", entry)
        return None
    # YAML turns unquoted timestamps into date/datetime objects; rules keep raw ISO text
    data = {
        key: value.isoformat() if isinstance(value, (datetime.date, datetime.datetime)) else value
        for key, value in entry.items()
    }
    if plant_id is not None and not (data.get("plantId") or data.get("plant_id")):
        data["plant_id"] = plant_id
    try:
        return CareTaskRule.model_validate(data)
    except ValidationError as e:
        logger.warning("Skipping invalid care task %r: %s", data.get("id"), e)
        return None


def care_data_from_dict(payload: Mapping[str, Any]) -> CareData:
    """Build CareData from an already-decoded payload.

    Raises:
        CareDataError: payload is not a mapping
    """
    if not isinstance(payload, Mapping):
        raise CareDataError("Care data must contain a mapping at top level")

    data = CareData()
    raw_plants = payload.get("plants") or []
    if not isinstance(raw_plants, list):
        raise CareDataError("'plants' must be a list")

    for entry in raw_plants:
        if not isinstance(entry, Mapping):
            logger.warning("Skipping plant entry that is not a mapping: %r", entry)
            continue
        try:
            plant = PlantMeta.model_validate(entry)
        except ValidationError as e:
            logger.warning("Skipping invalid plant %r: %s", entry.get("id"), e)
            continue
        data.plants.append(plant)
        for task_entry in _task_entries(entry):
            rule = _parse_task(task_entry, plant.id)
            if rule is not None:
                data.rules.append(rule)

    for task_entry in _task_entries(payload):
        rule = _parse_task(task_entry)
        if rule is not None:
            data.rules.append(rule)

    logger.debug("Loaded %d plants and %d care tasks", len(data.plants), len(data.rules))
    return data


def load_care_data(path: str | Path) -> CareData:
    """Load plants and care tasks from a YAML or JSON file.

    Raises:
        CareDataError: file missing, undecodable, or not a mapping
    """
    p = Path(path)
    if not p.exists():
        raise CareDataError(f"Care data file {p} not found")
    try:
        loaded = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise CareDataError(f"Unable to read care data {p}: {exc}") from exc
    if loaded is None:
        return CareData()
    return care_data_from_dict(loaded)
