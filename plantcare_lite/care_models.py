"""Data models for plant care scheduling - plantcare_lite."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TimeSlot(str, Enum):
    """Time-of-day partition used to group occurrences in calendar views."""

    ALL_DAY = "all_day"
    DAYTIME = "daytime"
    NIGHTTIME = "nighttime"


class TaskLevel(str, Enum):
    """Care plan mode a task belongs to."""

    BASIC = "basic"
    ADVANCED = "advanced"


class PlantMeta(BaseModel):
    """Display metadata for a plant. Never affects recurrence math."""

    id: str
    name: str = Field(
        default="",
        validation_alias=AliasChoices("name", "common_name", "commonName"),
        description="Display name of the plant",
    )
    primary_photo_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("primary_photo_url", "primaryPhotoUrl"),
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class CareTaskRule(BaseModel):
    """A care task as stored by the persistence layer.

    String fields are kept raw: frequency, anchor and resume values are
    interpreted by the engine, which degrades gracefully on bad input
    instead of rejecting the whole payload here.
    """

    id: str
    plant_id: str = Field(validation_alias=AliasChoices("plant_id", "plantId"))
    name: str = Field(default="", description="Task name, e.g. 'Watering'")
    description: Optional[str] = None
    frequency: Optional[str] = Field(
        default=None, description="Recurrence text, e.g. 'Weekly' or 'Every 3 Days'"
    )
    time_of_day: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("time_of_day", "timeOfDay"),
        description="'All day' or HH:MM",
    )
    anchor_due_date: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "anchor_due_date", "anchorDueDate", "next_due_date", "nextDueDate"
        ),
        description="ISO-8601 timestamp of one known occurrence",
    )
    is_paused: bool = Field(default=False, validation_alias=AliasChoices("is_paused", "isPaused"))
    resume_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("resume_date", "resumeDate")
    )
    level: Optional[TaskLevel] = None

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", use_enum_values=True, coerce_numbers_to_str=True
    )


class Occurrence(BaseModel):
    """One concrete calendar instance of a care task.

    Pure projection of a CareTaskRule onto a date range; recomputed on every
    query and never persisted.
    """

    task_id: str
    plant_id: str
    occurrence_datetime: datetime
    task_name: str = ""
    plant_name: str = ""
    plant_photo_url: Optional[str] = None
    is_all_day: bool = False
    level: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> tuple[str, str, datetime]:
        """Composite identity used for deduplication."""
        return (self.task_id, self.plant_id, self.occurrence_datetime)

    @property
    def day(self) -> date:
        return self.occurrence_datetime.date()

    @property
    def hour(self) -> Optional[int]:
        """Hour of a timed occurrence, None for all-day ones."""
        if self.is_all_day:
            return None
        return self.occurrence_datetime.hour
