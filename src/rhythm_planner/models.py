from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

TaskId = Union[int, str]
TaskStatus = Literal["pending", "in-progress", "completed", "blocked"]
HourRange = Tuple[int, int]

TASK_STATUSES = ("pending", "in-progress", "completed", "blocked")

DEFAULT_PRIORITY = 3
DEFAULT_IMPACT = 5
DEFAULT_COMPLEXITY = 3
DEFAULT_ESTIMATED_HOURS = 1.0

DEFAULT_PEAK_HOURS: HourRange = (10, 12)
DEFAULT_CREATIVE_HOURS: HourRange = (20, 22)
DEFAULT_LOW_ENERGY_HOURS: HourRange = (14, 16)

# (default, low, high) per integer rating field
_RATING_BOUNDS = {
    "priority": (DEFAULT_PRIORITY, 1, 5),
    "impact": (DEFAULT_IMPACT, 1, 10),
    "complexity": (DEFAULT_COMPLEXITY, 1, 5),
    "progress": (0, 0, 100),
}

_PATTERN_DEFAULTS = {
    "peak_hours": DEFAULT_PEAK_HOURS,
    "creative_hours": DEFAULT_CREATIVE_HOURS,
    "low_energy_hours": DEFAULT_LOW_ENERGY_HOURS,
}


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Offset-aware timestamps become naive UTC so they compare with naive ones."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class _ClientModel(BaseModel):
    """Accepts both snake_case and the camelCase keys sent by the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Task(_ClientModel):
    """A task as supplied by the task source.

    Malformed values never reject the task: missing ratings fall back to
    defaults, out-of-range ratings are clamped.
    """

    id: TaskId
    title: str = ""
    description: str = ""
    category: str = ""
    tags: List[str] = Field(default_factory=list)

    priority: int = DEFAULT_PRIORITY
    impact: int = DEFAULT_IMPACT
    complexity: int = DEFAULT_COMPLEXITY
    estimated_hours: float = DEFAULT_ESTIMATED_HOURS
    # percent done, 0..100
    progress: int = 0

    status: TaskStatus = "pending"

    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    due_date: Optional[datetime] = None

    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def none_to_blank(cls, v):
        return "" if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("priority", "impact", "complexity", "progress", mode="before")
    @classmethod
    def clamp_rating(cls, v, info):
        default, low, high = _RATING_BOUNDS[info.field_name]
        try:
            value = int(v)
        except (TypeError, ValueError):
            return default
        return max(low, min(high, value))

    @field_validator("estimated_hours", mode="before")
    @classmethod
    def positive_hours(cls, v):
        try:
            hours = float(v)
        except (TypeError, ValueError):
            return DEFAULT_ESTIMATED_HOURS
        # NaN fails the comparison as well
        if not hours > 0:
            return DEFAULT_ESTIMATED_HOURS
        return hours

    @field_validator("created_at", "completed_at", "due_date", mode="after")
    @classmethod
    def naive_utc(cls, v):
        return to_naive_utc(v)

    @field_validator("status", mode="before")
    @classmethod
    def known_status(cls, v):
        status = str(v).strip().lower().replace("_", "-") if v is not None else ""
        return status if status in TASK_STATUSES else "pending"

    @property
    def is_schedulable(self) -> bool:
        return self.status != "completed"


class CalendarInterval(_ClientModel):
    """A busy interval supplied by the calendar source."""

    title: str = ""
    description: str = ""
    start: datetime
    end: datetime

    @field_validator("title", "description", mode="before")
    @classmethod
    def none_to_blank(cls, v):
        return "" if v is None else v

    @field_validator("start", "end", mode="after")
    @classmethod
    def naive_utc(cls, v):
        return to_naive_utc(v)

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


class LifePatterns(_ClientModel):
    """Energy-by-time-of-day preferences, as inclusive (start_hour, end_hour) ranges."""

    peak_hours: HourRange = DEFAULT_PEAK_HOURS
    creative_hours: HourRange = DEFAULT_CREATIVE_HOURS
    low_energy_hours: HourRange = DEFAULT_LOW_ENERGY_HOURS

    @field_validator("peak_hours", "creative_hours", "low_energy_hours", mode="before")
    @classmethod
    def valid_range_or_default(cls, v, info):
        default = _PATTERN_DEFAULTS[info.field_name]
        try:
            start, end = (int(h) for h in v)
        except (TypeError, ValueError):
            logger.debug("Unreadable %s %r, using default %s", info.field_name, v, default)
            return default
        if not 0 <= start <= end <= 23:
            logger.debug("Invalid %s %r, using default %s", info.field_name, v, default)
            return default
        return (start, end)

    @staticmethod
    def contains(hour_range: HourRange, hour: int) -> bool:
        return hour_range[0] <= hour <= hour_range[1]


class PlanningWindow(BaseModel):
    start: datetime
    end: datetime

    @field_validator("start", "end", mode="after")
    @classmethod
    def naive_utc(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def end_after_start(self) -> "PlanningWindow":
        if self.end <= self.start:
            raise ValueError("planning window must end after it starts")
        return self

    @classmethod
    def for_day(cls, reference_time: datetime) -> "PlanningWindow":
        """The natural day (00:00 to next 00:00) containing reference_time."""
        reference_time = to_naive_utc(reference_time)
        midnight = reference_time.replace(hour=0, minute=0, second=0, microsecond=0)
        return cls(start=midnight, end=midnight + timedelta(days=1))


class FreeSlot(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    # length of the busy block ending exactly at `start`, if there is one
    preceding_busy_minutes: Optional[float] = None

    @property
    def duration_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600


class ScheduleAssignment(BaseModel):
    task: Task
    slot: FreeSlot
    score: float
    energy_match_score: float = Field(..., ge=0, le=100)
    confidence: float = Field(..., ge=0, le=1)


class ScheduleResult(BaseModel):
    assignments: List[ScheduleAssignment] = Field(default_factory=list)
    unscheduled: List[TaskId] = Field(default_factory=list)


class UserPreferences(_ClientModel):
    life_patterns: LifePatterns = Field(default_factory=LifePatterns)

    long_meeting_minutes: int = Field(60, gt=0)
    # None keeps free slots whole instead of cutting them into blocks
    slot_block_minutes: Optional[int] = Field(60, gt=0)


def coerce_models(items, model: type, name: str) -> list:
    """Validate a list of models or mappings; anything that is not a list is a caller bug."""
    if items is None or isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Iterable):
        raise TypeError(f"{name} must be a list of {model.__name__}, got {type(items).__name__}")

    out = []
    for item in items:
        if isinstance(item, model):
            out.append(item)
        elif isinstance(item, Mapping):
            out.append(model.model_validate(item))
        else:
            raise TypeError(f"{name} items must be {model.__name__} or mappings, got {type(item).__name__}")
    return out
