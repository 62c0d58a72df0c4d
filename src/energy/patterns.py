"""
Life-pattern detection from calendar history.

Counts events per hour of day and classifies each event's energy level
through a static keyword table, then turns the per-hour counts into the
LifePatterns ranges used by the scheduler.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from rhythm_planner.models import (
    CalendarInterval,
    HourRange,
    LifePatterns,
    coerce_models,
)

logger = logging.getLogger(__name__)

DEFAULT_WORK_SCHEDULE: HourRange = (9, 17)

# checked in order, first level with a matching keyword wins
EVENT_ENERGY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "high": ("brainstorm", "creative", "planning", "strategy"),
    "medium": ("meeting", "review", "sync"),
    "low": ("admin", "email", "routine"),
}
DEFAULT_EVENT_ENERGY = "medium"

MEETING_KEYWORDS: Tuple[str, ...] = ("meeting", "call", "sync")
WORK_KEYWORDS: Tuple[str, ...] = ("work",)

EVENING_START_HOUR = 17
DERIVED_RANGE_HOURS = 2


class MeetingPatterns(BaseModel):
    frequent_hours: Dict[int, int] = Field(default_factory=dict)
    # Monday == 0
    preferred_days: Dict[int, int] = Field(default_factory=dict)
    average_duration_hours: float = 0.0


class CalendarProfile(BaseModel):
    work_schedule: HourRange = DEFAULT_WORK_SCHEDULE
    meeting_patterns: MeetingPatterns = Field(default_factory=MeetingPatterns)
    energy_by_hour: Dict[int, Dict[str, int]] = Field(default_factory=dict)
    circadian_rhythm: str = "Standard (9-5)"


def _mentions(text: str, keywords: Tuple[str, ...]) -> bool:
    text = text.lower()
    return any(k in text for k in keywords)


def classify_event_energy(event: CalendarInterval) -> str:
    for level, keywords in EVENT_ENERGY_KEYWORDS.items():
        if _mentions(event.title, keywords):
            return level
    return DEFAULT_EVENT_ENERGY


def detect_work_schedule(events: List[CalendarInterval]) -> HourRange:
    work = [
        e for e in events
        if _mentions(e.title, WORK_KEYWORDS) or _mentions(e.description, WORK_KEYWORDS)
    ]
    if not work:
        return DEFAULT_WORK_SCHEDULE
    return (min(e.start.hour for e in work), max(e.end.hour for e in work))


def detect_meeting_patterns(events: List[CalendarInterval]) -> MeetingPatterns:
    patterns = MeetingPatterns()
    meetings = [e for e in events if _mentions(e.title, MEETING_KEYWORDS)]

    total_hours = 0.0
    for meeting in meetings:
        hour = meeting.start.hour
        day = meeting.start.weekday()
        patterns.frequent_hours[hour] = patterns.frequent_hours.get(hour, 0) + 1
        patterns.preferred_days[day] = patterns.preferred_days.get(day, 0) + 1
        total_hours += meeting.duration_minutes / 60

    if meetings:
        patterns.average_duration_hours = total_hours / len(meetings)
    return patterns


def detect_energy_by_hour(events: List[CalendarInterval]) -> Dict[int, Dict[str, int]]:
    energy: Dict[int, Dict[str, int]] = {}
    for event in events:
        bucket = energy.setdefault(event.start.hour, {"high": 0, "medium": 0, "low": 0})
        bucket[classify_event_energy(event)] += 1
    return energy


def circadian_rhythm(energy_by_hour: Dict[int, Dict[str, int]]) -> str:
    if not energy_by_hour:
        return "Standard (9-5)"

    first, last = min(energy_by_hour), max(energy_by_hour)
    if first < 7:
        return "Early Riser (6 AM start)"
    if first > 10:
        return "Late Starter (10 AM+)"
    if last > 20:
        return "Night Worker (late finish)"
    return "Balanced Day"


def analyze_calendar(events) -> CalendarProfile:
    """Summarize calendar events into work hours, meeting habits and hourly energy."""
    events = coerce_models(events, CalendarInterval, "events")
    energy = detect_energy_by_hour(events)
    profile = CalendarProfile(
        work_schedule=detect_work_schedule(events),
        meeting_patterns=detect_meeting_patterns(events),
        energy_by_hour=energy,
        circadian_rhythm=circadian_rhythm(energy),
    )
    logger.debug("Analyzed %d calendar events into %d active hours", len(events), len(energy))
    return profile


def hour_energy_level(counts: Dict[str, int]) -> str:
    """Dominant level of one hour bucket: 'peak', 'moderate' or 'low'."""
    high, medium, low = counts.get("high", 0), counts.get("medium", 0), counts.get("low", 0)
    if high > medium and high > low:
        return "peak"
    if medium > low:
        return "moderate"
    return "low"


def _range_from(hour: Optional[int]) -> Optional[HourRange]:
    if hour is None:
        return None
    return (hour, min(hour + DERIVED_RANGE_HOURS, 23))


def derive_life_patterns(profile: CalendarProfile) -> LifePatterns:
    """LifePatterns suggested by a calendar profile; ranges without evidence keep their defaults."""
    levels = {hour: hour_energy_level(counts) for hour, counts in sorted(profile.energy_by_hour.items())}

    peak = next((h for h, level in levels.items() if level == "peak"), None)
    low = next((h for h, level in levels.items() if level == "low"), None)
    creative = next(
        (h for h, level in levels.items() if level == "peak" and h >= EVENING_START_HOUR),
        None,
    )

    found = {
        "peak_hours": _range_from(peak),
        "creative_hours": _range_from(creative),
        "low_energy_hours": _range_from(low),
    }
    return LifePatterns(**{name: hours for name, hours in found.items() if hours is not None})
