"""
Combined lifestyle profile.

Merges what the calendar says (work hours, meeting habits, hourly energy)
with what the task list says (profession, work style, health and social
habits) and derives the day-shape suggestions shown on the insights page:
personality label, energy cycles, focus style, work-life balance, exercise
and meal windows, sleep quality, an hour-by-hour outline, wellness tips and
productivity hacks.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from classification.lifestyle import LifestyleProfile, detect_lifestyle
from energy.patterns import CalendarProfile, analyze_calendar, hour_energy_level
from rhythm_planner.models import to_naive_utc

logger = logging.getLogger(__name__)

# hour bands for the energy-cycle count, [start, end)
ENERGY_BANDS: Dict[str, tuple] = {
    "Morning Peak": (6, 12),
    "Afternoon Peak": (12, 18),
    "Evening Peak": (18, 22),
}
STEADY_CYCLE = "Steady Throughout Day"

BALANCE_BASELINE = 50
# Monday == 0
WEEKEND_DAYS = frozenset({5, 6})

MEAL_DEFAULTS = {
    "breakfast": "8:00-9:00 AM",
    "lunch": "12:00-1:00 PM",
    "dinner": "7:00-8:00 PM",
}

WELLNESS_BY_PROFESSION: Dict[str, List[str]] = {
    "software developer": [
        "20-20-20 rule: Every 20 minutes, look at something 20 feet away for 20 seconds",
        "Standing desk intervals: 45 min sitting, 15 min standing",
        "Weekly digital detox: 2 hours without screens before bed",
    ],
    "manager": [
        "Walking meetings: Convert 30% of meetings to walking meetings",
        "Decision-making window: Make important decisions before 11 AM",
        "Email batching: Check email only 3x daily (9 AM, 1 PM, 4 PM)",
    ],
}
NO_EXERCISE_TIPS = [
    "Micro-workouts: 5-min exercises every 90 minutes",
    "Desk stretches: Neck rolls and shoulder stretches hourly",
]
NIGHT_OWL_TIPS = [
    "Blue light blocking glasses after 8 PM",
    "Progressive relaxation: 10-min routine before bed",
]
MAX_WELLNESS_TIPS = 3

# focus-style prefix -> hacks
PRODUCTIVITY_HACKS: Dict[str, List[str]] = {
    "Context-Switching": [
        "Time blocking: Schedule 90-min uninterrupted blocks",
        "Meeting consolidation: Group meetings on specific days",
        "Notification management: Turn off non-essential notifications",
    ],
    "Deep Work": [
        "Theme days: Dedicate days to specific types of work",
        "Energy matching: Schedule complex tasks during peak hours",
        "Recovery breaks: 10-min break after 90-min focus sessions",
    ],
}


class WorkLifeBalance(BaseModel):
    score: int
    level: str
    areas: List[str] = Field(default_factory=list)


class MealPatterns(BaseModel):
    breakfast: str
    lunch: str
    dinner: str
    natural_breaks: Optional[str] = None


class SleepQuality(BaseModel):
    quality: str
    recommendation: str


class ScheduleBlock(BaseModel):
    time: str
    activity: str
    recommendation: str
    energy: str


class IntegratedProfile(BaseModel):
    profession: str
    personality_type: str
    circadian_rhythm: str
    peak_hours: Dict[int, str]
    energy_cycles: List[str]
    focus_style: str
    exercise_windows: List[str]
    meal_patterns: MealPatterns
    sleep_quality: SleepQuality
    work_life_balance: WorkLifeBalance
    optimal_schedule: List[ScheduleBlock]
    wellness_tips: List[str]
    productivity_hacks: List[str]
    lifestyle: LifestyleProfile
    calendar: CalendarProfile


def personality_type(lifestyle: LifestyleProfile, calendar: CalendarProfile) -> str:
    """Dash-joined trait names, or "Balanced" when none apply."""
    meetings = calendar.meeting_patterns
    traits = [
        ("EarlyBird", lifestyle.work_style.is_morning_person),
        ("NightOwl", lifestyle.work_style.is_night_owl),
        ("Social", lifestyle.social_patterns.has_social_life),
        ("DeadlineDriven", lifestyle.work_style.deadline_intensity == "high"),
        ("HealthConscious", lifestyle.health_habits.has_regular_exercise),
        ("DeepCollaborator", meetings.average_duration_hours > 1),
        ("MultiTasker", len(meetings.frequent_hours) > 3),
    ]
    names = [name for name, present in traits if present]
    return "-".join(names) if names else "Balanced"


def peak_hour_levels(calendar: CalendarProfile) -> Dict[int, str]:
    """Energy level per active calendar hour.

    Without calendar evidence the levels fan out from the start of the work
    day: peak, then moderate two hours later, low after four, recovery
    after six.
    """
    if calendar.energy_by_hour:
        return {hour: hour_energy_level(counts) for hour, counts in sorted(calendar.energy_by_hour.items())}

    start = calendar.work_schedule[0]
    return {start: "peak", start + 2: "moderate", start + 4: "low", start + 6: "recovery"}


def energy_cycles(calendar: CalendarProfile) -> List[str]:
    totals = {name: 0 for name in ENERGY_BANDS}
    for hour, counts in calendar.energy_by_hour.items():
        for name, (low, high) in ENERGY_BANDS.items():
            if low <= hour < high:
                totals[name] += sum(counts.values())

    best = max(totals.values())
    leaders = [name for name, total in totals.items() if total == best]
    if best == 0 or len(leaders) > 1:
        return [STEADY_CYCLE]
    return leaders


def focus_style(calendar: CalendarProfile, lifestyle: LifestyleProfile) -> str:
    meeting_hours = len(calendar.meeting_patterns.frequent_hours)
    average = calendar.meeting_patterns.average_duration_hours

    if meeting_hours > 5 and average < 0.5:
        return "Context-Switching (frequent short meetings)"
    if meeting_hours < 2 and average > 1:
        return "Deep Work (long focused sessions)"
    if lifestyle.work_style.deadline_intensity == "high":
        return "Deadline-Driven (bursts of focus)"
    return "Balanced Focus"


def work_life_balance(lifestyle: LifestyleProfile, calendar: CalendarProfile) -> WorkLifeBalance:
    exercise = lifestyle.health_habits.has_regular_exercise
    social = lifestyle.social_patterns.has_social_life
    weekends = lifestyle.work_style.works_weekends
    weekend_meetings = bool(WEEKEND_DAYS & set(calendar.meeting_patterns.preferred_days))

    score = BALANCE_BASELINE
    score += 15 if exercise else 0
    score += 15 if social else 0
    score += 0 if weekends else 10
    score -= 10 if lifestyle.work_style.deadline_intensity == "high" else 0
    score -= 10 if weekend_meetings else 0
    score = max(0, min(100, score))

    if score > 70:
        level = "Excellent"
    elif score > 50:
        level = "Good"
    else:
        level = "Needs Attention"

    areas = []
    if not exercise:
        areas.append("Add regular exercise")
    if not social:
        areas.append("Schedule social activities")
    if weekends:
        areas.append("Protect weekend time")
    return WorkLifeBalance(score=score, level=level, areas=areas)


def exercise_windows(calendar: CalendarProfile, lifestyle: LifestyleProfile) -> List[str]:
    work_start, work_end = calendar.work_schedule
    windows = []
    if work_start > 7:
        windows.append("6:30-7:30 AM (Pre-work energy boost)")
    windows.append("12:00-1:00 PM (Lunch recharge)")
    if work_end < 19:
        windows.append("6:00-7:00 PM (Evening stress relief)")

    last = lifestyle.health_habits.last_health_task
    if last is not None:
        windows.append(f"{last.hour}:00-{last.hour + 1}:00 (Your usual time)")
    return windows


def meal_patterns(calendar: CalendarProfile) -> MealPatterns:
    # low-energy hours on a four-hour grid read as natural breaks
    breaks = [
        f"{hour}:00"
        for hour, counts in sorted(calendar.energy_by_hour.items())
        if counts.get("low", 0) > 0 and hour % 4 == 0
    ]
    return MealPatterns(**MEAL_DEFAULTS, natural_breaks=", ".join(breaks) if breaks else None)


def sleep_quality(lifestyle: LifestyleProfile) -> SleepQuality:
    sleep, style = lifestyle.sleep_patterns, lifestyle.work_style

    if sleep.night_owl and style.is_morning_person:
        return SleepQuality(
            quality="Needs Adjustment (night owl with morning schedule)",
            recommendation="Gradually shift bedtime 15 min earlier each night",
        )
    quality = "Good"
    if sleep.early_riser and style.is_night_owl:
        quality = "Misaligned (early riser with evening schedule)"
    return SleepQuality(quality=quality, recommendation="Maintain consistent sleep schedule ±30 min")


def optimal_schedule(
    profession: str,
    personality: str,
    peak_hours: Dict[int, str],
    windows: List[str],
    has_regular_exercise: bool,
) -> List[ScheduleBlock]:
    blocks = []
    if "EarlyBird" in personality:
        blocks.append(ScheduleBlock(
            time="6:00-7:00", activity="Morning Ritual",
            recommendation="Meditation + Planning", energy="building",
        ))

    for hour, level in peak_hours.items():
        if level == "peak":
            blocks.append(ScheduleBlock(
                time=f"{hour}:00-{hour + 2}:00", activity="Deep Work",
                recommendation="Most important task of the day", energy="peak",
            ))

    if profession == "software developer":
        blocks.append(ScheduleBlock(
            time="14:00-16:00", activity="Coding Session",
            recommendation="Complex algorithms & debugging", energy="creative",
        ))
    elif profession == "designer":
        blocks.append(ScheduleBlock(
            time="15:00-17:00", activity="Creative Work",
            recommendation="Visual design & prototyping", energy="creative",
        ))

    if windows:
        blocks.append(ScheduleBlock(
            time=windows[0].split(" ")[0],
            activity="Physical Activity",
            recommendation="Maintain your routine" if has_regular_exercise else "Start with 20-min walk",
            energy="recharge",
        ))
    return blocks


def wellness_tips(profession: str, personality: str, has_regular_exercise: bool) -> List[str]:
    tips = list(WELLNESS_BY_PROFESSION.get(profession, []))
    if not has_regular_exercise:
        tips.extend(NO_EXERCISE_TIPS)
    if "NightOwl" in personality:
        tips.extend(NIGHT_OWL_TIPS)
    return tips[:MAX_WELLNESS_TIPS]


def productivity_hacks(style: str) -> List[str]:
    for prefix, hacks in PRODUCTIVITY_HACKS.items():
        if style.startswith(prefix):
            return list(hacks)
    return []


def integrate_lifestyle_profile(tasks, events, reference_time: datetime) -> Optional[IntegratedProfile]:
    """Combined calendar and task profile. Returns None when there are no tasks."""
    reference_time = to_naive_utc(reference_time)
    lifestyle = detect_lifestyle(tasks, reference_time)
    if lifestyle is None:
        return None
    calendar = analyze_calendar(events)

    personality = personality_type(lifestyle, calendar)
    peaks = peak_hour_levels(calendar)
    focus = focus_style(calendar, lifestyle)
    windows = exercise_windows(calendar, lifestyle)
    exercise = lifestyle.health_habits.has_regular_exercise

    logger.debug("Integrated profile for %r: %s", lifestyle.profession, personality)
    return IntegratedProfile(
        profession=lifestyle.profession,
        personality_type=personality,
        circadian_rhythm=calendar.circadian_rhythm,
        peak_hours=peaks,
        energy_cycles=energy_cycles(calendar),
        focus_style=focus,
        exercise_windows=windows,
        meal_patterns=meal_patterns(calendar),
        sleep_quality=sleep_quality(lifestyle),
        work_life_balance=work_life_balance(lifestyle, calendar),
        optimal_schedule=optimal_schedule(lifestyle.profession, personality, peaks, windows, exercise),
        wellness_tips=wellness_tips(lifestyle.profession, personality, exercise),
        productivity_hacks=productivity_hacks(focus),
        lifestyle=lifestyle,
        calendar=calendar,
    )
