from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel

from rhythm_planner.models import Task, coerce_models, to_naive_utc

logger = logging.getLogger(__name__)

DEFAULT_PROFESSION = "professional"

# table order decides ties between professions with the same number of hits
PROFESSION_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "software developer": ("code", "debug", "feature", "api", "backend", "frontend", "git", "pull request"),
    "designer": ("design", "ui", "ux", "wireframe", "prototype", "figma", "sketch", "mockup"),
    "manager": ("meeting", "report", "review", "team", "budget", "strategy", "planning", "presentation"),
    "finance": ("budget", "finance", "report", "analysis", "excel", "spreadsheet", "forecast", "revenue"),
    "healthcare": ("patient", "clinical", "medical", "health", "care", "treatment", "appointment", "record"),
    "student": ("study", "homework", "assignment", "exam", "research", "project", "paper", "thesis"),
    "entrepreneur": ("business", "startup", "funding", "pitch", "market", "customer", "product", "growth"),
}

HEALTH_TAGS = frozenset({"exercise", "fitness", "wellness", "meditation", "yoga", "health"})
SOCIAL_KEYWORDS = ("friend", "family", "party", "social", "birthday", "dinner with")

Level = Literal["low", "medium", "high"]


class WorkStyle(BaseModel):
    is_morning_person: bool
    is_night_owl: bool
    prefers_deadlines: bool
    deadline_intensity: Level
    productivity_pattern: Literal["morning", "evening", "balanced"]
    works_weekends: bool = False


class HealthHabits(BaseModel):
    has_regular_exercise: bool
    wellness_integration: bool
    health_consciousness: Level
    last_health_task: Optional[datetime] = None


class SocialPatterns(BaseModel):
    has_social_life: bool
    social_task_count: int


class SleepPatterns(BaseModel):
    night_owl: bool
    early_riser: bool


class TaskPreferences(BaseModel):
    prefers_high_impact: bool
    handles_complexity: bool
    variety_seeker: bool
    planner: bool


class LifestyleConfidence(BaseModel):
    profession: float
    work_style: float
    overall: float


class LifestyleProfile(BaseModel):
    profession: str
    work_style: WorkStyle
    health_habits: HealthHabits
    social_patterns: SocialPatterns
    sleep_patterns: SleepPatterns
    task_preferences: TaskPreferences
    confidence: LifestyleConfidence
    analyzed_at: datetime
    analyzed_tasks_count: int


def _task_text(task: Task) -> str:
    return " ".join([task.title, task.description, task.category, " ".join(task.tags)])


def detect_profession(tasks: List[Task]) -> Tuple[str, int]:
    """Profession with the most keyword hits in the task text, and the hit count."""
    text = " ".join(_task_text(t) for t in tasks).lower()

    best, best_hits = DEFAULT_PROFESSION, 0
    for profession, keywords in PROFESSION_KEYWORDS.items():
        hits = sum(1 for k in keywords if k in text)
        if hits > best_hits:
            best, best_hits = profession, hits
    return best, best_hits


def _is_health_task(task: Task) -> bool:
    return task.category == "Health" or any(tag.lower() in HEALTH_TAGS for tag in task.tags)


def _is_social_task(task: Task) -> bool:
    text = _task_text(task).lower()
    return any(k in text for k in SOCIAL_KEYWORDS)


def _sleep_patterns(tasks: List[Task]) -> SleepPatterns:
    # tasks created late at night or before 6 AM hint at the sleep schedule
    created_hours = [t.created_at.hour for t in tasks if t.created_at is not None]
    return SleepPatterns(
        night_owl=any(h >= 23 or h < 4 for h in created_hours),
        early_riser=any(4 <= h < 6 for h in created_hours),
    )


def _on_time_ratio(tasks: List[Task]) -> float:
    completed = [t for t in tasks if t.status == "completed"]
    if not completed:
        return 0.5
    on_time = sum(
        1 for t in completed
        if t.completed_at is not None and t.due_date is not None and t.completed_at <= t.due_date
    )
    return on_time / len(completed)


def _work_style(tasks: List[Task], completion_ratio: float) -> Tuple[WorkStyle, float]:
    created_hours = [t.created_at.hour for t in tasks if t.created_at is not None]
    morning = sum(1 for h in created_hours if 5 <= h < 12)
    evening = sum(1 for h in created_hours if 18 <= h < 24)
    morning_ratio = morning / len(created_hours) if created_hours else 0.5

    if completion_ratio > 0.8:
        intensity = "high"
    elif completion_ratio > 0.6:
        intensity = "medium"
    else:
        intensity = "low"

    if morning_ratio > 0.6:
        pattern = "morning"
    elif evening > morning:
        pattern = "evening"
    else:
        pattern = "balanced"

    style = WorkStyle(
        is_morning_person=morning_ratio > 0.6,
        is_night_owl=evening > morning,
        prefers_deadlines=completion_ratio > 0.7,
        deadline_intensity=intensity,
        productivity_pattern=pattern,
        works_weekends=any(t.created_at is not None and t.created_at.weekday() >= 5 for t in tasks),
    )
    return style, morning_ratio


def detect_lifestyle(tasks, reference_time: datetime) -> Optional[LifestyleProfile]:
    """Guess profession and habits from task data. Returns None when there are no tasks."""
    tasks = coerce_models(tasks, Task, "tasks")
    if not tasks:
        return None
    reference_time = to_naive_utc(reference_time)

    profession, hits = detect_profession(tasks)
    completion_ratio = _on_time_ratio(tasks)
    work_style, morning_ratio = _work_style(tasks, completion_ratio)

    health_tasks = [t for t in tasks if _is_health_task(t)]
    health_count = len(health_tasks)
    health_dates = [t.created_at for t in health_tasks if t.created_at is not None]
    social_count = sum(1 for t in tasks if _is_social_task(t))
    if health_count / len(tasks) > 0.1:
        consciousness = "high"
    elif health_count > 0:
        consciousness = "medium"
    else:
        consciousness = "low"

    preferences = TaskPreferences(
        prefers_high_impact=sum(1 for t in tasks if t.impact >= 7) > sum(1 for t in tasks if t.impact <= 3),
        handles_complexity=any(t.complexity >= 4 for t in tasks),
        variety_seeker=len({t.category for t in tasks}) > 3,
        planner=any(t.due_date is not None and t.due_date > reference_time for t in tasks),
    )

    keyword_count = len(PROFESSION_KEYWORDS.get(profession, ())) or 1
    confidence = LifestyleConfidence(
        profession=hits / keyword_count,
        work_style=max(morning_ratio, 1 - morning_ratio),
        overall=min(0.9, (hits / 5) * 0.4 + completion_ratio * 0.3 + (0.2 if health_count else 0.0)),
    )

    logger.debug("Detected profession %r from %d tasks (%d keyword hits)", profession, len(tasks), hits)
    return LifestyleProfile(
        profession=profession,
        work_style=work_style,
        health_habits=HealthHabits(
            has_regular_exercise=health_count >= 2,
            wellness_integration=health_count > 0,
            health_consciousness=consciousness,
            last_health_task=max(health_dates) if health_dates else None,
        ),
        social_patterns=SocialPatterns(has_social_life=social_count >= 2, social_task_count=social_count),
        sleep_patterns=_sleep_patterns(tasks),
        task_preferences=preferences,
        confidence=confidence,
        analyzed_at=reference_time,
        analyzed_tasks_count=len(tasks),
    )
