from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel

from classification.lifestyle import LifestyleProfile
from rhythm_planner.models import Task, coerce_models, to_naive_utc

MessageFormatter = Callable[[dict], str]


class Recommendation(BaseModel):
    type: str
    message: str
    priority: Literal["low", "medium", "high"]
    category: str


# Default wording per recommendation kind. Each entry turns a context dict
# into text, so callers can swap the wording without touching the rules.
DEFAULT_MESSAGES: Dict[str, MessageFormatter] = {
    "morning_peak": lambda ctx: "Peak morning hours - tackle complex tasks now",
    "wellness_break": lambda ctx: "Consider adding 15-minute wellness breaks between focused work sessions",
    "overdue": lambda ctx: f"You have {ctx['overdue_count']} overdue tasks - consider re-prioritizing",
}

# profession -> (recommendation category, message formatter)
PROFESSION_ADVICE: Dict[str, tuple] = {
    "software developer": (
        "workflow",
        lambda ctx: "Consider breaking large features into smaller PRs for better review cycles",
    ),
    "designer": (
        "creativity",
        lambda ctx: "Schedule creative work during your most productive design hours",
    ),
    "manager": (
        "leadership",
        lambda ctx: "Front-load meetings to leave focused work time for your team",
    ),
}


def lifestyle_recommendations(
    profile: Optional[LifestyleProfile],
    tasks,
    reference_time: datetime,
    limit: int = 5,
    messages: Optional[Mapping[str, MessageFormatter]] = None,
) -> List[Recommendation]:
    if profile is None:
        return []

    tasks = coerce_models(tasks, Task, "tasks")
    reference_time = to_naive_utc(reference_time)
    fmt = {**DEFAULT_MESSAGES, **(messages or {})}
    context = {"profile": profile, "reference_time": reference_time}
    out: List[Recommendation] = []

    if reference_time.hour < 12 and profile.work_style.is_morning_person:
        out.append(Recommendation(
            type="time_optimization",
            message=fmt["morning_peak"](context),
            priority="high",
            category="productivity",
        ))

    advice = PROFESSION_ADVICE.get(profile.profession)
    if advice is not None:
        category, formatter = advice
        out.append(Recommendation(
            type="profession_optimization",
            message=formatter(context),
            priority="medium",
            category=category,
        ))

    if not profile.health_habits.has_regular_exercise:
        out.append(Recommendation(
            type="health_optimization",
            message=fmt["wellness_break"](context),
            priority="medium",
            category="wellness",
        ))

    overdue = [
        t for t in tasks
        if t.due_date is not None and t.due_date < reference_time and t.status != "completed"
    ]
    if overdue:
        out.append(Recommendation(
            type="task_management",
            message=fmt["overdue"]({**context, "overdue_count": len(overdue)}),
            priority="high",
            category="urgency",
        ))

    return out[:limit]
