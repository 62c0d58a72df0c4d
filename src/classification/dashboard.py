from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from rhythm_planner.models import Task, coerce_models

CRITICAL_PRIORITY = 2
FOCUS_IMPACT = 8
QUICK_WIN_PROGRESS = 70
RISK_CRITICAL_COUNT = 2
DELEGATION_SUGGESTION = "Consider delegating low-impact tasks to focus on strategic items"


class DashboardStats(BaseModel):
    total_tasks: int
    completed: int
    critical_priority: int
    avg_impact: float
    completion_rate: int
    categories: int


class DashboardRecommendations(BaseModel):
    focus_area: List[str] = Field(default_factory=list)
    quick_wins: List[str] = Field(default_factory=list)
    risk_alert: bool = False
    suggestion: str = DELEGATION_SUGGESTION
    efficiency_score: int = 0


def _percent(part: int, whole: int) -> int:
    # half rounds up, so 2 of 3 is 67 and 1 of 8 is 13
    if not whole:
        return 0
    return int(part * 100 / whole + 0.5)


def dashboard_stats(tasks) -> DashboardStats:
    """Headline numbers for the task dashboard. An empty list gives zeros."""
    tasks = coerce_models(tasks, Task, "tasks")
    completed = sum(1 for t in tasks if t.status == "completed")
    avg_impact = sum(t.impact for t in tasks) / len(tasks) if tasks else 0.0

    return DashboardStats(
        total_tasks=len(tasks),
        completed=completed,
        critical_priority=sum(1 for t in tasks if t.priority <= CRITICAL_PRIORITY),
        avg_impact=round(avg_impact, 1),
        completion_rate=_percent(completed, len(tasks)),
        categories=len({t.category for t in tasks}),
    )


def tasks_by_category(tasks) -> Dict[str, List[Task]]:
    """Tasks grouped by category, categories in first-seen order."""
    groups: Dict[str, List[Task]] = {}
    for task in coerce_models(tasks, Task, "tasks"):
        groups.setdefault(task.category, []).append(task)
    return groups


def priority_ranking(tasks) -> List[Task]:
    """Most critical first; equal priority ranks higher impact first."""
    return sorted(coerce_models(tasks, Task, "tasks"), key=lambda t: (t.priority, -t.impact))


def dashboard_recommendations(tasks) -> DashboardRecommendations:
    tasks = coerce_models(tasks, Task, "tasks")
    open_tasks = [t for t in tasks if t.status != "completed"]
    completed = len(tasks) - len(open_tasks)

    return DashboardRecommendations(
        focus_area=[t.title for t in open_tasks if t.impact >= FOCUS_IMPACT][:3],
        quick_wins=[t.title for t in open_tasks if t.progress > QUICK_WIN_PROGRESS][:2],
        risk_alert=sum(1 for t in open_tasks if t.priority == 1) > RISK_CRITICAL_COUNT,
        efficiency_score=_percent(completed, len(tasks)),
    )
