from typing import List

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.metrics import REQUESTS_TOTAL
from classification.dashboard import (
    dashboard_recommendations,
    dashboard_stats,
    priority_ranking,
    tasks_by_category,
)
from rhythm_planner.models import Task

router = APIRouter()


class TasksIn(BaseModel):
    tasks: List[Task] = Field(default_factory=list)


@router.post("/dashboard")
async def dashboard(payload: TasksIn) -> dict:
    """Stats, category groups and priority ranking; groups and ranking list task ids."""
    REQUESTS_TOTAL.labels(endpoint="/dashboard", status="ok").inc()
    return {
        "stats": dashboard_stats(payload.tasks).model_dump(),
        "by_category": {
            category: [t.id for t in group]
            for category, group in tasks_by_category(payload.tasks).items()
        },
        "ranking": [t.id for t in priority_ranking(payload.tasks)],
        "recommendations": dashboard_recommendations(payload.tasks).model_dump(),
    }
