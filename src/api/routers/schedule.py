import logging
import time
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.dependencies import get_energy_policy, get_preferences_store
from api.metrics import (
    REQUESTS_TOTAL,
    REQUEST_LATENCY_SECONDS,
    TASKS_SCHEDULED_TOTAL,
    TASKS_UNSCHEDULED_TOTAL,
)
from energy.policy import EnergyMatchPolicy
from rhythm_planner.models import CalendarInterval, LifePatterns, PlanningWindow, Task
from scheduling.scheduler import Scheduler
from storage.preferences_store import PreferencesStore

router = APIRouter()
logger = logging.getLogger(__name__)


class ScheduleIn(BaseModel):
    tasks: List[Task]
    busy_intervals: List[CalendarInterval] = Field(default_factory=list)
    patterns: Optional[LifePatterns] = None
    window: Optional[PlanningWindow] = None
    reference_time: Optional[datetime] = None
    # overrides the stored slot_block_minutes preference; an explicit null keeps whole slots
    block_minutes: Optional[int] = Field(None, gt=0)


@router.post("/schedule")
async def create_schedule(
    payload: ScheduleIn,
    store: PreferencesStore = Depends(get_preferences_store),
    policy: EnergyMatchPolicy = Depends(get_energy_policy),
) -> dict:
    """Assign the given tasks to free slots around the busy intervals."""
    start = time.time()
    prefs = store.load()
    if "block_minutes" in payload.model_fields_set:
        block_minutes = payload.block_minutes
    else:
        block_minutes = prefs.slot_block_minutes

    scheduler = Scheduler(
        policy=replace(policy, long_meeting_minutes=prefs.long_meeting_minutes),
        block_minutes=block_minutes,
    )
    try:
        result = scheduler.schedule(
            payload.tasks,
            payload.busy_intervals,
            patterns=payload.patterns if payload.patterns is not None else prefs.life_patterns,
            window=payload.window,
            reference_time=payload.reference_time,
        )
    except (TypeError, ValueError) as e:
        logger.warning(f"Rejected schedule request: {e}")
        REQUESTS_TOTAL.labels(endpoint="/schedule", status="rejected").inc()
        raise HTTPException(status_code=400, detail=str(e))

    REQUESTS_TOTAL.labels(endpoint="/schedule", status="ok").inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint="/schedule").observe(time.time() - start)
    TASKS_SCHEDULED_TOTAL.inc(len(result.assignments))
    TASKS_UNSCHEDULED_TOTAL.inc(len(result.unscheduled))

    return result.model_dump(mode="json")
