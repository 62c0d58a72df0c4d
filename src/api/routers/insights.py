import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.metrics import REQUESTS_TOTAL
from classification.integrator import integrate_lifestyle_profile
from classification.lifestyle import detect_lifestyle
from classification.recommendations import lifestyle_recommendations
from energy.patterns import analyze_calendar, derive_life_patterns
from rhythm_planner.models import CalendarInterval, Task, to_naive_utc

router = APIRouter()
logger = logging.getLogger(__name__)


class EventsIn(BaseModel):
    events: List[CalendarInterval] = Field(default_factory=list)


class LifestyleIn(BaseModel):
    tasks: List[Task] = Field(default_factory=list)
    reference_time: Optional[datetime] = None


class IntegratedIn(LifestyleIn):
    events: List[CalendarInterval] = Field(default_factory=list)


@router.post("/patterns")
async def detect_patterns(payload: EventsIn) -> dict:
    """Calendar profile plus the LifePatterns it suggests."""
    profile = analyze_calendar(payload.events)
    patterns = derive_life_patterns(profile)
    REQUESTS_TOTAL.labels(endpoint="/patterns", status="ok").inc()
    return {
        "profile": profile.model_dump(mode="json"),
        "life_patterns": patterns.model_dump(mode="json"),
    }


@router.post("/lifestyle")
async def lifestyle(payload: LifestyleIn) -> dict:
    reference_time = to_naive_utc(payload.reference_time) or datetime.now()
    profile = detect_lifestyle(payload.tasks, reference_time)
    recommendations = lifestyle_recommendations(profile, payload.tasks, reference_time)
    logger.info(f"Lifestyle analysis over {len(payload.tasks)} tasks: {profile.profession if profile else 'n/a'}")
    REQUESTS_TOTAL.labels(endpoint="/lifestyle", status="ok").inc()
    return {
        "profile": profile.model_dump(mode="json") if profile else None,
        "recommendations": [r.model_dump() for r in recommendations],
    }


@router.post("/lifestyle/profile")
async def integrated_profile(payload: IntegratedIn) -> dict:
    """Task lifestyle and calendar habits merged into one profile."""
    reference_time = to_naive_utc(payload.reference_time) or datetime.now()
    profile = integrate_lifestyle_profile(payload.tasks, payload.events, reference_time)
    REQUESTS_TOTAL.labels(endpoint="/lifestyle/profile", status="ok").inc()
    return {"profile": profile.model_dump(mode="json") if profile else None}
