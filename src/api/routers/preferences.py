import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_preferences_store
from rhythm_planner.models import UserPreferences
from storage.preferences_store import PreferencesStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/preferences")
async def get_preferences(store: PreferencesStore = Depends(get_preferences_store)) -> dict:
    return store.load().model_dump(mode="json")


@router.put("/preferences")
async def put_preferences(
    payload: UserPreferences,
    store: PreferencesStore = Depends(get_preferences_store),
) -> dict:
    store.save(payload)
    logger.info(f"Saved preferences to {store.path}")
    return payload.model_dump(mode="json")
