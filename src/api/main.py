import logging

from fastapi import FastAPI

from api.routers import dashboard, insights, ops, preferences, schedule

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="rhythm-planner")

app.include_router(schedule.router)
app.include_router(insights.router)
app.include_router(dashboard.router)
app.include_router(preferences.router)
app.include_router(ops.router)

logger.info("rhythm-planner API ready")
