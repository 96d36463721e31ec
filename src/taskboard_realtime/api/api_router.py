"""API router initialization."""

from fastapi import APIRouter
from loguru import logger

from taskboard_realtime.api.events import router as events_router

# Create main API router
router = APIRouter()

# Mount API endpoints
router.include_router(events_router, tags=["Realtime"])

logger.debug("API router initialized (events router mounted)")
