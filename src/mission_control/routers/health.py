"""Health check endpoint."""

from fastapi import APIRouter, Depends

from mission_control import __version__
from mission_control.config import Settings
from mission_control.dependencies import get_app_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)) -> dict:
    """Return API health status, version and environment."""
    return {
        "status": "ok",
        "version": __version__,
        "environment": settings.environment,
    }
