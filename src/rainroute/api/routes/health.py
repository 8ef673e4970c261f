"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...services.planner.session import TripPlanner
from ..dependencies import get_planner

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/backend", status_code=status.HTTP_200_OK)
async def health_backend(planner: TripPlanner = Depends(get_planner)) -> dict:
    """Check that the weather-map backend answers at all."""
    healthy = await planner.client.ping()
    return {"service": "weather-map", "base_url": settings.backend_base_url, "healthy": healthy}
