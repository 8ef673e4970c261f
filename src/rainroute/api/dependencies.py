"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..models.domain import LocationRole
from ..services.planner.session import TripPlanner


def get_planner(request: Request) -> TripPlanner:
    planner = getattr(request.app.state, "planner", None)
    if planner is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Trip planner is not running")
    return planner


def parse_role(role: str) -> LocationRole:
    try:
        return LocationRole(role.lower())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown location role '{role}', expected 'start' or 'end'",
        ) from exc
