"""Location suggestion endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...schemas.trip import SuggestionResponse
from ...services.outputs.trip_formatter import suggestion_to_model
from ...services.planner.errors import RequestFailed
from ...services.planner.session import TripPlanner
from ..dependencies import get_planner, parse_role

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/suggest", response_model=SuggestionResponse, status_code=status.HTTP_200_OK)
async def suggest(
    role: str = Query(..., description="start or end"),
    query: str = Query(""),
    planner: TripPlanner = Depends(get_planner),
) -> SuggestionResponse:
    location_role = parse_role(role)
    try:
        result = await planner.suggestions.suggest(location_role, query)
    except RequestFailed as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    return SuggestionResponse(
        role=location_role.value,
        sequence=result.sequence,
        stale=result.stale,
        suggestions=[suggestion_to_model(item) for item in result.suggestions],
    )
