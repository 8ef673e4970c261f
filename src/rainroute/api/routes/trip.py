"""Trip planning endpoints."""

from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import Coordinate
from ...schemas.trip import (
    InterestPointModel,
    LocationSelection,
    PlaybackRequest,
    PlaybackStateModel,
    RouteSegmentModel,
    TripStateResponse,
)
from ...services.export.geojson import trip_to_feature_collection
from ...services.outputs.trip_formatter import (
    interest_point_to_model,
    playback_to_model,
    segment_to_model,
    trip_state_to_response,
)
from ...services.planner.session import TripPlanner
from ..dependencies import get_planner, parse_role

router = APIRouter(prefix="/trip", tags=["trip"])


def _snapshot(planner: TripPlanner) -> TripStateResponse:
    return trip_state_to_response(
        planner.state,
        pending=[category.value for category in planner.pending()],
        notices=planner.drain_notices(),
    )


@router.get("", response_model=TripStateResponse, status_code=status.HTTP_200_OK)
async def get_trip(planner: TripPlanner = Depends(get_planner)) -> TripStateResponse:
    """Everything the map needs to draw the current frame."""
    return _snapshot(planner)


@router.post("/locations/{role}", response_model=TripStateResponse, status_code=status.HTTP_200_OK)
async def bind_location(
    role: str,
    payload: LocationSelection,
    wait: bool = Query(False, description="Wait for the triggered weather and route requests."),
    planner: TripPlanner = Depends(get_planner),
) -> TripStateResponse:
    location_role = parse_role(role)
    point = Coordinate(latitude=payload.latitude, longitude=payload.longitude)
    try:
        planner.bind_location(location_role, point, payload.name)
        if wait:
            await planner.wait_idle()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error binding {location_role.value} location: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to bind location: {str(exc)}"
        ) from exc
    return _snapshot(planner)


@router.post("/route", response_model=TripStateResponse, status_code=status.HTTP_200_OK)
async def refresh_route(
    wait: bool = Query(False, description="Wait for the route computation to finish."),
    planner: TripPlanner = Depends(get_planner),
) -> TripStateResponse:
    token = planner.refresh_route()
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Both start and end locations are required to compute a route",
        )
    if wait:
        await planner.wait_idle()
    return _snapshot(planner)


@router.put("/playback", response_model=PlaybackStateModel, status_code=status.HTTP_200_OK)
async def set_playback(payload: PlaybackRequest, planner: TripPlanner = Depends(get_planner)) -> PlaybackStateModel:
    return playback_to_model(planner.set_playback(payload.value))


@router.get("/segments", response_model=List[RouteSegmentModel], status_code=status.HTTP_200_OK)
async def get_segments(planner: TripPlanner = Depends(get_planner)) -> List[RouteSegmentModel]:
    return [segment_to_model(segment) for segment in planner.segments]


@router.get("/interest-points", response_model=Dict[str, List[InterestPointModel]], status_code=status.HTTP_200_OK)
async def get_interest_points(planner: TripPlanner = Depends(get_planner)) -> Dict[str, List[InterestPointModel]]:
    return {
        category: [interest_point_to_model(point) for point in points]
        for category, points in planner.state.interest_points.items()
    }


@router.get("/geojson", status_code=status.HTTP_200_OK)
async def get_geojson(planner: TripPlanner = Depends(get_planner)) -> dict:
    """Route, active rain, endpoints and vehicle as a FeatureCollection."""
    return trip_to_feature_collection(planner.state)


@router.delete("", response_model=TripStateResponse, status_code=status.HTTP_200_OK)
async def reset_trip(planner: TripPlanner = Depends(get_planner)) -> TripStateResponse:
    planner.reset_all()
    return _snapshot(planner)
