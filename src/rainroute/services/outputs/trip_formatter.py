"""Serializers for trip planner state."""

from __future__ import annotations

from typing import Optional, Sequence

from ...models.domain import (
    Area,
    Coordinate,
    InterestPoint,
    LocationRecord,
    LocationRole,
    LocationSuggestion,
    Notice,
    PlaybackState,
    Route,
    RouteSegment,
    TripState,
)
from ...schemas.trip import (
    AreaModel,
    CoordinateModel,
    InterestPointModel,
    LocationRecordModel,
    NoticeModel,
    PlaybackStateModel,
    RouteModel,
    RouteSegmentModel,
    SuggestionModel,
    TripStateResponse,
)


def _pairs(points: Sequence[Coordinate]) -> list[tuple[float, float]]:
    return [point.as_pair() for point in points]


def coordinate_to_model(point: Optional[Coordinate]) -> Optional[CoordinateModel]:
    if point is None:
        return None
    return CoordinateModel(latitude=point.latitude, longitude=point.longitude)


def record_to_model(record: Optional[LocationRecord]) -> Optional[LocationRecordModel]:
    if record is None:
        return None
    return LocationRecordModel(
        name=record.name,
        latitude=record.latitude,
        longitude=record.longitude,
        weather=dict(record.weather) if record.weather is not None else None,
    )


def area_to_model(area: Area) -> AreaModel:
    return AreaModel(coordinates=area.as_pairs(), is_raining=area.is_raining)


def route_to_model(route: Optional[Route]) -> Optional[RouteModel]:
    if route is None:
        return None
    return RouteModel(
        route_id=route.route_id,
        coordinates=_pairs(route.coordinates),
        distance=route.distance,
        duration=route.duration,
    )


def segment_to_model(segment: RouteSegment) -> RouteSegmentModel:
    return RouteSegmentModel(
        route=_pairs(segment.route),
        raining_area=[area_to_model(area) for area in segment.raining_area],
        timestamp=segment.timestamp,
    )


def playback_to_model(playback: PlaybackState) -> PlaybackStateModel:
    return PlaybackStateModel(
        slider_value=playback.slider_value,
        point_index=playback.point_index,
        segment_index=playback.segment_index,
        offset_in_segment=playback.offset_in_segment,
        vehicle=coordinate_to_model(playback.vehicle),
        heading=playback.heading,
        timestamp=playback.timestamp,
        in_rain=playback.in_rain,
    )


def notice_to_model(notice: Notice) -> NoticeModel:
    return NoticeModel(kind=notice.kind, message=notice.message, role=notice.role.value if notice.role else None)


def suggestion_to_model(suggestion: LocationSuggestion) -> SuggestionModel:
    return SuggestionModel(
        label=suggestion.label,
        latitude=suggestion.coordinate.latitude,
        longitude=suggestion.coordinate.longitude,
    )


def interest_point_to_model(point: InterestPoint) -> InterestPointModel:
    return InterestPointModel(
        id=point.poi_id,
        name=point.name,
        category=point.category,
        latitude=point.coordinate.latitude,
        longitude=point.coordinate.longitude,
    )


def trip_state_to_response(
    state: TripState, pending: Sequence[str], notices: Sequence[Notice]
) -> TripStateResponse:
    return TripStateResponse(
        start=record_to_model(state.locations[LocationRole.START]),
        end=record_to_model(state.locations[LocationRole.END]),
        weather_errors={role.value: flag for role, flag in state.weather_errors.items()},
        route=route_to_model(state.route),
        segment_count=len(state.segments),
        active_rain=[area_to_model(area) for area in state.active_rain],
        playback=playback_to_model(state.playback),
        pending=list(pending),
        notices=[notice_to_model(notice) for notice in notices],
    )
