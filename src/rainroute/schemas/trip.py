"""Trip planner request/response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class CoordinateModel(BaseModel):
    latitude: float
    longitude: float


class LocationSelection(BaseModel):
    """A suggestion pick (with label) or a map click (without)."""

    latitude: float = Field(..., allow_inf_nan=False)
    longitude: float = Field(..., allow_inf_nan=False)
    name: Optional[str] = Field(default=None, description="Label of the picked suggestion, if any.")


class LocationRecordModel(BaseModel):
    name: Optional[str] = None
    latitude: float
    longitude: float
    weather: Optional[Dict[str, Any]] = None


class AreaModel(BaseModel):
    coordinates: List[Tuple[float, float]]
    is_raining: bool = True


class RouteModel(BaseModel):
    route_id: str
    coordinates: List[Tuple[float, float]]
    distance: float = Field(..., description="Metres.")
    duration: float = Field(..., description="Seconds.")


class RouteSegmentModel(BaseModel):
    route: List[Tuple[float, float]]
    raining_area: List[AreaModel]
    timestamp: Optional[int] = None


class PlaybackRequest(BaseModel):
    value: float = Field(..., allow_inf_nan=False, description="Slider position, clamped into 0-100.")


class PlaybackStateModel(BaseModel):
    slider_value: int
    point_index: Optional[int] = None
    segment_index: Optional[int] = None
    offset_in_segment: Optional[int] = None
    vehicle: Optional[CoordinateModel] = None
    heading: Optional[float] = None
    timestamp: Optional[int] = None
    in_rain: bool = False


class NoticeModel(BaseModel):
    kind: str
    message: str
    role: Optional[str] = None


class TripStateResponse(BaseModel):
    start: Optional[LocationRecordModel] = None
    end: Optional[LocationRecordModel] = None
    weather_errors: Dict[str, bool]
    route: Optional[RouteModel] = None
    segment_count: int = 0
    active_rain: List[AreaModel]
    playback: PlaybackStateModel
    pending: List[str]
    notices: List[NoticeModel]


class SuggestionModel(BaseModel):
    label: str
    latitude: float
    longitude: float


class SuggestionResponse(BaseModel):
    role: str
    sequence: int
    stale: bool
    suggestions: List[SuggestionModel]


class InterestPointModel(BaseModel):
    id: str
    name: str
    category: str
    latitude: float
    longitude: float
