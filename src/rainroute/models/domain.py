"""Domain models for trip locations, routes and rain geometry."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class LocationRole(str, Enum):
    """Which end of the trip a location record belongs to."""

    START = "start"
    END = "end"

    @property
    def other(self) -> "LocationRole":
        return LocationRole.END if self is LocationRole.START else LocationRole.START


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float

    def as_pair(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class Area:
    """Closed ring of coordinates; first and last points are equal."""

    coordinates: tuple[Coordinate, ...]
    is_raining: bool = True

    def as_pairs(self) -> list[tuple[float, float]]:
        return [point.as_pair() for point in self.coordinates]


@dataclass(slots=True)
class RouteSegment:
    """One routing step and the rain polygons active while traversing it."""

    route: list[Coordinate]
    raining_area: list[Area]
    timestamp: Optional[int] = None


@dataclass(slots=True)
class Route:
    route_id: str
    coordinates: list[Coordinate]
    distance: float
    duration: float


@dataclass(slots=True)
class LocationRecord:
    """A chosen trip endpoint, optionally enriched with point weather."""

    latitude: float
    longitude: float
    name: Optional[str] = None
    weather: Optional[dict[str, Any]] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class PlaybackState:
    slider_value: int
    point_index: Optional[int] = None
    segment_index: Optional[int] = None
    offset_in_segment: Optional[int] = None
    vehicle: Optional[Coordinate] = None
    heading: Optional[float] = None
    timestamp: Optional[int] = None
    in_rain: bool = False


@dataclass(frozen=True, slots=True)
class LocationSuggestion:
    label: str
    coordinate: Coordinate


@dataclass(frozen=True, slots=True)
class InterestPoint:
    poi_id: str
    name: str
    category: str
    coordinate: Coordinate


@dataclass(frozen=True, slots=True)
class Notice:
    """Transient, user-facing message produced by a failed request."""

    kind: str
    message: str
    role: Optional[LocationRole] = None


@dataclass(slots=True)
class TripState:
    """Everything one trip session has committed so far."""

    locations: dict[LocationRole, Optional[LocationRecord]] = field(
        default_factory=lambda: {LocationRole.START: None, LocationRole.END: None}
    )
    weather_errors: dict[LocationRole, bool] = field(
        default_factory=lambda: {LocationRole.START: False, LocationRole.END: False}
    )
    route: Optional[Route] = None
    segments: list[RouteSegment] = field(default_factory=list)
    overview_rain: list[Area] = field(default_factory=list)
    active_rain: list[Area] = field(default_factory=list)
    playback: PlaybackState = field(default_factory=lambda: PlaybackState(slider_value=0))
    interest_points: dict[str, list[InterestPoint]] = field(default_factory=dict)
    notices: list[Notice] = field(default_factory=list)
