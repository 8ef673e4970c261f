"""Maps the 0-100 playback slider onto the route and its segments."""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from ...models.domain import Area, Coordinate, PlaybackState, Route, RouteSegment
from ..geospatial import bearing_degrees, point_in_polygon

SLIDER_MIN = 0
SLIDER_MAX = 100


def clamp_slider(value: Any) -> int:
    return max(SLIDER_MIN, min(SLIDER_MAX, int(value)))


def locate_segment(point_index: int, segments: Sequence[RouteSegment]) -> tuple[Optional[int], Optional[int]]:
    """Return ``(segment_index, offset_in_segment)`` owning ``point_index``."""
    consumed = 0
    for index, segment in enumerate(segments):
        count = len(segment.route)
        if consumed + count > point_index:
            return index, point_index - consumed
        consumed += count
    return None, None


def _heading(coordinates: Sequence[Coordinate], point_index: int) -> Optional[float]:
    if len(coordinates) < 2:
        return None
    if point_index + 1 < len(coordinates):
        origin, target = coordinates[point_index], coordinates[point_index + 1]
    else:
        origin, target = coordinates[point_index - 1], coordinates[point_index]
    return bearing_degrees(origin.latitude, origin.longitude, target.latitude, target.longitude)


def is_in_rain(point: Coordinate, areas: Sequence[Area]) -> bool:
    return any(point_in_polygon(point.latitude, point.longitude, area.as_pairs()) for area in areas)


def map_slider(value: Any, route: Optional[Route], segments: Sequence[RouteSegment]) -> PlaybackState:
    """Resolve the vehicle position for a slider value.

    The mapping is proportional to point count, not distance: densely sampled
    stretches of the route take more slider travel than sparse ones.
    """
    slider_value = clamp_slider(value)
    if route is None or not route.coordinates:
        return PlaybackState(slider_value=slider_value)

    count = len(route.coordinates)
    point_index = min(math.floor(slider_value / 100 * (count - 1)), count - 1)
    vehicle = route.coordinates[point_index]
    segment_index, offset = locate_segment(point_index, segments)

    timestamp = None
    in_rain = False
    if segment_index is not None:
        segment = segments[segment_index]
        timestamp = segment.timestamp
        in_rain = is_in_rain(vehicle, segment.raining_area)

    return PlaybackState(
        slider_value=slider_value,
        point_index=point_index,
        segment_index=segment_index,
        offset_in_segment=offset,
        vehicle=vehicle,
        heading=_heading(route.coordinates, point_index),
        timestamp=timestamp,
        in_rain=in_rain,
    )


def select_rain_display(
    playback: PlaybackState, segments: Sequence[RouteSegment], overview: Sequence[Area]
) -> list[Area]:
    """Rain polygons to draw for a playback state; falls back to the leg overview."""
    index = playback.segment_index
    if index is not None and 0 <= index < len(segments):
        return list(segments[index].raining_area)
    return list(overview)
