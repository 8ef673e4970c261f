"""GeoJSON export of the rendered trip."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ...models.domain import Area, Coordinate, LocationRole, TripState

RAIN_FILL_COLOR = "#1c64f2"
ROUTE_COLOR = "#e0003e"


def _position(point: Coordinate) -> List[float]:
    # GeoJSON positions are lon, lat
    return [point.longitude, point.latitude]


def _feature(geometry: Dict[str, Any], properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "Feature", "geometry": geometry, "properties": properties}


def route_feature(coordinates: Sequence[Coordinate], route_id: str) -> Optional[Dict[str, Any]]:
    if len(coordinates) < 2:
        return None
    return _feature(
        {"type": "LineString", "coordinates": [_position(point) for point in coordinates]},
        {"kind": "route", "route_id": route_id, "stroke": ROUTE_COLOR},
    )


def rain_feature(area: Area, index: int) -> Dict[str, Any]:
    return _feature(
        {"type": "Polygon", "coordinates": [[_position(point) for point in area.coordinates]]},
        {"kind": "rain", "index": index, "is_raining": area.is_raining, "fill": RAIN_FILL_COLOR},
    )


def point_feature(point: Coordinate, kind: str, **properties: Any) -> Dict[str, Any]:
    return _feature({"type": "Point", "coordinates": _position(point)}, {"kind": kind, **properties})


def trip_to_feature_collection(state: TripState) -> Dict[str, Any]:
    """Everything the map widget draws for the current playback position."""
    features: List[Dict[str, Any]] = []

    if state.route is not None:
        line = route_feature(state.route.coordinates, state.route.route_id)
        if line is not None:
            features.append(line)

    features.extend(rain_feature(area, index) for index, area in enumerate(state.active_rain))

    for role in LocationRole:
        record = state.locations[role]
        if record is not None:
            features.append(point_feature(record.coordinate, role.value, name=record.name))

    playback = state.playback
    if playback.vehicle is not None:
        features.append(
            point_feature(
                playback.vehicle,
                "vehicle",
                heading=playback.heading,
                segment_index=playback.segment_index,
                in_rain=playback.in_rain,
            )
        )

    return {"type": "FeatureCollection", "features": features}
