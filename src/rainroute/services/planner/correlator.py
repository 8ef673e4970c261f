"""Fetches a route and its rain geometry and reconciles them into segments."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Sequence

from ...config import settings
from ...models.domain import LocationRecord, Route, RouteSegment, TripState
from ..backend.client import WeatherMapClient
from ..geometry import flatten_route, normalize_coordinates, normalize_polygons
from ..geospatial import polyline_length_km
from .errors import Cancelled, NoRouteFound
from .lanes import LaneCategory, LaneToken, RequestLanes, lane_failures

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None


def build_segments(steps: Any) -> list[RouteSegment]:
    """Turn raw routing steps into RouteSegments, in server order.

    Anything that is not a list of step objects counts as "no route".
    """
    if not isinstance(steps, list):
        if steps is not None:
            logger.debug(f"Ignoring malformed steps payload: {type(steps).__name__}")
        return []
    segments: list[RouteSegment] = []
    for index, step in enumerate(steps):
        if not isinstance(step, dict):
            logger.debug(f"Ignoring malformed step #{index}: {type(step).__name__}")
            continue
        segments.append(
            RouteSegment(
                route=normalize_coordinates(step.get("route")),
                raining_area=normalize_polygons(step.get("rain_polygons")),
                timestamp=_parse_timestamp(step.get("timestamp")),
            )
        )
    return segments


def build_route(segments: Sequence[RouteSegment], average_speed_kmh: float | None = None) -> Route:
    coordinates = flatten_route(segment.route for segment in segments)
    distance_km = polyline_length_km([point.as_pair() for point in coordinates])
    speed = average_speed_kmh or settings.average_speed_kmh
    return Route(
        route_id=uuid.uuid4().hex,
        coordinates=coordinates,
        distance=distance_km * 1000.0,
        duration=(distance_km / speed) * 3600.0,
    )


class RouteWeatherCorrelator:
    def __init__(self, client: WeatherMapClient, lanes: RequestLanes, state: TripState) -> None:
        self.client = client
        self.lanes = lanes
        self.state = state

    async def compute_route(
        self,
        start: Optional[LocationRecord],
        end: Optional[LocationRecord],
        token: Optional[LaneToken] = None,
    ) -> Optional[list[RouteSegment]]:
        """Fetch rain zones and the stepped route for ``start -> end`` and commit them.

        Returns the committed segments, or None when either endpoint is
        missing or the result was superseded before it could be committed.
        Raises Cancelled, RequestFailed or NoRouteFound; on any of these the
        committed route is left as it was.
        """
        if start is None or end is None:
            return None
        if token is None:
            token = self.lanes.start(LaneCategory.ROUTE)
        origin, destination = start.coordinate, end.coordinate

        with lane_failures(token):
            zone_payload = await self.client.rain_zone(origin, destination)
        overview = normalize_polygons(zone_payload.get("polygons"))
        if not self.lanes.is_current(token):
            raise Cancelled(token.category.value)
        self.state.overview_rain = overview
        self.state.active_rain = overview
        logger.debug(f"Committed {len(overview)} overview rain polygons")

        with lane_failures(token):
            route_payload = await self.client.weather_aware_route(origin, destination)
        if route_payload.get("error"):
            if not self.lanes.is_current(token):
                raise Cancelled(token.category.value)
            logger.warning(f"No route found: {route_payload['error']}")
            raise NoRouteFound(str(route_payload["error"]), LaneCategory.ROUTE.value)

        segments = build_segments(route_payload.get("steps"))
        route = build_route(segments)
        if not self.lanes.is_current(token):
            logger.debug(f"Discarding stale route result for {token!r}")
            return None

        self.state.segments = segments
        self.state.route = route
        logger.info(
            f"Committed route {route.route_id}: {len(segments)} segments, "
            f"{len(route.coordinates)} points, {route.distance / 1000.0:.1f} km"
        )
        return segments
