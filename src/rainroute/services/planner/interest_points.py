"""Points of interest near the committed route."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ...models.domain import Coordinate, InterestPoint, RouteSegment, TripState
from ..backend.client import WeatherMapClient
from ..geometry import coerce_point
from .errors import MalformedGeometry
from .lanes import LaneCategory, LaneToken, RequestLanes, lane_failures

logger = logging.getLogger(__name__)


def sample_route_points(segments: Sequence[RouteSegment], max_samples: int) -> list[Coordinate]:
    """First point of every non-empty segment plus the final route point, thinned evenly."""
    candidates: list[Coordinate] = [segment.route[0] for segment in segments if segment.route]
    last = next((segment.route[-1] for segment in reversed(segments) if segment.route), None)
    if last is not None and (not candidates or candidates[-1] != last):
        candidates.append(last)
    if len(candidates) <= max_samples:
        return candidates
    if max_samples < 2:
        return candidates[:max_samples]
    step = (len(candidates) - 1) / (max_samples - 1)
    return [candidates[round(i * step)] for i in range(max_samples)]


def parse_interest_points(payload: Any) -> dict[str, list[InterestPoint]]:
    if not isinstance(payload, dict):
        return {}
    parsed: dict[str, list[InterestPoint]] = {}
    for category, entries in payload.items():
        if not isinstance(entries, list):
            continue
        points: list[InterestPoint] = []
        seen: set[str] = set()
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            try:
                coordinate = coerce_point([entry.get("lat"), entry.get("lon")])
            except MalformedGeometry as exc:
                logger.debug(f"Dropping interest point: {exc}")
                continue
            poi_id = str(entry.get("id", ""))
            # neighbouring samples overlap, the backend repeats nodes
            if poi_id and poi_id in seen:
                continue
            seen.add(poi_id)
            points.append(
                InterestPoint(
                    poi_id=poi_id,
                    name=str(entry.get("name") or ""),
                    category=str(entry.get("type") or category),
                    coordinate=coordinate,
                )
            )
        parsed[str(category)] = points
    return parsed


async def fetch_interest_points(
    client: WeatherMapClient,
    lanes: RequestLanes,
    state: TripState,
    max_samples: int,
    token: Optional[LaneToken] = None,
) -> Optional[dict[str, list[InterestPoint]]]:
    samples = sample_route_points(state.segments, max_samples)
    if not samples:
        return None
    if token is None:
        token = lanes.start(LaneCategory.INTEREST_POINTS)
    with lane_failures(token):
        payload = await client.interest_points(samples)
    interest_points = parse_interest_points(payload)
    if not lanes.is_current(token):
        return None
    state.interest_points = interest_points
    return interest_points
