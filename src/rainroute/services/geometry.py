"""Normalization of raw coordinate arrays coming back from the backend."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Optional

from ..models.domain import Area, Coordinate
from .planner.errors import MalformedGeometry

logger = logging.getLogger(__name__)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def coerce_point(raw: Any) -> Coordinate:
    """Coerce a raw ``[lat, lon]`` pair into a Coordinate.

    Extra trailing entries are ignored. Raises MalformedGeometry when the
    pair is missing or either component is not a finite number.
    """
    if not _is_array(raw) or len(raw) < 2:
        raise MalformedGeometry(f"Expected a coordinate pair, got {raw!r}")
    try:
        lat = float(raw[0])
        lon = float(raw[1])
    except (TypeError, ValueError) as exc:
        raise MalformedGeometry(f"Non-numeric coordinate {raw!r}") from exc
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise MalformedGeometry(f"Non-finite coordinate {raw!r}")
    return Coordinate(lat, lon)


def normalize_coordinates(raw: Any) -> list[Coordinate]:
    """Keep the valid pairs of a raw coordinate sequence, in order."""
    if not _is_array(raw):
        if raw is not None:
            logger.debug(f"Dropping non-array coordinate sequence: {type(raw).__name__}")
        return []
    coordinates: list[Coordinate] = []
    for entry in raw:
        try:
            coordinates.append(coerce_point(entry))
        except MalformedGeometry as exc:
            logger.debug(f"Dropping malformed point: {exc}")
    return coordinates


def normalize_polygon(raw: Any) -> Optional[Area]:
    """Turn a raw polygon into a closed rain Area, or None if nothing valid remains."""
    if not _is_array(raw):
        logger.debug(f"Dropping non-array polygon: {type(raw).__name__}")
        return None
    points = normalize_coordinates(raw)
    if not points:
        logger.debug("Dropping polygon with no valid points")
        return None
    if points[0] != points[-1]:
        points.append(points[0])
    return Area(coordinates=tuple(points), is_raining=True)


def normalize_polygons(raw: Any) -> list[Area]:
    """Normalize every polygon of a raw polygon list, dropping the invalid ones."""
    if not _is_array(raw):
        return []
    areas: list[Area] = []
    for candidate in raw:
        area = normalize_polygon(candidate)
        if area is not None:
            areas.append(area)
    return areas


def flatten_route(routes: Iterable[list[Coordinate]]) -> list[Coordinate]:
    """Concatenate segment routes in order, without reordering or dedupe."""
    flattened: list[Coordinate] = []
    for route in routes:
        flattened.extend(route)
    return flattened
