"""Binds chosen trip endpoints to location records and their point weather."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from ...models.domain import Coordinate, LocationRecord, LocationRole, TripState
from ...schemas.weather import PointWeather
from ..backend.client import WeatherMapClient
from .errors import RequestFailed
from .lanes import LaneCategory, LaneToken, RequestLanes, lane_failures

logger = logging.getLogger(__name__)


class LocationWeatherBinder:
    def __init__(self, client: WeatherMapClient, lanes: RequestLanes, state: TripState) -> None:
        self.client = client
        self.lanes = lanes
        self.state = state

    def bind_location(self, role: LocationRole, point: Coordinate, label: Optional[str] = None) -> LocationRecord:
        """Replace the record for ``role`` with a fresh one that has no weather yet."""
        record = LocationRecord(latitude=point.latitude, longitude=point.longitude, name=label, weather=None)
        self.state.locations[role] = record
        self.state.weather_errors[role] = False
        logger.info(f"Bound {role.value} location to ({point.latitude:.5f}, {point.longitude:.5f})")
        return record

    def clear(self, role: LocationRole) -> None:
        self.lanes.abort(LaneCategory.weather_for(role))
        self.state.locations[role] = None
        self.state.weather_errors[role] = False

    async def fetch_weather(self, role: LocationRole, token: Optional[LaneToken] = None) -> Optional[LocationRecord]:
        """Fetch point weather for the record bound to ``role`` and merge it in.

        Returns the updated record, or None when there is no record or the
        answer arrived for a superseded request.
        """
        record = self.state.locations.get(role)
        if record is None:
            return None
        if token is None:
            token = self.lanes.start(LaneCategory.weather_for(role))

        try:
            with lane_failures(token):
                payload = await self.client.current_weather(record.coordinate)
                try:
                    weather = PointWeather.model_validate(payload)
                except ValidationError as exc:
                    raise RequestFailed(f"Unreadable weather for {role.value} location", token.category.value) from exc
        except RequestFailed:
            if self.lanes.is_current(token):
                self.state.weather_errors[role] = True
            raise

        if not self.lanes.is_current(token) or self.state.locations.get(role) is not record:
            logger.debug(f"Discarding stale weather for {role.value}")
            return None
        record.weather = {**(record.weather or {}), **weather.as_attributes()}
        self.state.weather_errors[role] = False
        return record
