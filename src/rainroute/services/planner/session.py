"""One trip session: locations, route, rain display and playback."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import fields
from typing import Optional

from ...config import settings
from ...models.domain import (
    Area,
    Coordinate,
    LocationRecord,
    LocationRole,
    Notice,
    PlaybackState,
    Route,
    RouteSegment,
    TripState,
)
from ..backend.client import WeatherMapClient
from .correlator import RouteWeatherCorrelator
from .errors import Cancelled, NoRouteFound, PlannerError, RequestFailed
from .interest_points import fetch_interest_points
from .lanes import LaneCategory, LaneToken, RequestLanes
from .locations import LocationWeatherBinder
from .playback import map_slider, select_rain_display
from .suggestions import SuggestionFeed

logger = logging.getLogger(__name__)

NOTICE_REQUEST_FAILED = "request_failed"
NOTICE_NO_ROUTE = "no_route"
NOTICE_WEATHER_FAILED = "weather_failed"


class TripPlanner:
    """Facade used by the selection layer and the map renderer.

    Selection calls (``bind_location``, ``fetch_weather``, ``refresh_route``,
    ``reset_all``) start lane work in the background and return at once.
    The renderer reads ``route``, ``active_rain``, ``vehicle`` and
    ``playback`` and drives ``set_playback``. Must be used from a running
    event loop.
    """

    def __init__(self, client: WeatherMapClient | None = None) -> None:
        self.client = client or WeatherMapClient()
        self.state = TripState()
        self.lanes = RequestLanes()
        self.correlator = RouteWeatherCorrelator(self.client, self.lanes, self.state)
        self.binder = LocationWeatherBinder(self.client, self.lanes, self.state)
        self.suggestions = SuggestionFeed(self.client)

    # Rendering surface

    @property
    def route(self) -> Optional[Route]:
        return self.state.route

    @property
    def segments(self) -> list[RouteSegment]:
        return self.state.segments

    @property
    def active_rain(self) -> list[Area]:
        return self.state.active_rain

    @property
    def playback(self) -> PlaybackState:
        return self.state.playback

    @property
    def vehicle(self) -> Optional[Coordinate]:
        return self.state.playback.vehicle

    def location(self, role: LocationRole) -> Optional[LocationRecord]:
        return self.state.locations[role]

    def set_playback(self, value: int) -> PlaybackState:
        self.state.playback = map_slider(value, self.state.route, self.state.segments)
        self.state.active_rain = select_rain_display(
            self.state.playback, self.state.segments, self.state.overview_rain
        )
        return self.state.playback

    def drain_notices(self) -> list[Notice]:
        notices, self.state.notices = self.state.notices, []
        return notices

    def pending(self) -> list[LaneCategory]:
        return self.lanes.pending()

    # Selection surface

    def bind_location(self, role: LocationRole, point: Coordinate, label: Optional[str] = None) -> LocationRecord:
        """Record a suggestion pick or map click and start the dependent fetches."""
        record = self.binder.bind_location(role, point, label)
        self.fetch_weather(role)
        if self.state.locations[role.other] is not None:
            self.refresh_route()
        else:
            self.lanes.abort(LaneCategory.ROUTE)
        return record

    def fetch_weather(self, role: LocationRole) -> Optional[LaneToken]:
        if self.state.locations[role] is None:
            return None
        return self.lanes.spawn(LaneCategory.weather_for(role), lambda token: self._run_weather(role, token))

    def refresh_route(self) -> Optional[LaneToken]:
        start = self.state.locations[LocationRole.START]
        end = self.state.locations[LocationRole.END]
        if start is None or end is None:
            return None
        return self.lanes.spawn(LaneCategory.ROUTE, lambda token: self._run_route(start, end, token))

    def reset_all(self) -> None:
        """Cancel every lane and forget both locations and the route."""
        for role in LocationRole:
            self.binder.clear(role)
            self.suggestions.clear(role)
        self.lanes.abort_all()
        slider_value = self.state.playback.slider_value
        fresh = TripState()
        fresh.playback = PlaybackState(slider_value=slider_value)
        for item in fields(TripState):
            setattr(self.state, item.name, getattr(fresh, item.name))
        logger.info("Trip reset")

    async def wait_idle(self) -> None:
        await self.lanes.join()

    async def close(self) -> None:
        tasks = self.lanes.tasks()
        self.lanes.abort_all()
        await asyncio.gather(*tasks, return_exceptions=True)
        await self.client.aclose()

    # Lane work

    def _notify(self, kind: str, message: str, role: Optional[LocationRole] = None) -> None:
        self.state.notices.append(Notice(kind=kind, message=message, role=role))

    async def _run_weather(self, role: LocationRole, token: LaneToken) -> None:
        try:
            await self.binder.fetch_weather(role, token)
        except Cancelled:
            logger.debug(f"Weather request for {role.value} cancelled")
        except RequestFailed as exc:
            logger.warning(f"Weather for {role.value} location failed: {exc.message}")
            self._notify(NOTICE_WEATHER_FAILED, exc.message, role)

    async def _run_route(self, start: LocationRecord, end: LocationRecord, token: LaneToken) -> None:
        try:
            segments = await self.correlator.compute_route(start, end, token)
        except Cancelled:
            logger.debug("Route computation cancelled")
            return
        except NoRouteFound as exc:
            self._notify(NOTICE_NO_ROUTE, exc.message)
            segments = None
        except RequestFailed as exc:
            logger.warning(f"Route computation failed: {exc.message}")
            self._notify(NOTICE_REQUEST_FAILED, exc.message)
            segments = None
        else:
            if segments is None:
                return
        # the overview replaced the display while loading; re-derive it from what is committed
        self.set_playback(self.state.playback.slider_value)
        if segments is None:
            return
        self.state.interest_points = {}
        if settings.interest_points_enabled and segments:
            self.lanes.spawn(LaneCategory.INTEREST_POINTS, self._run_interest_points)
        else:
            self.lanes.abort(LaneCategory.INTEREST_POINTS)

    async def _run_interest_points(self, token: LaneToken) -> None:
        try:
            await fetch_interest_points(
                self.client, self.lanes, self.state, settings.interest_point_max_samples, token
            )
        except Cancelled:
            logger.debug("Interest point request cancelled")
        except PlannerError as exc:
            logger.warning(f"Interest points unavailable: {exc.message}")
