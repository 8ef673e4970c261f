import asyncio

import httpx

from rainroute.models.domain import Coordinate, LocationRole
from rainroute.services.backend.client import (
    CURRENT_WEATHER_PATH,
    INTEREST_POINT_PATH,
    RAIN_ZONE_PATH,
    WEATHER_AWARE_ROUTE_PATH,
    WeatherMapClient,
)
from rainroute.services.planner import session as session_module
from rainroute.services.planner.lanes import LaneCategory
from rainroute.services.planner.session import (
    NOTICE_NO_ROUTE,
    NOTICE_REQUEST_FAILED,
    NOTICE_WEATHER_FAILED,
    TripPlanner,
)

START = Coordinate(48.85, 2.35)
END = Coordinate(48.87, 2.29)

ZONE = {"polygons": [[[48.8, 2.3], [48.8, 2.4], [48.9, 2.4]]]}
STEPS = {
    "steps": [
        {
            "route": [[48.85, 2.35], [48.86, 2.33]],
            "rain_polygons": [[[48.84, 2.32], [48.84, 2.36], [48.87, 2.36], [48.87, 2.32]]],
        },
        {"route": [[48.86, 2.33], [48.87, 2.31], [48.87, 2.29]], "rain_polygons": []},
    ]
}


def _handler(overrides=None, calls=None):
    defaults = {
        RAIN_ZONE_PATH: (200, ZONE),
        WEATHER_AWARE_ROUTE_PATH: (200, STEPS),
        CURRENT_WEATHER_PATH: (200, {"temperature": 11.0, "temperature_unit": "°C"}),
        INTEREST_POINT_PATH: (200, {"fuel": [{"id": 1, "lat": 48.86, "lon": 2.33, "name": "Pump"}]}),
    }
    overrides = {} if overrides is None else overrides

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request.url.path)
        # overrides are read per request so a test can change answers mid-trip
        status_code, body = {**defaults, **overrides}[request.url.path]
        return httpx.Response(status_code, json=body)

    return handler


def _run(handler, steps):
    """Drive a fresh planner through ``steps(planner)`` and close it afterwards."""

    async def scenario():
        client = WeatherMapClient(
            base_url="http://backend.test",
            max_retries=0,
            transport=httpx.MockTransport(handler),
        )
        planner = TripPlanner(client)
        try:
            result = await steps(planner)
        finally:
            await planner.close()
        return planner, result

    return asyncio.run(scenario())


def test_binding_both_locations_computes_route_weather_and_interest_points():
    calls = []

    async def steps(planner):
        planner.bind_location(LocationRole.START, START, "Start")
        planner.bind_location(LocationRole.END, END, "End")
        await planner.wait_idle()

    planner, _ = _run(_handler(calls=calls), steps)

    assert planner.location(LocationRole.START).weather == {"temperature": 11.0, "temperature_unit": "°C"}
    assert planner.location(LocationRole.END).name == "End"
    assert len(planner.segments) == 2
    assert len(planner.route.coordinates) == 5
    # slider at 0 sits in the first segment, which has its own rain
    assert planner.playback.segment_index == 0
    assert planner.active_rain == planner.segments[0].raining_area
    assert planner.vehicle == START
    assert planner.state.interest_points["fuel"][0].name == "Pump"
    assert calls.count(WEATHER_AWARE_ROUTE_PATH) == 1
    assert planner.drain_notices() == []
    assert planner.pending() == []


def test_single_location_does_not_route():
    calls = []

    async def steps(planner):
        planner.bind_location(LocationRole.START, START)
        await planner.wait_idle()

    planner, _ = _run(_handler(calls=calls), steps)

    assert calls == [CURRENT_WEATHER_PATH]
    assert planner.route is None
    assert planner.active_rain == []


def test_set_playback_moves_vehicle_and_rain():
    async def steps(planner):
        planner.bind_location(LocationRole.START, START)
        planner.bind_location(LocationRole.END, END)
        await planner.wait_idle()
        return planner.set_playback(100)

    planner, state = _run(_handler(), steps)

    assert state.point_index == 4
    assert state.segment_index == 1
    assert planner.vehicle == END
    assert planner.active_rain == []


def test_no_route_is_surfaced_and_previous_route_kept():
    overrides = {}

    async def steps(planner):
        planner.bind_location(LocationRole.START, START)
        planner.bind_location(LocationRole.END, END)
        await planner.wait_idle()
        committed = planner.route
        overrides[WEATHER_AWARE_ROUTE_PATH] = (200, {"error": "No route without rain"})
        planner.refresh_route()
        await planner.wait_idle()
        return committed

    planner, committed = _run(_handler(overrides), steps)

    assert planner.route is committed
    notices = planner.drain_notices()
    assert [notice.kind for notice in notices] == [NOTICE_NO_ROUTE]
    assert notices[0].message == "No route without rain"
    # the rain display is re-derived from the committed route, not left on the overview
    assert planner.active_rain == planner.segments[0].raining_area


def test_request_failures_become_notices():
    handler = _handler(
        {
            CURRENT_WEATHER_PATH: (500, {"detail": "boom"}),
            RAIN_ZONE_PATH: (503, {"detail": "radar down"}),
        }
    )

    async def steps(planner):
        planner.bind_location(LocationRole.START, START)
        planner.bind_location(LocationRole.END, END)
        await planner.wait_idle()

    planner, _ = _run(handler, steps)

    kinds = sorted(notice.kind for notice in planner.drain_notices())
    assert kinds == sorted([NOTICE_WEATHER_FAILED, NOTICE_WEATHER_FAILED, NOTICE_REQUEST_FAILED])
    assert planner.state.weather_errors == {LocationRole.START: True, LocationRole.END: True}
    assert planner.route is None
    assert planner.drain_notices() == []


def test_rebinding_supersedes_in_flight_route():
    calls = []

    async def steps(planner):
        planner.bind_location(LocationRole.START, START)
        planner.bind_location(LocationRole.END, END)
        first = planner.lanes.current(LaneCategory.ROUTE)
        planner.bind_location(LocationRole.END, Coordinate(48.9, 2.2))
        second = planner.lanes.current(LaneCategory.ROUTE)
        await planner.wait_idle()
        return first, second

    planner, (first, second) = _run(_handler(calls=calls), steps)

    assert first.cancelled is True
    assert first.task.cancelled() is True
    assert second is not first
    assert calls.count(WEATHER_AWARE_ROUTE_PATH) == 1
    assert planner.route is not None


def test_clearing_other_role_aborts_route(monkeypatch):
    monkeypatch.setattr(session_module.settings, "interest_points_enabled", False)
    calls = []

    async def steps(planner):
        planner.bind_location(LocationRole.START, START)
        planner.bind_location(LocationRole.END, END)
        await planner.wait_idle()
        planner.binder.clear(LocationRole.END)
        planner.bind_location(LocationRole.START, Coordinate(48.0, 2.0))
        await planner.wait_idle()

    planner, _ = _run(_handler(calls=calls), steps)

    assert calls.count(WEATHER_AWARE_ROUTE_PATH) == 1
    assert INTEREST_POINT_PATH not in calls
    assert planner.lanes.current(LaneCategory.ROUTE) is None
    # the last committed route stays until a new one replaces it
    assert planner.route is not None


def test_reset_all_cancels_lanes_and_clears_trip():
    async def steps(planner):
        planner.bind_location(LocationRole.START, START)
        planner.bind_location(LocationRole.END, END)
        await planner.wait_idle()
        planner.set_playback(70)
        planner.bind_location(LocationRole.START, Coordinate(48.0, 2.0))
        tokens = [planner.lanes.current(category) for category in LaneCategory]
        planner.reset_all()
        await asyncio.sleep(0)
        return [token for token in tokens if token is not None]

    planner, tokens = _run(_handler(), steps)

    assert tokens and all(token.cancelled for token in tokens)
    assert planner.location(LocationRole.START) is None
    assert planner.location(LocationRole.END) is None
    assert planner.route is None
    assert planner.segments == []
    assert planner.active_rain == []
    assert planner.state.interest_points == {}
    assert planner.playback.slider_value == 70
    assert planner.vehicle is None
    assert planner.pending() == []


def test_reset_all_clears_weather_error_flags():
    handler = _handler({CURRENT_WEATHER_PATH: (500, {"detail": "boom"})})

    async def steps(planner):
        planner.bind_location(LocationRole.START, START)
        await planner.wait_idle()
        flagged = dict(planner.state.weather_errors)
        planner.bind_location(LocationRole.END, END)
        weather_token = planner.lanes.current(LaneCategory.END_WEATHER)
        planner.reset_all()
        return flagged, weather_token

    planner, (flagged, weather_token) = _run(handler, steps)

    assert flagged[LocationRole.START] is True
    assert weather_token.cancelled is True
    assert planner.state.weather_errors == {LocationRole.START: False, LocationRole.END: False}
    assert planner.lanes.current(LaneCategory.END_WEATHER) is None
