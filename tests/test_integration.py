import httpx
import pytest
from fastapi.testclient import TestClient

from rainroute.main import create_app
from rainroute.services.backend.client import (
    CURRENT_WEATHER_PATH,
    INTEREST_POINT_PATH,
    LOCATION_SEARCH_PATH,
    RAIN_ZONE_PATH,
    WEATHER_AWARE_ROUTE_PATH,
    WeatherMapClient,
)

STEPS = {
    "steps": [
        {
            "route": [[48.85, 2.35], [48.86, 2.33]],
            "rain_polygons": [[[48.84, 2.32], [48.84, 2.36], [48.87, 2.36], [48.87, 2.32]]],
            "timestamp": 1700000000,
        },
        {"route": [[48.86, 2.33], [48.87, 2.31], [48.87, 2.29]], "rain_polygons": []},
    ]
}

BACKEND = {
    "/": (404, {"detail": "Not Found"}),
    RAIN_ZONE_PATH: (200, {"polygons": [[[48.8, 2.3], [48.8, 2.4], [48.9, 2.4]]]}),
    WEATHER_AWARE_ROUTE_PATH: (200, STEPS),
    CURRENT_WEATHER_PATH: (200, {"temperature": 9.5, "humidity": 70, "humidity_unit": "%"}),
    INTEREST_POINT_PATH: (200, {"fuel": [{"id": 5, "lat": 48.86, "lon": 2.33, "name": "Pump", "type": "fuel"}]}),
    LOCATION_SEARCH_PATH: (200, {"features": [{"label": "Paris", "coordinates": [2.3522, 48.8566]}]}),
}


def _backend(overrides=None) -> WeatherMapClient:
    responses = {**BACKEND, **(overrides or {})}

    def handler(request: httpx.Request) -> httpx.Response:
        status_code, body = responses[request.url.path]
        return httpx.Response(status_code, json=body)

    return WeatherMapClient(
        base_url="http://backend.test",
        max_retries=0,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def client():
    with TestClient(create_app(_backend())) as test_client:
        yield test_client


def _bind_both(client: TestClient) -> dict:
    client.post("/api/trip/locations/start?wait=true", json={"latitude": 48.85, "longitude": 2.35, "name": "Home"})
    response = client.post("/api/trip/locations/end?wait=true", json={"latitude": 48.87, "longitude": 2.29})
    assert response.status_code == 200
    return response.json()


def test_health_endpoints(client: TestClient):
    assert client.get("/api/health").json() == {"status": "ok"}

    backend = client.get("/api/health/backend").json()
    assert backend["healthy"] is True

    root = client.get("/").json()
    assert root["status"] == "running"


def test_empty_trip_snapshot(client: TestClient):
    payload = client.get("/api/trip").json()

    assert payload["start"] is None
    assert payload["end"] is None
    assert payload["route"] is None
    assert payload["active_rain"] == []
    assert payload["playback"]["slider_value"] == 0
    assert payload["playback"]["vehicle"] is None
    assert payload["weather_errors"] == {"start": False, "end": False}


def test_binding_locations_computes_route(client: TestClient):
    payload = _bind_both(client)

    assert payload["start"]["name"] == "Home"
    assert payload["start"]["weather"]["temperature"] == 9.5
    assert payload["end"]["weather"]["humidity_unit"] == "%"
    assert payload["segment_count"] == 2
    assert len(payload["route"]["coordinates"]) == 5
    assert payload["route"]["distance"] > 0
    assert payload["playback"]["segment_index"] == 0
    assert payload["playback"]["vehicle"] == {"latitude": 48.85, "longitude": 2.35}
    assert len(payload["active_rain"]) == 1
    assert payload["pending"] == []
    assert payload["notices"] == []

    segments = client.get("/api/trip/segments").json()
    assert [len(segment["route"]) for segment in segments] == [2, 3]
    assert segments[0]["timestamp"] == 1700000000

    interest_points = client.get("/api/trip/interest-points").json()
    assert interest_points["fuel"][0]["name"] == "Pump"


def test_playback_moves_vehicle(client: TestClient):
    _bind_both(client)

    end = client.put("/api/trip/playback", json={"value": 100}).json()
    assert end["point_index"] == 4
    assert end["segment_index"] == 1
    assert end["offset_in_segment"] == 2
    assert end["vehicle"] == {"latitude": 48.87, "longitude": 2.29}

    clamped = client.put("/api/trip/playback", json={"value": 250}).json()
    assert clamped["slider_value"] == 100

    assert client.get("/api/trip").json()["active_rain"] == []


def test_geojson_export(client: TestClient):
    _bind_both(client)

    collection = client.get("/api/trip/geojson").json()

    assert collection["type"] == "FeatureCollection"
    kinds = [feature["properties"]["kind"] for feature in collection["features"]]
    assert kinds == ["route", "rain", "start", "end", "vehicle"]
    line = collection["features"][0]["geometry"]
    assert line["type"] == "LineString"
    assert line["coordinates"][0] == [2.35, 48.85]


def test_reset_clears_trip(client: TestClient):
    _bind_both(client)

    payload = client.delete("/api/trip").json()

    assert payload["start"] is None
    assert payload["route"] is None
    assert payload["segment_count"] == 0
    assert client.get("/api/trip/interest-points").json() == {}


def test_route_requires_both_locations(client: TestClient):
    client.post("/api/trip/locations/start", json={"latitude": 48.85, "longitude": 2.35})

    response = client.post("/api/trip/route")

    assert response.status_code == 409


def test_unknown_role_is_rejected(client: TestClient):
    response = client.post("/api/trip/locations/middle", json={"latitude": 1, "longitude": 2})

    assert response.status_code == 400


def test_invalid_coordinates_are_rejected(client: TestClient):
    response = client.post("/api/trip/locations/start", json={"latitude": "north", "longitude": 2})

    assert response.status_code == 422


def test_suggestions(client: TestClient):
    payload = client.get("/api/locations/suggest", params={"role": "end", "query": "paris"}).json()

    assert payload["role"] == "end"
    assert payload["stale"] is False
    assert payload["suggestions"] == [{"label": "Paris", "latitude": 48.8566, "longitude": 2.3522}]

    short = client.get("/api/locations/suggest", params={"role": "end", "query": "p"}).json()
    assert short["suggestions"] == []
    assert short["sequence"] == payload["sequence"] + 1


def test_failures_surface_as_notices_and_502():
    backend = _backend(
        {
            WEATHER_AWARE_ROUTE_PATH: (200, {"error": "No route found"}),
            LOCATION_SEARCH_PATH: (500, {"detail": "search down"}),
        }
    )
    with TestClient(create_app(backend)) as client:
        payload = _bind_both(client)

        assert payload["route"] is None
        assert [notice["kind"] for notice in payload["notices"]] == ["no_route"]
        assert client.get("/api/trip").json()["notices"] == []

        response = client.get("/api/locations/suggest", params={"role": "start", "query": "paris"})
        assert response.status_code == 502
