"""Async HTTP client for the weather-map backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence

import httpx

from ...config import settings
from ...models.domain import Coordinate
from ..planner.errors import RequestFailed

RAIN_ZONE_PATH = "/api/weather/rain/zone"
WEATHER_AWARE_ROUTE_PATH = "/api/routing/weather-aware"
CURRENT_WEATHER_PATH = "/api/weather/current"
LOCATION_SEARCH_PATH = "/api/location/search"
INTEREST_POINT_PATH = "/api/interest-point/get"

logger = logging.getLogger(__name__)


def _leg_params(start: Coordinate, end: Coordinate) -> dict[str, Any]:
    return {
        "startLat": start.latitude,
        "startLng": start.longitude,
        "endLat": end.latitude,
        "endLng": end.longitude,
    }


class WeatherMapClient:
    """Thin wrapper over the backend endpoints used by the trip planner.

    Every call returns the decoded JSON body. Transport errors, timeouts,
    non-2xx answers and undecodable bodies surface as RequestFailed once the
    retry budget is spent. Cancelling the awaiting task aborts the transfer.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.backend_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Weather-map backend base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.connect_timeout = connect_timeout if connect_timeout is not None else settings.connect_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.backoff_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        attempt = 0
        while True:
            try:
                # httpx limits each phase; wait_for bounds the whole attempt including the body
                response = await asyncio.wait_for(self._client.get(path, params=params), timeout=self.timeout)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code < 500 or attempt >= self.max_retries:
                    raise RequestFailed(
                        f"Backend answered {status_code} for {path}", status_code=status_code
                    ) from e
            except (httpx.TimeoutException, asyncio.TimeoutError) as e:
                if attempt >= self.max_retries:
                    logger.warning(f"Request to {path} timed out after {attempt + 1} attempts: {e}")
                    raise RequestFailed(f"Request to {path} timed out") from e
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    raise RequestFailed(f"Failed to reach backend at {self.base_url}: {e}") from e
            except ValueError as e:
                # Body was not JSON; retrying will not help
                raise RequestFailed(f"Backend returned an unreadable body for {path}") from e
            attempt += 1
            wait_time = self.backoff_seconds * (2 ** (attempt - 1))
            logger.debug(f"Retrying {path} in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
            await asyncio.sleep(wait_time)

    async def rain_zone(self, start: Coordinate, end: Coordinate) -> dict:
        """Rain polygons covering the straight start-to-end leg."""
        data = await self._get_json(RAIN_ZONE_PATH, params=_leg_params(start, end))
        if not isinstance(data, dict):
            raise RequestFailed("Rain zone response is not an object")
        if data.get("error"):
            raise RequestFailed(f"Rain zone lookup failed: {data['error']}")
        return data

    async def weather_aware_route(
        self,
        start: Coordinate,
        end: Coordinate,
        avoid_conditions: Sequence[str] | None = None,
        dynamic: bool | None = None,
    ) -> dict:
        """Stepped route; each step carries its own rain polygons.

        Domain-level errors (``{"error": ...}``) are returned as-is for the
        caller to interpret.
        """
        conditions = settings.avoid_conditions if avoid_conditions is None else avoid_conditions
        params = _leg_params(start, end)
        params["avoidConditions"] = ",".join(conditions)
        params["dynamic"] = "true" if (settings.dynamic_routing if dynamic is None else dynamic) else "false"
        data = await self._get_json(WEATHER_AWARE_ROUTE_PATH, params=params)
        if not isinstance(data, dict):
            raise RequestFailed("Routing response is not an object")
        return data

    async def current_weather(self, point: Coordinate) -> dict:
        data = await self._get_json(
            CURRENT_WEATHER_PATH, params={"lat": point.latitude, "lng": point.longitude}
        )
        if not isinstance(data, dict):
            raise RequestFailed("Weather response is not an object")
        if data.get("error"):
            raise RequestFailed(f"Weather lookup failed: {data['error']}")
        return data

    async def search_locations(self, query: str) -> dict:
        data = await self._get_json(LOCATION_SEARCH_PATH, params={"query": query})
        if not isinstance(data, dict):
            raise RequestFailed("Location search response is not an object")
        return data

    async def interest_points(self, points: Sequence[Coordinate]) -> dict:
        if not points:
            return {}
        params = {
            "lat": ",".join(str(point.latitude) for point in points),
            "lng": ",".join(str(point.longitude) for point in points),
        }
        data = await self._get_json(INTEREST_POINT_PATH, params=params)
        if not isinstance(data, dict):
            raise RequestFailed("Interest point response is not an object")
        return data

    async def ping(self) -> bool:
        """Report whether the backend answers HTTP at all.

        The backend has no dedicated health endpoint, so any HTTP response from
        its root (even 404) counts as reachable.
        """
        try:
            await self._client.get("/", timeout=5.0)
            return True
        except httpx.HTTPError as e:
            logger.debug(f"Backend ping failed: {e}")
            return False


async def check_health(base_url: str | None = None) -> bool:
    """Probe the configured backend with a short-lived client."""
    client = WeatherMapClient(base_url=base_url, max_retries=0)
    try:
        return await client.ping()
    finally:
        await client.aclose()
