#!/usr/bin/env python3
"""Script to verify weather-map backend connectivity."""

import asyncio
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from rainroute.config import settings
from rainroute.models.domain import Coordinate
from rainroute.services.backend.client import WeatherMapClient, check_health
from rainroute.services.planner.correlator import build_segments
from rainroute.services.planner.errors import RequestFailed
from rainroute.services.geometry import normalize_polygons

# Two points in central Paris
SAMPLE_START = Coordinate(latitude=48.8566, longitude=2.3522)
SAMPLE_END = Coordinate(latitude=48.8738, longitude=2.2950)


async def run_checks() -> int:
    print("=" * 60)
    print("Weather-Map Backend Connection Test")
    print("=" * 60)
    print()

    print("1. Checking backend configuration...")
    if not settings.backend_base_url:
        print("   [ERROR] RAINROUTE_BACKEND_BASE_URL is not configured")
        return 1
    print(f"   [OK] Backend URL: {settings.backend_base_url}")
    print(f"   [OK] Request timeout: {settings.request_timeout_seconds}s")
    print()

    print("2. Testing backend reachability...")
    if not await check_health():
        print("   [ERROR] Backend is not responding")
        return 1
    print("   [OK] Backend answered")
    print()

    client = WeatherMapClient()
    try:
        print("3. Testing rain zone request...")
        try:
            zone = await client.rain_zone(SAMPLE_START, SAMPLE_END)
        except RequestFailed as exc:
            print(f"   [ERROR] Rain zone request failed: {exc.message}")
            return 1
        areas = normalize_polygons(zone.get("polygons"))
        print(f"   [OK] {len(areas)} rain polygon(s) in the overview")
        print()

        print("4. Testing weather-aware routing...")
        try:
            payload = await client.weather_aware_route(SAMPLE_START, SAMPLE_END)
        except RequestFailed as exc:
            print(f"   [ERROR] Routing request failed: {exc.message}")
            return 1
        if isinstance(payload, dict) and payload.get("error"):
            print(f"   [WARN] Backend found no route: {payload['error']}")
        else:
            segments = build_segments(payload.get("steps") if isinstance(payload, dict) else None)
            points = sum(len(segment.route) for segment in segments)
            print(f"   [OK] {len(segments)} step(s), {points} route point(s)")
        print()
    finally:
        await client.aclose()

    print("=" * 60)
    print("[SUCCESS] Weather-map backend is connected and working!")
    print("=" * 60)
    return 0


def main() -> int:
    return asyncio.run(run_checks())


if __name__ == "__main__":
    sys.exit(main())
