#!/usr/bin/env python3
"""Helper script to check and create the .env file for the trip planner."""

import sys
from pathlib import Path

TEMPLATE = """# Weather-map backend (rain zones, weather-aware routing, point weather)
RAINROUTE_BACKEND_BASE_URL=http://localhost:8080
RAINROUTE_REQUEST_TIMEOUT_SECONDS=15
RAINROUTE_MAX_RETRIES=1

# Routing constraints: comma-separated or JSON array
RAINROUTE_AVOID_CONDITIONS=rain
RAINROUTE_DYNAMIC_ROUTING=true

# Browser origins allowed to call the API
RAINROUTE_FRONTEND_ALLOWED_ORIGINS=http://localhost:5173,http://127.0.0.1:5173

RAINROUTE_LOG_LEVEL=INFO
"""

REQUIRED_KEYS = ("RAINROUTE_BACKEND_BASE_URL",)


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Trip Planner Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env at: {env_file}")
        print("   Edit RAINROUTE_BACKEND_BASE_URL to point at your backend.")
        return 0

    print(f"✅ Found .env file at: {env_file}")
    configured = {}
    for line in env_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        configured[key.strip().upper()] = value.strip()
        print(f"   {key.strip()}={value.strip()}")
    print()

    missing = [key for key in REQUIRED_KEYS if not configured.get(key)]
    if missing:
        print(f"❌ Missing required settings: {', '.join(missing)}")
        return 1
    print("✅ All required settings are present")
    return 0


if __name__ == "__main__":
    sys.exit(main())
