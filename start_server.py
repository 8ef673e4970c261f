#!/usr/bin/env python3
"""Run the trip planner API under uvicorn, honouring HOST, PORT and RAINROUTE_LOG_LEVEL."""

import os
import sys
from pathlib import Path

import uvicorn

# Allow running from a checkout without installing the package
src_path = Path(__file__).resolve().parent / "src"
if src_path.is_dir() and str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


def _port() -> int:
    raw = os.environ.get("PORT", "8000")
    try:
        return int(raw)
    except ValueError:
        print(f"Warning: Invalid PORT value '{raw}', using default 8000", file=sys.stderr)
        return 8000


def main() -> int:
    from rainroute.config import settings

    host = os.environ.get("HOST", "0.0.0.0")
    port = _port()
    print(f"Starting {settings.app_name} on {host}:{port}...", file=sys.stderr)
    print(f"Weather-map backend: {settings.backend_base_url}", file=sys.stderr)
    # Single worker: the planner keeps its trip session in process memory
    uvicorn.run(
        "rainroute.main:app",
        host=host,
        port=port,
        proxy_headers=True,
        forwarded_allow_ips="*",
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
