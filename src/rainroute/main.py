"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, locations, trip
from .config import settings
from .services.backend.client import WeatherMapClient
from .services.planner.session import TripPlanner

logger = logging.getLogger(__name__)


def create_app(client: WeatherMapClient | None = None) -> FastAPI:
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.planner = TripPlanner(client)
        logger.info(f"Trip planner ready, backend at {app.state.planner.client.base_url}")
        try:
            yield
        finally:
            await app.state.planner.close()
            app.state.planner = None

    app = FastAPI(
        title=settings.app_name,
        root_path="",
        lifespan=lifespan,
    )
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(locations.router, prefix=settings.api_prefix)
    app.include_router(trip.router, prefix=settings.api_prefix)
    return app


app = create_app()
