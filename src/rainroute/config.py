"""Application configuration and settings management."""

from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="RAINROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Rain Route Planner API"
    api_prefix: str = "/api"
    backend_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the weather-map backend (rain zones, routing, point weather).",
    )
    request_timeout_seconds: float = Field(
        default=15.0,
        gt=0.0,
        description="Upper bound for one backend request attempt, including reading the body.",
    )
    connect_timeout_seconds: float = Field(default=5.0, gt=0.0)
    max_retries: int = Field(default=1, ge=0)
    backoff_seconds: float = Field(default=0.5, ge=0.0)
    avoid_conditions: tuple[str, ...] = Field(
        default=("rain",),
        description="Weather conditions the routing backend should route around.",
    )
    dynamic_routing: bool = Field(
        default=True,
        description="Ask the backend for time-stepped routing (one rain frame per step).",
    )
    suggestion_min_query_length: int = Field(default=3, ge=1)
    interest_points_enabled: bool = True
    interest_point_max_samples: int = Field(default=8, ge=2)
    average_speed_kmh: float = Field(
        default=40.0,
        gt=0.0,
        description="Speed used to estimate route duration from its length.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )
    log_level: str = "INFO"

    @field_validator("frontend_allowed_origins", "avoid_conditions", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        return str(value or "INFO").strip().upper()


settings = Settings()
