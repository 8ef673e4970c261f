"""Failure taxonomy for trip planning requests."""

from __future__ import annotations

from typing import Optional


class PlannerError(Exception):
    def __init__(self, message: str = "", category: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.category = category


class Cancelled(PlannerError):
    """Lane work was superseded or aborted. Never shown to the user."""

    def __init__(self, category: Optional[str] = None) -> None:
        super().__init__(f"Request in lane '{category}' was cancelled", category)


class RequestFailed(PlannerError):
    """Transport error, timeout, non-2xx status or an error envelope from the backend."""

    def __init__(self, message: str, category: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message, category)
        self.status_code = status_code


class NoRouteFound(PlannerError):
    """The routing backend answered, but could not produce a route."""


class MalformedGeometry(PlannerError, ValueError):
    """A raw point or polygon could not be coerced into valid coordinates."""
