"""Route/weather correlation and playback for one trip session."""

from .errors import Cancelled, MalformedGeometry, NoRouteFound, PlannerError, RequestFailed

__all__ = ["PlannerError", "Cancelled", "RequestFailed", "NoRouteFound", "MalformedGeometry"]
