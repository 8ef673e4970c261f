"""Route group exports."""

from . import health, locations, trip

__all__ = ["health", "locations", "trip"]
