"""Weather-map backend client."""

from .client import WeatherMapClient, check_health

__all__ = ["WeatherMapClient", "check_health"]
