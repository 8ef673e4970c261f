"""Point weather schema as returned by the backend's current-weather endpoint."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PointWeather(BaseModel):
    """Flat attribute bag for one coordinate; every value carries an optional unit."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    temperature: Optional[float] = None
    temperature_unit: Optional[str] = None
    apparent_temperature: Optional[float] = None
    apparent_temperature_unit: Optional[str] = None
    humidity: Optional[float] = None
    humidity_unit: Optional[str] = None
    wind_speed: Optional[float] = Field(default=None, alias="windSpeed")
    wind_speed_unit: Optional[str] = Field(default=None, alias="windSpeed_unit")
    rain: Optional[float] = None
    rain_unit: Optional[str] = None
    precipitation: Optional[float] = None
    precipitation_unit: Optional[str] = None
    cloud_cover: Optional[float] = Field(default=None, alias="cloudCover")
    cloud_cover_unit: Optional[str] = Field(default=None, alias="cloudCover_unit")
    visibility: Optional[float] = None
    visibility_unit: Optional[str] = None

    def as_attributes(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
