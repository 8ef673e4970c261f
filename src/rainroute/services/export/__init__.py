"""Export services."""

from .geojson import trip_to_feature_collection

__all__ = ["trip_to_feature_collection"]
