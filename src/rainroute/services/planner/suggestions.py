"""Location suggestions with per-role sequence numbers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ...config import settings
from ...models.domain import LocationRole, LocationSuggestion
from ..backend.client import WeatherMapClient
from ..geometry import coerce_point
from .errors import MalformedGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SuggestionResult:
    sequence: int
    suggestions: list[LocationSuggestion]
    stale: bool = False


def parse_features(payload: Any) -> list[LocationSuggestion]:
    """Read ``{features: [{label, coordinates: [lon, lat]}]}`` into suggestions."""
    features = payload.get("features") if isinstance(payload, dict) else None
    if not isinstance(features, list):
        return []
    suggestions: list[LocationSuggestion] = []
    for feature in features:
        if not isinstance(feature, dict):
            continue
        raw = feature.get("coordinates")
        if not isinstance(raw, (list, tuple)) or len(raw) < 2:
            continue
        try:
            # GeoJSON order is lon, lat
            point = coerce_point([raw[1], raw[0]])
        except MalformedGeometry as exc:
            logger.debug(f"Dropping suggestion without usable coordinates: {exc}")
            continue
        label = feature.get("label")
        suggestions.append(LocationSuggestion(label=str(label) if label is not None else "", coordinate=point))
    return suggestions


class SuggestionFeed:
    """Keeps the latest suggestion list per role.

    Every lookup takes the next sequence number for its role. A result is
    kept only if no newer lookup for that role started while it was in
    flight, regardless of the order in which answers arrive.
    """

    def __init__(self, client: WeatherMapClient, min_query_length: Optional[int] = None) -> None:
        self.client = client
        self.min_query_length = min_query_length or settings.suggestion_min_query_length
        self._sequences: dict[LocationRole, int] = {role: 0 for role in LocationRole}
        self.results: dict[LocationRole, list[LocationSuggestion]] = {role: [] for role in LocationRole}

    def _next_sequence(self, role: LocationRole) -> int:
        self._sequences[role] += 1
        return self._sequences[role]

    def clear(self, role: LocationRole) -> None:
        self._next_sequence(role)
        self.results[role] = []

    async def suggest(self, role: LocationRole, query: str) -> SuggestionResult:
        sequence = self._next_sequence(role)
        query = (query or "").strip()
        if len(query) < self.min_query_length:
            self.results[role] = []
            return SuggestionResult(sequence=sequence, suggestions=[])

        payload = await self.client.search_locations(query)
        suggestions = parse_features(payload)
        if sequence != self._sequences[role]:
            logger.debug(f"Discarding out-of-order suggestions #{sequence} for {role.value}")
            return SuggestionResult(sequence=sequence, suggestions=self.results[role], stale=True)
        self.results[role] = suggestions
        return SuggestionResult(sequence=sequence, suggestions=suggestions)
