"""Place name to coordinate lookup (OpenStreetMap Nominatim)."""
from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from raincheck.core.models import Coordinate
from raincheck.providers.base import ProviderError
from raincheck.providers.http import HTTPClient

log = logging.getLogger(__name__)


class GeocodingFailed(RuntimeError):
    """No coordinate could be found for a location text."""


class NominatimGeocoder:
    base_url = "https://nominatim.openstreetmap.org/search"

    def __init__(self, client: HTTPClient, base_url: Optional[str] = None):
        self.client = client
        self.base_url = base_url or self.base_url
        # Endpoints rarely change between cycles
        self._cache: Dict[str, Coordinate] = {}
        self._lock = threading.Lock()

    def resolve(self, location_text: str) -> Coordinate:
        key = location_text.strip().lower()
        if not key:
            raise GeocodingFailed("empty location")

        with self._lock:
            if key in self._cache:
                return self._cache[key]

        try:
            results = self.client.get_json(
                self.base_url,
                params={"q": location_text, "format": "json", "limit": 1},
            )
        except ProviderError as e:
            raise GeocodingFailed(f"geocoding '{location_text}' failed: {e}") from e

        if not results:
            raise GeocodingFailed(f"no match for '{location_text}'")

        try:
            coord = Coordinate(latitude=float(results[0]["lat"]), longitude=float(results[0]["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingFailed(f"unexpected geocoder payload for '{location_text}'") from e

        log.debug("Geocoded %r -> (%.4f, %.4f)", location_text, coord.latitude, coord.longitude)
        with self._lock:
            self._cache[key] = coord
        return coord
