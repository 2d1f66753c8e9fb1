from __future__ import annotations

import logging
from typing import Any, List, Optional

from raincheck.core.models import Coordinate, ProviderTimeline, TimedValue
from raincheck.providers.base import MAX_ENTRIES, ForecastProvider, ProviderError, parse_iso
from raincheck.providers.http import HTTPClient

log = logging.getLogger(__name__)


def _next_hour_amount(entry: dict) -> float:
    """data.next_1_hours.details.precipitation_amount, 0.0 when missing."""
    details = ((entry.get("data") or {}).get("next_1_hours") or {}).get("details") or {}
    amount = details.get("precipitation_amount")
    if amount is None:
        return 0.0
    return max(0.0, float(amount))


class MetNoProvider(ForecastProvider):
    """
    MET Norway Locationforecast 2.0 (compact).

    Public, no key; requires a descriptive User-Agent.
    """

    name = "met.no"
    base_url = "https://api.met.no/weatherapi/locationforecast/2.0/compact"

    def __init__(self, client: HTTPClient, base_url: Optional[str] = None):
        self.client = client
        self.base_url = base_url or self.base_url

    def fetch(self, coordinate: Coordinate) -> ProviderTimeline:
        # met.no asks for at most 4 decimals
        params = {
            "lat": round(coordinate.latitude, 4),
            "lon": round(coordinate.longitude, 4),
        }
        data = self.client.get_json(self.base_url, params=params)
        return self._parse(data)

    def _parse(self, data: Any) -> ProviderTimeline:
        try:
            series = data["properties"]["timeseries"]
        except (KeyError, TypeError) as e:
            raise ProviderError("met.no response has no properties.timeseries") from e

        try:
            out = self._entries(series)
        except (TypeError, ValueError, AttributeError) as e:
            raise ProviderError(f"malformed met.no timeseries: {e}") from e

        out.sort(key=lambda tv: tv.timestamp)
        return out[:MAX_ENTRIES]

    def _entries(self, series: Any) -> List[TimedValue]:
        out: List[TimedValue] = []
        for entry in series:
            try:
                t = parse_iso(entry["time"])
            except (KeyError, TypeError, ValueError):
                log.debug("Skipping met.no entry without a valid time: %r", entry)
                continue
            out.append(TimedValue(timestamp=t, precipitation_mm_per_hour=_next_hour_amount(entry)))
        return out
