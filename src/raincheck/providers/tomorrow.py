from __future__ import annotations

from typing import Any, List, Optional

from raincheck.core.models import Coordinate, ProviderTimeline, TimedValue
from raincheck.providers.base import (
    MAX_ENTRIES,
    ForecastProvider,
    ProviderError,
    ProviderUnavailable,
    parse_iso,
)
from raincheck.providers.http import HTTPClient


class TomorrowProvider(ForecastProvider):
    """
    Tomorrow.io timelines API, hourly precipitation intensity (mm/h).

    Needs an API key; without one every call raises ProviderUnavailable.
    Only the next two hours are requested.
    """

    name = "tomorrow.io"
    base_url = "https://api.tomorrow.io/v4/timelines"

    def __init__(self, client: HTTPClient, api_key: str = "", base_url: Optional[str] = None):
        self.client = client
        self.api_key = api_key
        self.base_url = base_url or self.base_url

    def fetch(self, coordinate: Coordinate) -> ProviderTimeline:
        if not self.api_key:
            raise ProviderUnavailable("tomorrow.io API key not configured")

        params = {
            "location": f"{coordinate.latitude:.4f},{coordinate.longitude:.4f}",
            "fields": "precipitationIntensity",
            "timesteps": "1h",
            "startTime": "now",
            "endTime": "nowPlus2h",
            "units": "metric",
            "apikey": self.api_key,
        }
        data = self.client.get_json(self.base_url, params=params)
        return self._parse(data)

    def _parse(self, data: Any) -> ProviderTimeline:
        try:
            timelines = data["data"]["timelines"]
        except (KeyError, TypeError) as e:
            raise ProviderError("tomorrow.io response has no data.timelines") from e

        try:
            hourly = next((tl for tl in timelines if tl.get("timestep") == "1h"), None)
            if hourly is None:
                raise ProviderError("tomorrow.io response has no hourly timeline")
            out = self._intervals(hourly.get("intervals") or [])
        except (TypeError, ValueError, AttributeError) as e:
            raise ProviderError(f"malformed tomorrow.io timeline: {e}") from e

        out.sort(key=lambda tv: tv.timestamp)
        return out[:MAX_ENTRIES]

    def _intervals(self, intervals: Any) -> List[TimedValue]:
        out: List[TimedValue] = []
        for interval in intervals:
            try:
                t = parse_iso(interval["startTime"])
            except (KeyError, TypeError, ValueError):
                continue
            value = (interval.get("values") or {}).get("precipitationIntensity")
            amount = max(0.0, float(value)) if value is not None else 0.0
            out.append(TimedValue(timestamp=t, precipitation_mm_per_hour=amount))
        return out
