from __future__ import annotations

import math
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, List

from raincheck.core.models import Coordinate, ProviderTimeline, TimedValue
from raincheck.providers.base import MAX_ENTRIES, ForecastProvider, ProviderError


class MockProvider(ForecastProvider):
    """
    Deterministic fake data so the pipeline runs end-to-end without APIs.
    Rain varies a little along the route and with the hour.
    """

    name = "mock"

    def __init__(self, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self._clock = clock

    def fetch(self, coordinate: Coordinate) -> ProviderTimeline:
        base = self._clock().replace(minute=0, second=0, microsecond=0)
        geo = math.sin((coordinate.latitude + coordinate.longitude) * 10)

        out: List[TimedValue] = []
        for h in range(MAX_ENTRIES):
            wiggle = math.sin((base.hour + h) / 24 * math.tau)
            precip = max(0.0, 1.2 * wiggle + 0.4 * geo)
            out.append(TimedValue(timestamp=base + timedelta(hours=h), precipitation_mm_per_hour=round(precip, 2)))
        return out


class StaticProvider(ForecastProvider):
    """Returns a fixed timeline for every coordinate."""

    name = "static"

    def __init__(self, timeline: ProviderTimeline):
        self.timeline = list(timeline)
        self.calls = 0
        self._lock = threading.Lock()

    def fetch(self, coordinate: Coordinate) -> ProviderTimeline:
        with self._lock:
            self.calls += 1
        return list(self.timeline)


class FailingProvider(ForecastProvider):
    """Always raises; stands in for an outage."""

    name = "failing"

    def __init__(self, error: Exception | None = None):
        self.error = error or ProviderError("boom")
        self.calls = 0
        self._lock = threading.Lock()

    def fetch(self, coordinate: Coordinate) -> ProviderTimeline:
        with self._lock:
            self.calls += 1
        raise self.error
