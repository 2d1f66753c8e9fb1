from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from raincheck.core.models import Coordinate, ProviderTimeline

# Only the first entries each provider returns are kept (about two hours)
MAX_ENTRIES = 2


class ProviderError(RuntimeError):
    """Network, decode or entitlement failure from a forecast source."""


class ProviderUnavailable(ProviderError):
    """The provider is not usable here (no API key, no entitlement)."""


class ForecastProvider(ABC):
    """Fetch a short precipitation timeline for one coordinate."""

    name: str = "provider"

    @abstractmethod
    def fetch(self, coordinate: Coordinate) -> ProviderTimeline:
        raise NotImplementedError


def parse_iso(dt: str) -> datetime:
    """ISO-8601 timestamp to an aware datetime (UTC when no offset is given)."""
    parsed = datetime.fromisoformat(dt.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
