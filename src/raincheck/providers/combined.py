from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional

from raincheck.core.merge import merge_point
from raincheck.core.models import Coordinate, PointTimeline, ProviderTimeline
from raincheck.providers.base import ForecastProvider, ProviderError, ProviderUnavailable

log = logging.getLogger(__name__)


def _safe_fetch(provider: Optional[ForecastProvider], coordinate: Coordinate) -> Optional[ProviderTimeline]:
    """Run one provider; any failure becomes None so merging never sees an exception."""
    if provider is None:
        return None
    try:
        timeline = provider.fetch(coordinate)
    except ProviderUnavailable as e:
        log.debug("%s unavailable: %s", provider.name, e)
        return None
    except ProviderError as e:
        log.warning(
            "%s failed for (%.4f, %.4f): %s",
            provider.name, coordinate.latitude, coordinate.longitude, e,
        )
        return None
    except Exception as e:
        log.warning("%s raised %s: %s", provider.name, type(e).__name__, e)
        return None
    return timeline or None


class CombinedProvider:
    """
    Runs the primary and secondary providers for one point and merges them.

    Intended use:
      primary = MetNoProvider()     -> trusted precipitation
      secondary = TomorrowProvider() -> confirmation, optional
    """

    def __init__(
        self,
        primary: ForecastProvider,
        secondary: Optional[ForecastProvider] = None,
        max_workers: int = 2,
    ):
        self.primary = primary
        self.secondary = secondary
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="provider")

    def point_timeline(self, coordinate: Coordinate, slots: List[datetime]) -> PointTimeline:
        # Both calls run concurrently; each has its own failure domain
        primary_f = self._pool.submit(_safe_fetch, self.primary, coordinate)
        secondary_f = self._pool.submit(_safe_fetch, self.secondary, coordinate)
        primary = primary_f.result()
        secondary = secondary_f.result()

        return PointTimeline(
            coordinate=coordinate,
            series=merge_point(primary, secondary, slots),
        )

    def close(self) -> None:
        self._pool.shutdown(wait=True)


def build_provider(settings=None) -> CombinedProvider:
    """Build the met.no + Tomorrow.io stack from settings."""
    # Local imports to avoid circular imports
    from raincheck.config import settings as default_settings
    from raincheck.providers.http import HTTPClient
    from raincheck.providers.metno import MetNoProvider
    from raincheck.providers.tomorrow import TomorrowProvider

    cfg = settings or default_settings
    client = HTTPClient(
        user_agent=cfg.user_agent,
        timeout_s=cfg.http_timeout_s,
        tries=cfg.http_tries,
    )
    secondary = TomorrowProvider(client, api_key=cfg.tomorrow_api_key)
    return CombinedProvider(
        primary=MetNoProvider(client),
        secondary=secondary,
        max_workers=max(2, cfg.max_workers * 2),
    )
