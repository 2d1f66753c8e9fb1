from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

from raincheck.core.advisory import classify
from raincheck.core.aggregate import aggregate_route
from raincheck.core.merge import forecast_slots
from raincheck.core.models import AdvisoryStatus, Coordinate, RouteSnapshot, RouteTimeline
from raincheck.core.route import haversine_m, sample_route

log = logging.getLogger(__name__)


class Geocoder(Protocol):
    def resolve(self, location_text: str) -> Coordinate: ...


@dataclass(frozen=True)
class CycleResult:
    route: RouteTimeline
    snapshot: RouteSnapshot
    advisory: AdvisoryStatus
    computed_at: datetime


def run_cycle(
    start_text: str,
    end_text: str,
    geocoder: Geocoder,
    provider,
    *,
    interval_m: float = 200.0,
    min_spacing_m: float = 500.0,
    max_workers: int = 8,
    now: Optional[datetime] = None,
) -> CycleResult:
    """
    One end-to-end pass: geocode, sample, fetch every point, aggregate, classify.

    ``provider`` is anything with ``point_timeline(coordinate, slots)``
    (see CombinedProvider). Geocoding errors propagate; provider errors do not.
    """
    now = now or datetime.now(timezone.utc)

    start = geocoder.resolve(start_text)
    end = geocoder.resolve(end_text)

    log.info("Analyzing route: %s -> %s", start_text, end_text)
    log.info("Route distance: %.1fkm", haversine_m(start, end) / 1000)

    points = sample_route(start, end, interval_m=interval_m, min_spacing_m=min_spacing_m)
    log.info("Sampling weather at %d point(s) along the route", len(points))

    slots = forecast_slots(now)
    # Points are independent; wait for all of them, keeping route order
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(points)))) as ex:
        timelines = list(ex.map(lambda p: provider.point_timeline(p, slots), points))

    snapshot = RouteSnapshot(
        sample_points=points,
        point_timelines=timelines,
        start_label=start_text,
        end_label=end_text,
    )
    route = aggregate_route(timelines)
    advisory = classify(route, snapshot, now=now)
    log.info("Advisory: %s", advisory.kind)

    return CycleResult(route=route, snapshot=snapshot, advisory=advisory, computed_at=now)
