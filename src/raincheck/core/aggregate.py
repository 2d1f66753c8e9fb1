from __future__ import annotations

import logging
from typing import Sequence

from raincheck.core.models import PointTimeline, RouteSlot, RouteTimeline

log = logging.getLogger(__name__)


def aggregate_route(point_timelines: Sequence[PointTimeline]) -> RouteTimeline:
    """
    Worst case along the route: for each slot of the first timeline, the
    maximum combined value at that index across every point that has it.
    Shorter timelines stop contributing after their last slot.
    """
    if not point_timelines:
        return []

    base = point_timelines[0].series
    out: RouteTimeline = []
    for i, base_point in enumerate(base):
        worst = max(
            pt.series[i].combined_value
            for pt in point_timelines
            if i < len(pt.series)
        )
        out.append(RouteSlot(timestamp=base_point.timestamp, precipitation_mm_per_hour=worst))

    wet = [s for s in out if s.precipitation_mm_per_hour > 0]
    if wet:
        peak = max(wet, key=lambda s: s.precipitation_mm_per_hour)
        log.info(
            "Rain detected at %d time slot(s) along the route; max %.1f mm/h at %s",
            len(wet), peak.precipitation_mm_per_hour, peak.timestamp.isoformat(),
        )
    else:
        log.info("No rain expected along the route within the forecast horizon")

    return out
