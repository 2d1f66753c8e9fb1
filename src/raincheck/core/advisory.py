"""Turn a route-level precipitation timeline into one advisory state."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from raincheck.core.models import (
    AdvisoryStatus,
    ClearNow,
    FullyClear,
    PartialRain,
    RainingNow,
    RouteSnapshot,
    RouteTimeline,
)

# Trace precipitation at or below this still counts as dry
DRY_THRESHOLD_MM = 0.1
MIN_DRY_WINDOW = timedelta(minutes=15)
LOCATION_TOLERANCE_S = 30 * 60
# A third of the route must average above this to be singled out
PORTION_THRESHOLD_MM = 0.2


@dataclass(frozen=True)
class DryWindow:
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def _minutes_between(now: datetime, t: datetime) -> int:
    return math.floor((t - now).total_seconds() / 60)


def find_dry_windows(route: RouteTimeline) -> List[DryWindow]:
    """
    Maximal runs of dry slots, in chronological order, at least 15 minutes long.

    A run ends at the first wet slot after it; a run still open at the end of
    the timeline is closed at the last slot's timestamp.
    """
    windows: List[DryWindow] = []
    dry_start: Optional[datetime] = None

    for slot in route:
        if slot.precipitation_mm_per_hour <= DRY_THRESHOLD_MM:
            if dry_start is None:
                dry_start = slot.timestamp
        elif dry_start is not None:
            windows.append(DryWindow(start=dry_start, end=slot.timestamp))
            dry_start = None

    if dry_start is not None and route:
        windows.append(DryWindow(start=dry_start, end=route[-1].timestamp))

    return [w for w in windows if w.duration >= MIN_DRY_WINDOW]


def rain_location(at: datetime, snapshot: RouteSnapshot) -> Optional[str]:
    """Name the part of the route where rain at ``at`` is heaviest."""
    timelines = snapshot.point_timelines
    if not timelines:
        return None

    matched = False
    max_rain = 0.0
    max_idx = 0
    for point_idx, pt in enumerate(timelines):
        slot_idx = pt.nearest_index(at, LOCATION_TOLERANCE_S)
        if slot_idx is None:
            continue
        matched = True
        rain = pt.series[slot_idx].combined_value
        if rain > max_rain:
            max_rain = rain
            max_idx = point_idx

    if not matched:
        return None

    total = len(snapshot.sample_points)
    position = max_idx / (total - 1) if total > 1 else 0.0

    if position < 0.3:
        return f"near {snapshot.start_label}"
    if position > 0.7:
        return f"near {snapshot.end_label}"
    return "mid-route"


def rain_distribution(snapshot: RouteSnapshot) -> Optional[str]:
    """Which third of the route is wettest right now, if any stands out."""
    if not snapshot.point_timelines:
        return None

    current = [pt.series[0].combined_value if pt.series else 0.0 for pt in snapshot.point_timelines]
    third = len(current) // 3
    if third == 0:
        return "throughout route"

    def avg(values: List[float]) -> float:
        return sum(values) / len(values)

    start_avg = avg(current[:third])
    middle_avg = avg(current[third:2 * third])
    end_avg = avg(current[-third:])
    peak = max(start_avg, middle_avg, end_avg)

    # start, then destination, then middle
    if start_avg == peak and start_avg > PORTION_THRESHOLD_MM:
        return "heaviest near start"
    if end_avg == peak and end_avg > PORTION_THRESHOLD_MM:
        return "heaviest near destination"
    if middle_avg == peak and middle_avg > PORTION_THRESHOLD_MM:
        return "heaviest mid-route"
    return "throughout route"


def classify(
    route: RouteTimeline,
    snapshot: Optional[RouteSnapshot] = None,
    now: Optional[datetime] = None,
) -> AdvisoryStatus:
    """
    Classify the route timeline relative to ``now``.

    ``snapshot`` only enriches the location commentary; the state itself
    depends on ``route`` alone.
    """
    if not route:
        return FullyClear()

    now = now or datetime.now(timezone.utc)
    current = route[0].precipitation_mm_per_hour

    if current <= 0:
        first_wet = next((s for s in route if s.precipitation_mm_per_hour > 0), None)
        if first_wet is None:
            return FullyClear()

        location = rain_location(first_wet.timestamp, snapshot) if snapshot is not None else None
        return ClearNow(
            minutes_until_rain=_minutes_between(now, first_wet.timestamp),
            location=location,
        )

    windows = find_dry_windows(route)
    if windows:
        window = windows[0]
        leading = [
            s.precipitation_mm_per_hour
            for s in route
            if now <= s.timestamp <= window.start
        ]
        return PartialRain(
            dry_window_start_minutes=_minutes_between(now, window.start),
            dry_window_end_minutes=_minutes_between(now, window.end),
            max_intensity=max(leading) if leading else current,
        )

    # min() keeps the first of equal values
    driest = min(route, key=lambda s: s.precipitation_mm_per_hour)
    portion = rain_distribution(snapshot) if snapshot is not None else None
    return RainingNow(
        minutes_until_least_rain=_minutes_between(now, driest.timestamp),
        rain_intensity=driest.precipitation_mm_per_hour,
        affected_portion=portion,
    )
