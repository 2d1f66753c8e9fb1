from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from raincheck.core.models import MergedPoint, ProviderTimeline

HORIZON_HOURS = 2
ALIGN_TOLERANCE = timedelta(minutes=30)


def forecast_slots(now: Optional[datetime] = None, hours: int = HORIZON_HOURS) -> List[datetime]:
    """Hourly slot anchors covering the horizon, starting at the current hour (UTC)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    base = now.replace(minute=0, second=0, microsecond=0)
    return [base + timedelta(hours=h) for h in range(hours)]


def value_near(
    timeline: Optional[ProviderTimeline],
    t: datetime,
    tolerance: timedelta = ALIGN_TOLERANCE,
) -> Optional[float]:
    """Value of the entry closest to ``t`` if one lies within tolerance, else None."""
    if not timeline:
        return None

    best = None
    best_delta: Optional[timedelta] = None
    for tv in timeline:
        delta = abs(tv.timestamp - t)
        if delta > tolerance:
            continue
        if best_delta is None or delta < best_delta:
            best, best_delta = tv, delta
    return best.precipitation_mm_per_hour if best is not None else None


def merge_point(
    primary: Optional[ProviderTimeline],
    secondary: Optional[ProviderTimeline],
    slots: List[datetime],
) -> List[MergedPoint]:
    """
    Align both provider timelines to ``slots`` and fuse them.

    Either timeline may be None (provider failed); a slot with no value from
    either provider merges to 0.0.
    """
    return [
        MergedPoint(
            timestamp=t,
            primary_value=value_near(primary, t),
            secondary_value=value_near(secondary, t),
        )
        for t in slots
    ]
