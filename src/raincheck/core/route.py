"""Route sampling: straight-line sample points between two endpoints."""
from __future__ import annotations

from math import atan2, ceil, cos, radians, sin, sqrt
from typing import List

from raincheck.core.models import Coordinate


# ---------------------------------------------------------------------------
# Geo helpers
# ---------------------------------------------------------------------------

def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in metres between two WGS-84 points."""
    R = 6_371_000.0  # Earth radius in metres
    lat1r, lon1r, lat2r, lon2r = map(radians, [a.latitude, a.longitude, b.latitude, b.longitude])
    dlat = lat2r - lat1r
    dlon = lon2r - lon1r
    h = sin(dlat / 2) ** 2 + cos(lat1r) * cos(lat2r) * sin(dlon / 2) ** 2
    return R * 2 * atan2(sqrt(h), sqrt(1 - h))


def _interpolate_point(a: Coordinate, b: Coordinate, frac: float) -> Coordinate:
    """Linear interpolation in lat/lon space (frac in [0,1]).

    Not a great-circle slerp; fine at commute distances.
    """
    return Coordinate(
        latitude=a.latitude + frac * (b.latitude - a.latitude),
        longitude=a.longitude + frac * (b.longitude - a.longitude),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def interpolate_route(start: Coordinate, end: Coordinate, interval_m: float = 200.0) -> List[Coordinate]:
    """Evenly spaced points from start to end, both included, roughly ``interval_m`` apart."""
    total = haversine_m(start, end)
    n = max(2, int(ceil(total / interval_m)) + 1)
    return [_interpolate_point(start, end, i / (n - 1)) for i in range(n)]


def thin_points(points: List[Coordinate], min_spacing_m: float = 500.0) -> List[Coordinate]:
    """
    Greedy forward pass: keep a point only if it lies at least
    ``min_spacing_m`` from the last kept point. The first point is always kept.
    """
    if not points:
        return []

    kept = [points[0]]
    for p in points[1:]:
        if haversine_m(kept[-1], p) >= min_spacing_m:
            kept.append(p)
    return kept


def sample_route(
    start: Coordinate,
    end: Coordinate,
    interval_m: float = 200.0,
    min_spacing_m: float = 500.0,
) -> List[Coordinate]:
    """
    Sample coordinates along the straight line from ``start`` to ``end``.

    Parameters
    ----------
    start, end : Coordinate
        Route endpoints.
    interval_m : float
        Interpolation step (metres).
    min_spacing_m : float
        Minimum distance between two kept points (metres).

    Returns
    -------
    list of Coordinate
        Non-empty, ordered start to end. Identical endpoints collapse to one point.
    """
    return thin_points(interpolate_route(start, end, interval_m), min_spacing_m)
