from __future__ import annotations

from raincheck.core.models import Coordinate
from raincheck.core.route import haversine_m, interpolate_route, sample_route, thin_points

from conftest import HOME, WORK


def test_haversine_known_distance() -> None:
    # One degree of latitude is ~111.2 km
    d = haversine_m(Coordinate(latitude=0.0, longitude=0.0), Coordinate(latitude=1.0, longitude=0.0))
    assert 111_000 < d < 111_400


def test_interpolate_route_includes_both_endpoints() -> None:
    pts = interpolate_route(HOME, WORK, interval_m=200)

    assert pts[0] == HOME
    assert abs(pts[-1].latitude - WORK.latitude) < 1e-9
    assert abs(pts[-1].longitude - WORK.longitude) < 1e-9
    assert len(pts) >= 2


def test_sample_route_is_ordered_and_spaced() -> None:
    pts = sample_route(HOME, WORK, interval_m=200, min_spacing_m=500)

    assert len(pts) >= 2
    assert pts[0] == HOME
    lats = [p.latitude for p in pts]
    assert lats == sorted(lats)
    for a, b in zip(pts, pts[1:]):
        assert haversine_m(a, b) >= 500


def test_sample_route_never_longer_than_interpolation() -> None:
    assert len(sample_route(HOME, WORK)) <= len(interpolate_route(HOME, WORK))


def test_sample_route_identical_endpoints_collapse_to_one_point() -> None:
    pts = sample_route(HOME, HOME)

    assert pts == [HOME]


def test_thin_points_is_greedy_from_last_kept() -> None:
    # 0 m, 300 m, 600 m, 900 m north (approximately)
    step = 300 / 111_195
    pts = [Coordinate(latitude=55.0 + i * step, longitude=12.0) for i in range(4)]

    kept = thin_points(pts, min_spacing_m=500)

    assert kept == [pts[0], pts[2]]


def test_thin_points_empty() -> None:
    assert thin_points([]) == []
