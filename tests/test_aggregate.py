from __future__ import annotations

import itertools

from raincheck.core.aggregate import aggregate_route

from conftest import T0, at, point_of


def test_aggregate_empty_is_empty() -> None:
    assert aggregate_route([]) == []


def test_aggregate_takes_worst_point_per_slot() -> None:
    timelines = [
        point_of(55.0, [0.0, 0.0]),
        point_of(55.1, [0.0, 2.5]),
        point_of(55.2, [0.4, 0.0]),
    ]

    route = aggregate_route(timelines)

    assert [s.timestamp for s in route] == [T0, at(60)]
    assert [s.precipitation_mm_per_hour for s in route] == [0.4, 2.5]


def test_aggregate_is_independent_of_point_order() -> None:
    timelines = [
        point_of(55.0, [0.1, 0.0]),
        point_of(55.1, [0.0, 3.0]),
        point_of(55.2, [1.2, 0.7]),
    ]
    expected = aggregate_route(timelines)

    for perm in itertools.permutations(timelines):
        assert aggregate_route(list(perm)) == expected


def test_aggregate_tolerates_ragged_timelines() -> None:
    timelines = [
        point_of(55.0, [0.0, 0.0, 0.0]),
        point_of(55.1, [2.0]),
        point_of(55.2, [0.0, 0.0, 1.0]),
    ]

    route = aggregate_route(timelines)

    assert [s.precipitation_mm_per_hour for s in route] == [2.0, 0.0, 1.0]


def test_aggregate_length_follows_first_timeline() -> None:
    timelines = [point_of(55.0, [0.0]), point_of(55.1, [0.0, 5.0])]

    assert len(aggregate_route(timelines)) == 1
