from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import pytest

from raincheck.core.models import (
    Coordinate,
    MergedPoint,
    PointTimeline,
    RouteSlot,
    TimedValue,
)

T0 = datetime(2026, 1, 22, 8, 0, tzinfo=timezone.utc)


def at(minutes: float) -> datetime:
    return T0 + timedelta(minutes=minutes)


def route_of(*pairs: tuple) -> List[RouteSlot]:
    """route_of((0, 1.0), (30, 0.0)) -> slots at T0+minutes."""
    return [RouteSlot(timestamp=at(m), precipitation_mm_per_hour=v) for m, v in pairs]


def timeline_of(*pairs: tuple) -> List[TimedValue]:
    return [TimedValue(timestamp=at(m), precipitation_mm_per_hour=v) for m, v in pairs]


def point_of(lat: float, values: Sequence[float], minutes: Optional[Sequence[float]] = None) -> PointTimeline:
    minutes = minutes if minutes is not None else [60 * i for i in range(len(values))]
    return PointTimeline(
        coordinate=Coordinate(latitude=lat, longitude=12.5),
        series=[MergedPoint(timestamp=at(m), primary_value=v) for m, v in zip(minutes, values)],
    )


class DictGeocoder:
    def __init__(self, places: dict):
        self.places = places

    def resolve(self, location_text: str) -> Coordinate:
        from raincheck.geo.geocoder import GeocodingFailed

        if location_text not in self.places:
            raise GeocodingFailed(f"no match for '{location_text}'")
        return self.places[location_text]


HOME = Coordinate(latitude=55.6761, longitude=12.5683)
WORK = Coordinate(latitude=55.7000, longitude=12.6000)


@pytest.fixture()
def geocoder() -> DictGeocoder:
    return DictGeocoder({"Home": HOME, "Work": WORK})
