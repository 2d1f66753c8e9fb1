from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, computed_field

from raincheck.core.fusion import combine


class Coordinate(BaseModel):
    model_config = {"frozen": True}

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class TimedValue(BaseModel):
    """One forecast sample from a single provider."""

    model_config = {"frozen": True}

    timestamp: datetime
    precipitation_mm_per_hour: float = Field(ge=0.0)


# Ascending by timestamp, at most two entries; ``None`` when the provider failed
ProviderTimeline = List[TimedValue]


class MergedPoint(BaseModel):
    model_config = {"frozen": True}

    timestamp: datetime
    primary_value: Optional[float] = None
    secondary_value: Optional[float] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def combined_value(self) -> float:
        return combine(self.primary_value, self.secondary_value)


class PointTimeline(BaseModel):
    model_config = {"frozen": True}

    coordinate: Coordinate
    series: List[MergedPoint] = Field(default_factory=list)

    def nearest_index(self, t: datetime, tolerance_s: float) -> Optional[int]:
        """Index of the slot closest to ``t`` within tolerance (first wins on ties)."""
        best: Optional[int] = None
        best_delta = 0.0
        for i, mp in enumerate(self.series):
            delta = abs((mp.timestamp - t).total_seconds())
            if delta > tolerance_s:
                continue
            if best is None or delta < best_delta:
                best, best_delta = i, delta
        return best


class RouteSnapshot(BaseModel):
    """Everything one fetch cycle learned about the route. Read-only."""

    model_config = {"frozen": True}

    sample_points: List[Coordinate]
    point_timelines: List[PointTimeline]
    start_label: str
    end_label: str


class RouteSlot(BaseModel):
    model_config = {"frozen": True}

    timestamp: datetime
    precipitation_mm_per_hour: float


RouteTimeline = List[RouteSlot]


# ---------------------------------------------------------------------------
# Advisory states
# ---------------------------------------------------------------------------

class FullyClear(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["fully_clear"] = "fully_clear"


class ClearNow(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["clear_now"] = "clear_now"
    minutes_until_rain: int
    location: Optional[str] = None


class RainingNow(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["raining_now"] = "raining_now"
    minutes_until_least_rain: int
    rain_intensity: float
    affected_portion: Optional[str] = None


class PartialRain(BaseModel):
    model_config = {"frozen": True}

    kind: Literal["partial_rain"] = "partial_rain"
    dry_window_start_minutes: int
    dry_window_end_minutes: int
    max_intensity: float


AdvisoryStatus = Annotated[
    Union[FullyClear, ClearNow, RainingNow, PartialRain],
    Field(discriminator="kind"),
]
