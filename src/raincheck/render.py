"""Short text and icon names for an advisory, for CLI and HTTP consumers."""
from __future__ import annotations

from typing import Optional

from raincheck.core.models import AdvisoryStatus, ClearNow, FullyClear, PartialRain, RainingNow


def format_minutes(minutes: int) -> str:
    """45 -> "45m", 120 -> "2h", 90 -> "1h30m"; zero or less is "now"."""
    if minutes <= 0:
        return "now"
    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(minutes, 60)
    return f"{hours}h" if rest == 0 else f"{hours}h{rest}m"


def _when(minutes: int) -> str:
    return "now" if minutes <= 0 else f"in {format_minutes(minutes)}"


def status_icon(status: Optional[AdvisoryStatus]) -> str:
    if status is None:
        return "questionmark"
    if isinstance(status, FullyClear):
        return "sun.max"
    if isinstance(status, ClearNow):
        return "cloud.rain"
    if isinstance(status, RainingNow):
        return "cloud.sun.rain"
    return "cloud.sun.rain.fill"


def short_label(status: Optional[AdvisoryStatus]) -> Optional[str]:
    if status is None or isinstance(status, FullyClear):
        return None
    if isinstance(status, ClearNow):
        return format_minutes(status.minutes_until_rain)
    if isinstance(status, RainingNow):
        return format_minutes(status.minutes_until_least_rain)
    return format_minutes(status.dry_window_start_minutes)


def describe(status: Optional[AdvisoryStatus]) -> str:
    if status is None:
        return "Checking the forecast..."
    if isinstance(status, FullyClear):
        return "No rain expected on your route for the next 2 hours."
    if isinstance(status, ClearNow):
        where = f" {status.location}" if status.location else ""
        return f"Dry now; rain expected{where} {_when(status.minutes_until_rain)}."
    if isinstance(status, RainingNow):
        portion = f" ({status.affected_portion})" if status.affected_portion else ""
        return (
            f"Raining now{portion}; lightest ({status.rain_intensity:.1f} mm/h) "
            f"{_when(status.minutes_until_least_rain)}."
        )
    if isinstance(status, PartialRain):
        return (
            f"Raining now (up to {status.max_intensity:.1f} mm/h); dry from "
            f"{format_minutes(status.dry_window_start_minutes)} to "
            f"{format_minutes(status.dry_window_end_minutes)}."
        )
    raise TypeError(f"unknown advisory: {status!r}")
