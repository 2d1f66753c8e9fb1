from __future__ import annotations

from fastapi.testclient import TestClient

from raincheck.api import create_app
from raincheck.core.engine import CycleResult
from raincheck.core.models import PartialRain, RouteSnapshot
from raincheck.monitor import AdvisoryMonitor

from conftest import T0


def _monitor(advisory) -> AdvisoryMonitor:
    snapshot = RouteSnapshot(sample_points=[], point_timelines=[], start_label="Home", end_label="Work")
    return AdvisoryMonitor(lambda: CycleResult(route=[], snapshot=snapshot, advisory=advisory, computed_at=T0))


def test_health_and_loading_advisory() -> None:
    app = create_app(_monitor(PartialRain(dry_window_start_minutes=5, dry_window_end_minutes=40, max_intensity=1.2)), background=False)

    with TestClient(app) as client:
        health = client.get("/health")
        advisory = client.get("/advisory")

    assert health.status_code == 200
    assert health.json() == {"status": "ok", "phase": "loading"}
    body = advisory.json()
    assert body["phase"] == "loading"
    assert body["advisory"] is None
    assert body["icon"] == "questionmark"


def test_refresh_publishes_advisory() -> None:
    app = create_app(_monitor(PartialRain(dry_window_start_minutes=75, dry_window_end_minutes=100, max_intensity=1.2)), background=False)

    with TestClient(app) as client:
        refreshed = client.post("/advisory/refresh").json()
        current = client.get("/advisory").json()

    assert refreshed["phase"] == "available"
    assert refreshed["advisory"]["kind"] == "partial_rain"
    assert refreshed["advisory"]["dry_window_start_minutes"] == 75
    assert refreshed["label"] == "1h15m"
    assert refreshed["icon"] == "cloud.sun.rain.fill"
    assert current == refreshed


def test_shutdown_closes_monitor() -> None:
    closed = []
    snapshot = RouteSnapshot(sample_points=[], point_timelines=[], start_label="Home", end_label="Work")
    monitor = AdvisoryMonitor(
        lambda: CycleResult(route=[], snapshot=snapshot, advisory=None, computed_at=T0),
        on_close=lambda: closed.append(True),
    )

    with TestClient(create_app(monitor, background=False)) as client:
        assert client.get("/health").status_code == 200
        assert closed == []

    assert closed == [True]
