"""Periodic advisory refresher.

Owns the latest advisory and re-runs the pipeline on an interval.
A cycle that finishes after a newer one has already published is dropped,
and a failed cycle keeps the previous advisory on display.

Run with:  python -m raincheck.monitor
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Literal, Optional

from raincheck.core.engine import CycleResult
from raincheck.core.models import AdvisoryStatus
from raincheck.geo.geocoder import GeocodingFailed

log = logging.getLogger(__name__)

Phase = Literal["loading", "available", "stale"]


@dataclass(frozen=True)
class MonitorState:
    phase: Phase = "loading"
    advisory: Optional[AdvisoryStatus] = None
    error: Optional[str] = None
    updated_at: Optional[datetime] = None
    generation: int = 0
    result: Optional[CycleResult] = None


class AdvisoryMonitor:
    def __init__(self, cycle: Callable[[], CycleResult], on_close: Optional[Callable[[], None]] = None):
        self._cycle = cycle
        self._on_close = on_close
        self._lock = threading.Lock()
        self._started = 0
        self._state = MonitorState()

    @property
    def state(self) -> MonitorState:
        with self._lock:
            return self._state

    def refresh(self) -> MonitorState:
        """Run one cycle and publish it unless a newer cycle already has."""
        with self._lock:
            self._started += 1
            generation = self._started

        try:
            result = self._cycle()
        except GeocodingFailed as e:
            log.error("Could not compute advisory this cycle: %s", e)
            return self._publish_failure(generation, str(e))
        except Exception as e:
            log.exception("Advisory cycle error: %s", e)
            return self._publish_failure(generation, f"{type(e).__name__}: {e}")

        with self._lock:
            if generation < self._state.generation:
                log.info("Dropping stale cycle %d (already at %d)", generation, self._state.generation)
                return self._state
            self._state = MonitorState(
                phase="available",
                advisory=result.advisory,
                updated_at=result.computed_at,
                generation=generation,
                result=result,
            )
            return self._state

    def _publish_failure(self, generation: int, error: str) -> MonitorState:
        with self._lock:
            if generation < self._state.generation:
                return self._state
            # keep whatever advisory was last shown
            self._state = replace(
                self._state,
                phase="stale",
                error=error,
                updated_at=datetime.now(timezone.utc),
                generation=generation,
            )
            return self._state

    def run_forever(
        self,
        interval_s: float,
        stop: Optional[threading.Event] = None,
        on_state: Optional[Callable[[MonitorState], None]] = None,
    ) -> None:
        stop = stop or threading.Event()
        while not stop.is_set():
            state = self.refresh()
            if on_state is not None:
                on_state(state)
            log.info("Sleeping %ds until next cycle", interval_s)
            stop.wait(interval_s)

    def close(self) -> None:
        """Release the provider worker pool."""
        if self._on_close is not None:
            self._on_close()
            self._on_close = None


def build_monitor(settings=None, provider=None, geocoder=None) -> AdvisoryMonitor:
    """Wire the pipeline to live providers using settings."""
    from functools import partial

    from raincheck.config import settings as default_settings
    from raincheck.core.engine import run_cycle
    from raincheck.geo.geocoder import NominatimGeocoder
    from raincheck.providers.combined import build_provider
    from raincheck.providers.http import HTTPClient

    cfg = settings or default_settings
    if geocoder is None:
        geocoder = NominatimGeocoder(
            HTTPClient(user_agent=cfg.user_agent, timeout_s=cfg.http_timeout_s, tries=cfg.http_tries)
        )
    provider = provider or build_provider(cfg)

    cycle = partial(
        run_cycle,
        cfg.start_location,
        cfg.end_location,
        geocoder,
        provider,
        interval_m=cfg.sample_interval_m,
        min_spacing_m=cfg.min_spacing_m,
        max_workers=cfg.max_workers,
    )
    return AdvisoryMonitor(cycle, on_close=getattr(provider, "close", None))


def main() -> None:
    from raincheck.config import settings
    from raincheck.render import describe

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [raincheck] %(levelname)s %(message)s",
    )
    log.info("Monitor starting (interval=%ds)", settings.refresh_interval_s)

    monitor = build_monitor(settings)
    try:
        monitor.run_forever(
            settings.refresh_interval_s,
            on_state=lambda state: log.info("%s: %s", state.phase, describe(state.advisory)),
        )
    except KeyboardInterrupt:
        log.info("Monitor stopped")
    finally:
        monitor.close()


if __name__ == "__main__":
    main()
