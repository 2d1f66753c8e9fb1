"""FastAPI app exposing the current commute advisory."""
from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from raincheck.core.models import AdvisoryStatus
from raincheck.monitor import AdvisoryMonitor, MonitorState, build_monitor
from raincheck.render import describe, short_label, status_icon

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class AdvisoryOut(BaseModel):
    phase: str
    advisory: Optional[AdvisoryStatus] = None
    icon: str
    label: Optional[str] = None
    text: str
    error: Optional[str] = None
    updated_at: Optional[datetime] = None


def _to_out(state: MonitorState) -> AdvisoryOut:
    return AdvisoryOut(
        phase=state.phase,
        advisory=state.advisory,
        icon=status_icon(state.advisory),
        label=short_label(state.advisory),
        text=describe(state.advisory),
        error=state.error,
        updated_at=state.updated_at,
    )


def create_app(monitor: Optional[AdvisoryMonitor] = None, background: bool = True) -> FastAPI:
    """
    Build the app around ``monitor``. With ``background`` a daemon thread
    refreshes the advisory every ``refresh_interval_s``.
    """
    from raincheck.config import settings

    monitor = monitor or build_monitor(settings)
    stop = threading.Event()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        worker = None
        if background:
            worker = threading.Thread(
                target=monitor.run_forever,
                args=(settings.refresh_interval_s, stop),
                name="raincheck-refresh",
                daemon=True,
            )
            worker.start()
        yield
        stop.set()
        if worker is not None:
            worker.join(timeout=1)
        monitor.close()

    app = FastAPI(title="RainCheck", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "phase": monitor.state.phase}

    @app.get("/advisory", response_model=AdvisoryOut)
    def get_advisory():
        return _to_out(monitor.state)

    @app.post("/advisory/refresh", response_model=AdvisoryOut)
    def refresh_advisory():
        return _to_out(monitor.refresh())

    return app
