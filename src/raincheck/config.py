"""Centralized settings for raincheck."""
from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "RAINCHECK_"}

    # Commute endpoints as free-form place names
    start_location: str = "Copenhagen, Denmark"
    end_location: str = "Copenhagen, Denmark"

    # MET Norway rejects requests without an identifying User-Agent
    user_agent: str = "RainCheck/1.0 (contact@example.com)"
    http_timeout_s: float = 5.0
    http_tries: int = 2

    # Tomorrow.io: empty string means the secondary provider is unavailable
    tomorrow_api_key: str = ""

    # Route sampling
    sample_interval_m: float = 200.0
    min_spacing_m: float = 500.0

    # Fan-out and refresh loop
    max_workers: int = 8
    refresh_interval_s: int = 120

    log_level: str = "INFO"


settings = Settings()
