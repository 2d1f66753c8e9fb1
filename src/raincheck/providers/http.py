from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests.exceptions import ConnectionError, ReadTimeout

from raincheck.providers.base import ProviderError, ProviderUnavailable


@dataclass
class HTTPClient:
    user_agent: str
    timeout_s: float = 5.0
    tries: int = 2
    backoff_s: float = 0.5

    def __post_init__(self) -> None:
        self.s = requests.Session()
        self.s.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            }
        )

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``url`` and decode JSON, retrying timeouts and dropped connections."""
        last_err: Optional[Exception] = None
        for attempt in range(self.tries):
            try:
                r = self.s.get(url, params=params, timeout=self.timeout_s)
            except (ReadTimeout, ConnectionError) as e:
                last_err = e
                if attempt + 1 < self.tries:
                    time.sleep(self.backoff_s * (2**attempt))
                continue
            except requests.RequestException as e:
                raise ProviderError(f"request failed: {e}") from e

            if r.status_code in (401, 403):
                raise ProviderUnavailable(f"HTTP {r.status_code} from {url}")
            if r.status_code >= 400:
                raise ProviderError(f"HTTP {r.status_code} from {url}")
            try:
                return r.json()
            except ValueError as e:
                raise ProviderError(f"invalid JSON from {url}") from e

        raise ProviderError(f"request to {url} failed after {self.tries} tries") from last_err
