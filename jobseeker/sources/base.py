from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import requests

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.ratelimit import RateGate

log = get_logger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Ordinary upstream failures: network, HTTP status, bad JSON, unexpected payload shape.
FETCH_ERRORS: tuple[type[BaseException], ...] = (
    requests.RequestException, ValueError, KeyError, TypeError, AttributeError,
)


class JobSource(ABC):
    name: str = "unknown"
    base_url: str = ""
    timeout: float = 15.0
    headers: dict[str, str] = {"User-Agent": DEFAULT_USER_AGENT, "Accept": "application/json"}

    def __init__(self, gate: RateGate | None = None) -> None:
        self.gate = gate or RateGate(0.5)

    @abstractmethod
    def search(self, keywords: str = "", location: str = "", page: int = 1, **hints: Any) -> list[Job]:
        """Fetch and normalize postings; returns [] instead of raising on ordinary failures."""

    def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> requests.Response:
        self.gate.wait()
        r = requests.get(
            url,
            params=params,
            headers=headers or self.headers,
            timeout=timeout or self.timeout,
        )
        r.raise_for_status()
        log.debug("%s GET %s -> %d", self.name, url, r.status_code)
        return r
