"""Adzuna job search — authenticated aggregator with Spain/Europe coverage.

Free tier: 250 requests/day.  Sign up at https://developer.adzuna.com/
"""
from __future__ import annotations

from typing import Any

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.normalize import (
    join_tags, looks_remote, normalize_job_type, parse_datetime, parse_salary, stable_id,
)
from jobseeker.ratelimit import RateGate
from jobseeker.sources.base import FETCH_ERRORS, JobSource

log = get_logger(__name__)

API_ROOT = "https://api.adzuna.com/v1/api/jobs"
RESULTS_PER_PAGE = 50
MAX_DAYS_OLD = 7

# The API has used all of these for the posting date across versions.
_DATE_KEYS = ("created", "created_at", "date")

_CURRENCIES: dict[str, str] = {"gb": "GBP", "us": "USD", "ca": "CAD", "au": "AUD", "in": "INR", "pl": "PLN"}


class AdzunaSource(JobSource):
    name = "adzuna"
    base_url = "https://www.adzuna.es"

    def __init__(self, app_id: str, app_key: str, country: str = "es", gate: RateGate | None = None) -> None:
        super().__init__(gate)
        self.app_id = app_id
        self.app_key = app_key
        self.country = country
        self.base_url = f"https://www.adzuna.{'co.uk' if country == 'gb' else country}"

    @property
    def configured(self) -> bool:
        return bool(self.app_id and self.app_key)

    def search(self, keywords: str = "", location: str = "", page: int = 1, **hints: Any) -> list[Job]:
        if not self.configured:
            log.warning("Adzuna credentials not configured (ADZUNA_APP_ID / ADZUNA_APP_KEY)")
            return []

        params: dict[str, Any] = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "what": keywords,
            "max_days_old": MAX_DAYS_OLD,
            "sort_by": "date",
            "results_per_page": RESULTS_PER_PAGE,
        }
        if location:
            params["where"] = location

        try:
            r = self._get(f"{API_ROOT}/{self.country}/search/{page}", params=params)
            results = r.json().get("results") or []
            jobs = [self._to_job(hit) for hit in results]
        except FETCH_ERRORS as exc:
            log.warning("Adzuna what=%r where=%r error: %s", keywords, location, exc)
            return []

        log.debug("Adzuna what=%r where=%r returned %d jobs", keywords, location, len(jobs))
        return jobs

    def _to_job(self, hit: dict) -> Job:
        title = hit.get("title") or "Unknown Position"
        company = (hit.get("company") or {}).get("display_name") or "Unknown Company"
        loc = (hit.get("location") or {}).get("display_name") or ""
        description = hit.get("description") or ""
        native_id = hit.get("id") or stable_id(title, company, loc)

        posted = next((hit[k] for k in _DATE_KEYS if hit.get(k)), None)
        category = hit.get("category") or {}

        return Job(
            external_id=f"adzuna_{native_id}",
            source=self.name,
            title=title,
            company=company,
            location=loc,
            description=description,
            url=hit.get("redirect_url") or f"{self.base_url}/details/{native_id}",
            salary_min=parse_salary(hit.get("salary_min")),
            salary_max=parse_salary(hit.get("salary_max")),
            salary_currency=hit.get("salary_currency") or _CURRENCIES.get(self.country, "EUR"),
            job_type=normalize_job_type(hit.get("contract_time") or hit.get("contract_type")),
            remote=looks_remote(title, description),
            tags=join_tags([category.get("tag") or category.get("label")]),
            posted_at=parse_datetime(posted),
        )
