"""Remotive — free API for remote tech jobs (no API key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

import re
from typing import Any

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.normalize import (
    dedupe, join_tags, looks_remote, matches_keywords, normalize_job_type, parse_datetime, stable_id,
)
from jobseeker.sources.base import FETCH_ERRORS, JobSource

log = get_logger(__name__)

# Used, in order, when the caller gives no keywords.
TECH_CATEGORIES: list[str] = ["software-dev", "devops", "data", "qa"]
MAX_CATEGORY_REQUESTS = 2
MAX_PAGE_SIZE = 100

_SALARY_RANGE = re.compile(r"\$?([\d,.]+)\s*(k)?\s*[-–]\s*\$?([\d,.]+)\s*(k)?", re.IGNORECASE)


def parse_salary_range(text: str | None) -> tuple[int | None, int | None]:
    """``"$100k - $140k"`` -> ``(100000, 140000)``; anything else -> ``(None, None)``."""
    if not text:
        return None, None
    m = _SALARY_RANGE.search(text)
    if not m:
        return None, None
    try:
        low = int(float(m.group(1).replace(",", "")))
        high = int(float(m.group(3).replace(",", "")))
    except ValueError:
        return None, None
    has_k = bool(m.group(2) or m.group(4))
    if has_k:
        low = low * 1000 if low < 10000 else low
        high = high * 1000 if high < 10000 else high
    return low, high


class RemotiveSource(JobSource):
    name = "remotive"
    base_url = "https://remotive.com"
    api_url = "https://remotive.com/api/remote-jobs"

    def search(self, keywords: str = "", location: str = "", page: int = 1, **hints: Any) -> list[Job]:
        limit = int(hints.get("limit") or 50)
        params: dict[str, Any] = {"limit": min(limit, MAX_PAGE_SIZE)}

        jobs: list[Job] = []
        if keywords:
            jobs = self._fetch({**params, "search": keywords})
            jobs = [j for j in jobs if matches_keywords(f"{j.title} {j.company} {j.tags} {j.description}", keywords)]
        else:
            for category in TECH_CATEGORIES[:MAX_CATEGORY_REQUESTS]:
                jobs.extend(self._fetch({**params, "category": category}))

        jobs = dedupe(jobs)
        log.debug("Remotive returned %d unique jobs", len(jobs))
        return jobs[:limit]

    def _fetch(self, params: dict[str, Any]) -> list[Job]:
        try:
            hits = self._get(self.api_url, params=params).json().get("jobs")
            if not isinstance(hits, list):
                return []
            return [self._to_job(hit) for hit in hits]
        except FETCH_ERRORS as exc:
            log.warning("Remotive params=%r error: %s", params, exc)
            return []

    def _to_job(self, hit: dict) -> Job:
        title = hit.get("title") or "Unknown Position"
        company = hit.get("company_name") or "Unknown Company"
        loc = hit.get("candidate_required_location") or "Remote"
        native_id = hit.get("id") or stable_id(title, company, loc)
        salary_min, salary_max = parse_salary_range(hit.get("salary"))

        return Job(
            external_id=f"remotive_{native_id}",
            source=self.name,
            title=title,
            company=company,
            location=loc,
            description=hit.get("description") or hit.get("excerpt") or "",
            url=hit.get("url") or f"{self.base_url}/remote-jobs/{native_id}",
            salary_min=salary_min,
            salary_max=salary_max,
            salary_currency="USD",
            job_type=normalize_job_type(hit.get("job_type"), default="full-time"),
            remote=looks_remote(loc),
            tags=join_tags(hit.get("tags")),
            posted_at=parse_datetime(hit.get("publication_date")),
        )
