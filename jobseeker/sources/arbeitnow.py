"""Arbeitnow — free European job board API (no API key required).

Docs: https://www.arbeitnow.com/api/job-board-api
"""
from __future__ import annotations

from typing import Any

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.normalize import join_tags, looks_remote, normalize_job_type, parse_datetime, stable_id
from jobseeker.sources.base import FETCH_ERRORS, JobSource

log = get_logger(__name__)


class ArbeitnowSource(JobSource):
    name = "arbeitnow"
    base_url = "https://www.arbeitnow.com"
    api_url = "https://www.arbeitnow.com/api/job-board-api"

    def search(self, keywords: str = "", location: str = "", page: int = 1, **hints: Any) -> list[Job]:
        params: dict[str, Any] = {"page": page, "sort_by": "date"}
        if keywords:
            params["query"] = keywords
        if location:
            params["location"] = location

        try:
            payload = self._get(self.api_url, params=params).json()
            hits = payload.get("data") or []
            jobs = [self._to_job(hit) for hit in hits]
        except FETCH_ERRORS as exc:
            log.warning("Arbeitnow query=%r page=%d error: %s", keywords, page, exc)
            return []

        log.debug("Arbeitnow query=%r page=%d returned %d jobs", keywords, page, len(jobs))
        return jobs

    def _to_job(self, hit: dict) -> Job:
        title = hit.get("title") or "Unknown Position"
        company = hit.get("company_name") or "Unknown Company"
        loc = hit.get("location") or "Remote/Unknown"
        native_id = hit.get("slug") or hit.get("id") or stable_id(title, company, loc)
        tags = hit.get("tags") or []
        job_types = hit.get("job_types") or []

        return Job(
            external_id=f"arbeitnow_{native_id}",
            source=self.name,
            title=title,
            company=company,
            location=loc,
            description=hit.get("description") or ", ".join(tags),
            url=hit.get("url") or hit.get("apply_url") or f"{self.base_url}/jobs/{native_id}",
            salary_currency="EUR",
            job_type=normalize_job_type(job_types[0] if job_types else None, default="full-time"),
            remote=bool(hit.get("remote")) or looks_remote(hit.get("location")),
            tags=join_tags(tags),
            posted_at=parse_datetime(hit.get("created_at")),
        )
