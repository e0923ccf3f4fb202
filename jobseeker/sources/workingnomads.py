"""Working Nomads — remote job board exposing its listing as one JSON array.

Endpoint: https://www.workingnomads.com/api/exposed_jobs/
"""
from __future__ import annotations

from typing import Any

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.normalize import (
    dedupe, join_tags, matches_keywords, parse_datetime, sanitize_id, slug_from_url, stable_id,
)
from jobseeker.sources.base import FETCH_ERRORS, JobSource

log = get_logger(__name__)


class WorkingNomadsSource(JobSource):
    name = "workingnomads"
    base_url = "https://www.workingnomads.com"
    api_url = "https://www.workingnomads.com/api/exposed_jobs/"
    timeout = 20.0

    def search(self, keywords: str = "", location: str = "", page: int = 1, **hints: Any) -> list[Job]:
        limit = int(hints.get("limit") or 50)
        try:
            data = self._get(self.api_url).json()
            if not isinstance(data, list):
                log.warning("WorkingNomads returned unexpected payload type %s", type(data).__name__)
                return []
            jobs = [self._to_job(hit) for hit in data if isinstance(hit, dict)]
        except FETCH_ERRORS as exc:
            log.warning("WorkingNomads fetch error: %s", exc)
            return []

        if keywords:
            jobs = [j for j in jobs if matches_keywords(f"{j.title} {j.company} {j.tags} {j.description}", keywords)]
        if location:
            loc = location.lower()
            jobs = [j for j in jobs if loc in j.location.lower()]

        jobs = dedupe(sorted(jobs, key=lambda j: j.posted_at, reverse=True))
        log.debug("WorkingNomads returned %d jobs", len(jobs))
        return jobs[:limit]

    def _native_id(self, hit: dict) -> str:
        url = hit.get("url")
        job_id = slug_from_url(url, r"/job/go/(\d+)")
        if job_id:
            return job_id
        if url:
            return sanitize_id(url)
        return stable_id(hit.get("title"), hit.get("company_name"), hit.get("location"))

    def _to_job(self, hit: dict) -> Job:
        tags = join_tags(hit.get("tags"))
        category = hit.get("category_name")
        if category:
            tags = join_tags(f"{tags},{category}")

        return Job(
            external_id=f"workingnomads_{self._native_id(hit)}",
            source=self.name,
            title=hit.get("title") or "Unknown Position",
            company=hit.get("company_name") or "Unknown Company",
            location=hit.get("location") or "Remote",
            description=hit.get("description") or "",
            url=hit.get("url") or f"{self.base_url}/jobs",
            salary_currency="USD",
            job_type="remote",
            remote=True,
            tags=tags,
            posted_at=parse_datetime(hit.get("pub_date")),
        )
