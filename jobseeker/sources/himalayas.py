"""Himalayas — remote job board with an offset-paginated JSON API (no API key required).

Endpoint: https://himalayas.app/jobs/api
"""
from __future__ import annotations

from typing import Any

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.normalize import (
    dedupe, join_tags, matches_keywords, normalize_job_type, parse_datetime, parse_salary,
    sanitize_id, slug_from_url, stable_id,
)
from jobseeker.sources.base import DEFAULT_USER_AGENT, FETCH_ERRORS, JobSource

log = get_logger(__name__)

MAX_REQUESTS = 3
MAX_PAGE_SIZE = 100


class HimalayasSource(JobSource):
    name = "himalayas"
    base_url = "https://himalayas.app"
    api_url = "https://himalayas.app/jobs/api"
    headers = {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": "https://himalayas.app/jobs",
    }

    def search(self, keywords: str = "", location: str = "", page: int = 1, **hints: Any) -> list[Job]:
        limit = int(hints.get("limit") or 50)
        page_size = min(limit, MAX_PAGE_SIZE)
        offset = (page - 1) * page_size

        jobs: list[Job] = []
        for _ in range(MAX_REQUESTS):
            if len(jobs) >= limit:
                break
            try:
                payload = self._get(self.api_url, params={"limit": page_size, "offset": offset}).json()
                hits = payload.get("jobs")
                if not isinstance(hits, list):
                    break
                jobs.extend(self._to_job(hit) for hit in hits)
                total = int(payload.get("totalCount") or 0)
            except FETCH_ERRORS as exc:
                log.warning("Himalayas offset=%d error: %s", offset, exc)
                break

            if not hits or (total and offset + len(hits) >= total):
                break
            offset += page_size

        if keywords:
            jobs = [j for j in jobs if matches_keywords(f"{j.title} {j.company} {j.tags} {j.description}", keywords)]
        if location:
            loc = location.lower()
            jobs = [j for j in jobs if loc in j.location.lower()]

        jobs = dedupe(jobs)
        log.debug("Himalayas returned %d unique jobs", len(jobs))
        return jobs[:limit]

    def _native_id(self, hit: dict) -> str:
        link = hit.get("guid") or hit.get("applicationLink")
        slug = slug_from_url(link, r"/jobs/([^/?#]+)/?$")
        if slug:
            return slug
        if link:
            return sanitize_id(link)
        return stable_id(hit.get("title"), hit.get("companyName"))

    def _to_job(self, hit: dict) -> Job:
        restrictions = hit.get("locationRestrictions") or []
        categories = hit.get("categories") or []
        seniority = hit.get("seniority") or []

        return Job(
            external_id=f"himalayas_{self._native_id(hit)}",
            source=self.name,
            title=hit.get("title") or "Unknown Position",
            company=hit.get("companyName") or "Unknown Company",
            location=", ".join(restrictions) if restrictions else "Remote",
            description=hit.get("description") or hit.get("excerpt") or "",
            url=hit.get("applicationLink") or hit.get("guid") or f"{self.base_url}/jobs",
            salary_min=parse_salary(hit.get("minSalary")),
            salary_max=parse_salary(hit.get("maxSalary")),
            salary_currency=hit.get("currency") or "USD",
            job_type=normalize_job_type(hit.get("employmentType"), default="full-time"),
            remote=True,
            tags=join_tags(list(categories) + list(seniority)),
            posted_at=parse_datetime(hit.get("pubDate")),
        )
