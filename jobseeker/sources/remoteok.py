"""RemoteOK — free bulk API of remote jobs (no API key required).

Docs: https://remoteok.com/api
The endpoint ignores query params and returns everything; filtering is client-side.
"""
from __future__ import annotations

from typing import Any

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.normalize import join_tags, matches_keywords, parse_datetime, parse_salary, stable_id
from jobseeker.sources.base import FETCH_ERRORS, JobSource

log = get_logger(__name__)


class RemoteOKSource(JobSource):
    name = "remoteok"
    base_url = "https://remoteok.com"
    api_url = "https://remoteok.com/api"

    def search(self, keywords: str = "", location: str = "", page: int = 1, **hints: Any) -> list[Job]:
        tags: list[str] = [t.lower() for t in hints.get("tags") or []]
        try:
            data = self._get(self.api_url).json()
        except FETCH_ERRORS as exc:
            log.warning("RemoteOK fetch error: %s", exc)
            return []

        if not isinstance(data, list):
            log.warning("RemoteOK returned unexpected payload type %s", type(data).__name__)
            return []

        # The first element is a legal notice without an id.
        hits = [h for h in data if isinstance(h, dict) and h.get("id")]

        if keywords:
            hits = [h for h in hits if matches_keywords(self._search_text(h), keywords)]
        if tags:
            hits = [h for h in hits if set(tags) & {str(t).lower() for t in h.get("tags") or []}]

        jobs: list[Job] = []
        for hit in hits:
            try:
                jobs.append(self._to_job(hit))
            except FETCH_ERRORS as exc:
                log.debug("RemoteOK skipping malformed entry %r: %s", hit.get("id"), exc)
        log.debug("RemoteOK matched %d of %d jobs", len(jobs), len(data))
        return jobs

    @staticmethod
    def _search_text(hit: dict) -> str:
        tags = " ".join(str(t) for t in hit.get("tags") or [])
        return f"{hit.get('position') or ''} {hit.get('description') or ''} {tags}"

    def _to_job(self, hit: dict) -> Job:
        native_id = hit.get("id") or stable_id(hit.get("position"), hit.get("company"))
        return Job(
            external_id=f"remoteok_{native_id}",
            source=self.name,
            title=hit.get("position") or hit.get("title") or "Unknown Position",
            company=hit.get("company") or "Unknown Company",
            location="Remote",
            description=hit.get("description") or hit.get("about") or "",
            url=hit.get("apply_url") or hit.get("url") or f"{self.base_url}/remote-jobs/{native_id}",
            salary_min=parse_salary(hit.get("salary_min")),
            salary_max=parse_salary(hit.get("salary_max")),
            salary_currency="USD",
            job_type="remote",
            remote=True,
            tags=join_tags(hit.get("tags")),
            posted_at=parse_datetime(hit.get("date") or hit.get("epoch")),
        )
