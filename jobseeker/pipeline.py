"""
Job aggregation pipeline.

Runs: scrape (orchestrator) → score → persist jobs + matches → log one run per source.
Both the CLI and the daily scheduler call :func:`run`.
"""
from __future__ import annotations

import threading
from collections import Counter
from datetime import datetime
from typing import Any, Iterable

from jobseeker.config import Settings, load_settings
from jobseeker.log import get_logger
from jobseeker.models import ScraperRun, utcnow
from jobseeker.orchestrator import DEFAULT_LIMIT, Orchestrator
from jobseeker.profile import Profile, load_profile
from jobseeker.scorer import score_job
from jobseeker.sources import Registry, build_registry
from jobseeker.store import HIGH_MATCH_SCORE, JobStore

log = get_logger(__name__)


def build_orchestrator(profile: Profile, registry: Registry) -> Orchestrator:
    return Orchestrator(
        registry,
        default_keywords=profile.search.keywords or None,
        default_locations=profile.search.locations or None,
    )


def run(
    *,
    sources: str | Iterable[str] = ("all",),
    keywords: str = "",
    location: str = "",
    limit: int = DEFAULT_LIMIT,
    profile: Profile | None = None,
    store: JobStore | None = None,
    settings: Settings | None = None,
    registry: Registry | None = None,
    cancel: threading.Event | None = None,
) -> dict[str, Any]:
    settings = settings or load_settings()
    profile = profile or load_profile(settings.profile_path)
    owns_store = store is None
    store = store or JobStore(settings.db_path)
    registry = registry if registry is not None else build_registry(settings)

    runs: dict[str, ScraperRun] = {}
    started: dict[str, datetime] = {}

    def on_start(source: str) -> None:
        started[source] = utcnow()

    def on_progress(source: str, found: int, processed: int, error: str | None = None) -> None:
        runs[source] = ScraperRun(
            source=source, jobs_found=found, error=error,
            started_at=started.get(source) or utcnow(), finished_at=utcnow(),
        )

    try:
        orchestrator = build_orchestrator(profile, registry)
        jobs = orchestrator.run(
            sources, keywords=keywords, location=location, limit=limit,
            on_progress=on_progress, cancel=cancel, on_start=on_start,
        )

        added: Counter[str] = Counter()
        updated: Counter[str] = Counter()
        high = 0
        for job in jobs:
            result = score_job(job, profile)
            job_id, is_new = store.upsert_job(job)
            store.upsert_match(job_id, result)
            (added if is_new else updated)[job.source] += 1
            if result.score >= HIGH_MATCH_SCORE:
                high += 1

        for source, scraper_run in runs.items():
            scraper_run.jobs_added = added[source]
            scraper_run.jobs_updated = updated[source]
            store.record_run(scraper_run)
    finally:
        if owns_store:
            store.close()

    errors = {s: r.error for s, r in runs.items() if r.error}
    log.info(
        "Run complete — found=%d, added=%d, updated=%d, high matches=%d, failed sources=%d",
        len(jobs), sum(added.values()), sum(updated.values()), high, len(errors),
    )
    return {
        "jobs_found": len(jobs),
        "jobs_added": sum(added.values()),
        "jobs_updated": sum(updated.values()),
        "high_matches": high,
        "errors": errors,
        "runs": list(runs.values()),
    }


def rescore(profile: Profile, store: JobStore) -> dict[str, int]:
    """Recompute the match row of every stored job against *profile*."""
    jobs = store.all_jobs()
    log.info("Recalculating scores for %d jobs...", len(jobs))
    updated = 0
    errors = 0
    for job_id, job in jobs:
        try:
            store.upsert_match(job_id, score_job(job, profile))
            updated += 1
        except Exception as exc:
            log.error("Rescore failed for job %d: %s", job_id, exc)
            errors += 1
        if updated and updated % 50 == 0:
            log.info("Processed %d/%d jobs...", updated, len(jobs))
    return {"total_jobs": len(jobs), "updated": updated, "errors": errors}
