"""
Run several job sources in sequence and merge their results.

Each source gets its own search strategy (query fan-out, paging, category
choice) because the upstreams differ too much for one uniform call.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.normalize import dedupe, split_keywords
from jobseeker.sources import JobSource, Registry

log = get_logger(__name__)

DEFAULT_LIMIT = 100

DEFAULT_KEYWORDS: list[str] = [
    "software engineer", "desarrollador", "programador",
    "tech lead", "engineering manager", "cto", "vp engineering",
]
DEFAULT_LOCATIONS: list[str] = ["madrid", "barcelona", "valencia", "españa"]

# Caps the adzuna keyword x location fan-out.
MAX_FANOUT_KEYWORDS = 3
MAX_FANOUT_LOCATIONS = 2

REMOTEOK_DEFAULT_TAGS: list[str] = ["software", "engineering"]


class ProgressCallback(Protocol):
    def __call__(self, source: str, found: int, processed: int, error: str | None = None) -> None: ...


@dataclass
class SearchContext:
    """Arguments a strategy needs besides the adapter."""

    keywords: str
    location: str
    limit: int
    default_keywords: list[str]
    default_locations: list[str]


Strategy = Callable[[JobSource, SearchContext], list[Job]]


def _adzuna(source: JobSource, ctx: SearchContext) -> list[Job]:
    keywords = [ctx.keywords] if ctx.keywords else ctx.default_keywords
    locations = [ctx.location] if ctx.location else ctx.default_locations
    jobs: list[Job] = []
    for kw in keywords[:MAX_FANOUT_KEYWORDS]:
        for loc in locations[:MAX_FANOUT_LOCATIONS]:
            jobs.extend(source.search(kw, loc))
    return jobs


def _remoteok(source: JobSource, ctx: SearchContext) -> list[Job]:
    tags = split_keywords(ctx.keywords) or REMOTEOK_DEFAULT_TAGS
    return source.search(ctx.keywords, "", tags=tags)


def _arbeitnow(source: JobSource, ctx: SearchContext) -> list[Job]:
    jobs = source.search(ctx.keywords, ctx.location, page=1)
    if len(jobs) < ctx.limit / 2:
        jobs = jobs + source.search(ctx.keywords, ctx.location, page=2)
    return jobs


def _weworkremotely(source: JobSource, ctx: SearchContext) -> list[Job]:
    category = "" if ctx.keywords else "programming"
    return source.search(ctx.keywords, "remote", category=category)


def _limited(source: JobSource, ctx: SearchContext) -> list[Job]:
    return source.search(ctx.keywords, ctx.location, limit=ctx.limit)


def _generic(source: JobSource, ctx: SearchContext) -> list[Job]:
    return source.search(ctx.keywords, ctx.location)


STRATEGIES: dict[str, Strategy] = {
    "adzuna": _adzuna,
    "remoteok": _remoteok,
    "arbeitnow": _arbeitnow,
    "weworkremotely": _weworkremotely,
    "himalayas": _limited,
    "workingnomads": _limited,
    "remotive": _limited,
}


def drop_invalid(jobs: Iterable[Job], source: str) -> list[Job]:
    valid: list[Job] = []
    dropped = 0
    for job in jobs:
        missing = job.missing_fields()
        if missing:
            dropped += 1
            log.debug("[%s] dropping %r: missing %s", source, job.external_id, ", ".join(missing))
            continue
        valid.append(job)
    if dropped:
        log.warning("[%s] dropped %d job(s) failing validation", source, dropped)
    return valid


def _as_list(sources: str | Iterable[str]) -> list[str]:
    return sources.split(",") if isinstance(sources, str) else list(sources)


class Orchestrator:
    def __init__(
        self,
        registry: Registry,
        *,
        default_keywords: Iterable[str] | None = None,
        default_locations: Iterable[str] | None = None,
    ) -> None:
        self.registry = registry
        self.default_keywords = list(default_keywords or DEFAULT_KEYWORDS)
        self.default_locations = list(default_locations or DEFAULT_LOCATIONS)

    def available_sources(self) -> list[str]:
        return list(self.registry)

    def resolve(self, sources: str | Iterable[str]) -> list[str]:
        """Registry names for *sources*; a string is read as a comma-separated list."""
        names = [s.strip().lower() for s in _as_list(sources) if s and s.strip()]
        if "all" in names:
            return list(self.registry)
        return [n for n in dict.fromkeys(names) if n in self.registry]

    def run(
        self,
        sources: str | Iterable[str] = ("all",),
        keywords: str = "",
        location: str = "",
        limit: int = DEFAULT_LIMIT,
        on_progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
        on_start: Callable[[str], None] | None = None,
    ) -> list[Job]:
        requested = _as_list(sources)
        names = self.resolve(requested)
        if not names:
            log.warning("No valid sources in %r (available: %s)", requested, ", ".join(self.registry))
            return []

        log.info("Running %d source(s): %s", len(names), ", ".join(names))
        ctx = SearchContext(keywords, location, limit, self.default_keywords, self.default_locations)
        collected: list[Job] = []

        for name in names:
            if cancel is not None and cancel.is_set():
                log.warning("Run cancelled before %s", name)
                break
            if on_start:
                on_start(name)
            try:
                source = self.registry[name]()
                strategy = STRATEGIES.get(name, _generic)
                jobs = dedupe(drop_invalid(strategy(source, ctx), name))
            except Exception as exc:
                log.error("[%s] FAILED: %s", name, exc)
                if on_progress:
                    on_progress(name, 0, 0, str(exc))
                continue

            log.info("[%s] %d unique jobs", name, len(jobs))
            if on_progress:
                on_progress(name, len(jobs), len(jobs))
            collected.extend(jobs)

        unique = dedupe(collected)
        log.info("Total: %d unique jobs from %d source(s)", len(unique), len(names))
        return unique[:limit]
