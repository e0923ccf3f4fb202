"""
Command-line entry point.

  jobseeker scrape [--sources all] [--keywords ...] [--location ...] [--limit 100]
  jobseeker jobs [--min-score 0] [--status all] [--favorited] [--search ...]
  jobseeker job ID
  jobseeker mark ID [--status applied] [--favorite/--unfavorite] [--notes ...]
  jobseeker stats
  jobseeker rescore
  jobseeker sources

Pass -v before the command for DEBUG console output.
"""
from __future__ import annotations

import argparse
import json
import signal
import sys
import threading
from contextlib import contextmanager
from typing import Iterator, Sequence

from jobseeker import pipeline
from jobseeker.config import load_settings
from jobseeker.log import configure, get_logger
from jobseeker.orchestrator import DEFAULT_LIMIT
from jobseeker.profile import ProfileError, load_profile
from jobseeker.sources import SOURCE_INFO, build_registry
from jobseeker.store import JobStore

log = get_logger(__name__)

MATCH_STATUSES = ("new", "viewed", "applied", "rejected", "interview", "offer")
EXIT_NO_SOURCES = 2


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="jobseeker", description="Aggregate and score job postings.")
    p.add_argument("-v", "--verbose", action="store_true", help="log DEBUG output to the console")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("scrape", help="fetch jobs from sources, score and store them")
    s.add_argument("--sources", default="all", help="comma-separated source names, or 'all'")
    s.add_argument("--keywords", default="")
    s.add_argument("--location", default="")
    s.add_argument("--limit", type=int, default=DEFAULT_LIMIT)

    j = sub.add_parser("jobs", help="list stored jobs, best match first")
    j.add_argument("--min-score", type=int, default=0)
    j.add_argument("--status", default="all", choices=("all",) + MATCH_STATUSES)
    j.add_argument("--favorited", action="store_true")
    j.add_argument("--search", default=None)
    j.add_argument("--limit", type=int, default=50)
    j.add_argument("--offset", type=int, default=0)

    one = sub.add_parser("job", help="show one job as JSON")
    one.add_argument("job_id", type=int)

    m = sub.add_parser("mark", help="update status, favorite flag or notes of a job")
    m.add_argument("job_id", type=int)
    m.add_argument("--status", choices=MATCH_STATUSES)
    fav = m.add_mutually_exclusive_group()
    fav.add_argument("--favorite", dest="favorited", action="store_true", default=None)
    fav.add_argument("--unfavorite", dest="favorited", action="store_false")
    m.add_argument("--notes")

    sub.add_parser("stats", help="dashboard counters and recent scraper runs")
    sub.add_parser("rescore", help="recompute match scores of all stored jobs")
    sub.add_parser("sources", help="list available sources")
    return p


@contextmanager
def _cancel_on_signal() -> Iterator[threading.Event]:
    """Turn SIGINT/SIGTERM into a cancel event while the block runs, then restore the old handlers."""
    cancel = threading.Event()

    def handler(sig, frame):
        log.info("Shutdown signal received, finishing current source")
        cancel.set()

    previous = {sig: signal.signal(sig, handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield cancel
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old if old is not None else signal.SIG_DFL)


def _scrape(args: argparse.Namespace) -> int:
    settings = load_settings()
    profile = load_profile(settings.profile_path)
    registry = build_registry(settings)
    requested = [s for s in args.sources.split(",") if s.strip()]
    names = pipeline.build_orchestrator(profile, registry).resolve(requested)
    if not names:
        print(f"No valid sources in {args.sources!r}. Available: {', '.join(registry)}", file=sys.stderr)
        return EXIT_NO_SOURCES

    with _cancel_on_signal() as cancel:
        result = pipeline.run(
            sources=names, keywords=args.keywords, location=args.location, limit=args.limit,
            profile=profile, settings=settings, registry=registry, cancel=cancel,
        )
    print(
        f"Found {result['jobs_found']} jobs: {result['jobs_added']} new, "
        f"{result['jobs_updated']} updated, {result['high_matches']} high matches"
    )
    for source, error in result["errors"].items():
        print(f"  {source}: {error}")
    return 0


def _jobs(args: argparse.Namespace, store: JobStore) -> int:
    rows = store.list_jobs(
        min_score=args.min_score, status=args.status,
        favorited=True if args.favorited else None,
        search=args.search, limit=args.limit, offset=args.offset,
    )
    for r in rows:
        score = "-" if r["match_score"] is None else r["match_score"]
        star = "*" if r["favorited"] else " "
        print(f"{r['id']:>5} {star} {score:>3}  {r['title']} @ {r['company']} [{r['source']}]")
    if not rows:
        print("No jobs match.")
    return 0


def _job(args: argparse.Namespace, store: JobStore) -> int:
    job = store.get_job(args.job_id)
    if job is None:
        print(f"Job {args.job_id} not found", file=sys.stderr)
        return 1
    print(json.dumps(job, indent=2, ensure_ascii=False, default=str))
    return 0


def _mark(args: argparse.Namespace, store: JobStore) -> int:
    if not store.update_match(args.job_id, status=args.status, favorited=args.favorited, notes=args.notes):
        print(f"Job {args.job_id} has no match record", file=sys.stderr)
        return 1
    print(f"Job {args.job_id} updated")
    return 0


def _stats(store: JobStore) -> int:
    stats = store.stats()
    for key, value in stats.items():
        print(f"{key:>14}: {value}")
    runs = store.recent_runs(10)
    if runs:
        print("\nRecent runs:")
    for r in runs:
        status = f"error: {r['error']}" if r["error"] else "ok"
        print(
            f"  {r['started_at']}  {r['source']:<15} found={r['jobs_found']} "
            f"added={r['jobs_added']} updated={r['jobs_updated']}  {status}"
        )
    return 0


def _sources() -> int:
    for name, info in SOURCE_INFO.items():
        auth = " (requires API key)" if info["requires_auth"] else ""
        print(f"{name:<15} {info['name']}: {info['description']}{auth}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    if args.verbose:
        configure("DEBUG")

    if args.command == "sources":
        return _sources()

    try:
        if args.command == "scrape":
            return _scrape(args)

        settings = load_settings()
        with JobStore(settings.db_path) as store:
            if args.command == "rescore":
                result = pipeline.rescore(load_profile(settings.profile_path), store)
                print(f"Rescored {result['updated']}/{result['total_jobs']} jobs ({result['errors']} errors)")
                return 0
            if args.command == "jobs":
                return _jobs(args, store)
            if args.command == "job":
                return _job(args, store)
            if args.command == "mark":
                return _mark(args, store)
            return _stats(store)
    except ProfileError as exc:
        print(f"Profile error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
