"""Score jobs against the profile on a 0-100 scale with human-readable reasons.

Categories are independent and additive:

  - Title match             0 / 10 / 20 / 30
  - Skills (all lists)      0 / 5 / 15 / 25
  - Location                0 / 10 / 15 / 20
  - Primary stack           0 / 5 / 10 / 15

A deal breaker in the description zeroes the score and replaces every reason.
"""
from __future__ import annotations

from typing import Iterable

from jobseeker.log import get_logger
from jobseeker.models import Job, MatchResult
from jobseeker.profile import Profile

log = get_logger(__name__)

MAX_SCORE = 100

# Role-indicator words for titles that miss every target title.
TITLE_KEYWORDS: list[str] = [
    "head", "vp", "cto", "engineering", "product", "principal", "staff", "director", "lead",
]

REMOTE_KEYWORDS: list[str] = ["remote", "híbrido", "hybrid", "home office", "teletrabajo"]

TARGET_LOCATION_KEYWORDS: list[str] = ["españa", "spain", "valencia"]

REGION_KEYWORDS: list[str] = [
    "alemania", "germany", "francia", "france", "portugal",
    "italia", "italy", "uk", "netherlands",
]

EQUITY_ONLY_PHRASES: list[str] = [
    "equity only", "solo equity", "sin sueldo", "sin salario",
    "unpaid", "volunteer", "no salary",
]


def _normalize(s: str | None) -> str:
    return (s or "").lower()


def _present(terms: Iterable[str], text: str) -> list[str]:
    return [t for t in terms if t and t.lower() in text]


def _title_points(job: Job, profile: Profile) -> tuple[int, str | None]:
    title = _normalize(job.title)
    if not title:
        return 0, None

    for target in profile.target_titles:
        if target.lower() in title:
            return 30, f"Exact title match: {target}"

    hits = len(_present(TITLE_KEYWORDS, title))
    if hits >= 2:
        return 20, f"Partial title match ({hits} keywords)"
    if hits == 1:
        return 10, "Weak title match"
    return 0, None


def _skills_points(job: Job, profile: Profile) -> tuple[int, str | None]:
    text = f"{_normalize(job.title)} {_normalize(job.description)} {_normalize(job.tags)}"
    matched = _present(profile.skills.combined, text)
    n = len(matched)
    if n >= 5:
        return 25, f"Strong skills match ({n}): {', '.join(matched[:5])}"
    if n >= 3:
        return 15, f"Good skills match ({n})"
    if n >= 1:
        return 5, f"Weak skills match ({n})"
    return 0, None


def _location_points(job: Job) -> tuple[int, str]:
    location = _normalize(job.location)
    description = _normalize(job.description)

    if any(kw in location or kw in description for kw in REMOTE_KEYWORDS):
        return 20, "Remote/hybrid position"
    if any(kw in location for kw in TARGET_LOCATION_KEYWORDS):
        return 15, "Spain-based position"
    if any(kw in location for kw in REGION_KEYWORDS):
        return 10, "Europe-based position"
    return 0, "Location unclear"


def _tech_points(job: Job, profile: Profile) -> tuple[int, str | None]:
    text = f"{_normalize(job.title)} {_normalize(job.description)}"
    n = len(_present(profile.skills.primary, text))
    if n >= 3:
        return 15, f"Primary stack match ({n})"
    if n == 2:
        return 10, f"Good tech match ({n})"
    if n == 1:
        return 5, "Some tech overlap"
    return 0, None


def deal_breaker(job: Job, profile: Profile) -> str | None:
    """Reason the job is disqualified, or None."""
    description = _normalize(job.description)
    rules = profile.deal_breakers

    if rules.equity_only and any(p in description for p in EQUITY_ONLY_PHRASES):
        return "Deal breaker: equity-only position (no salary)"

    for tech in rules.excluded_tech:
        if tech and tech.lower() in description:
            return f"Deal breaker: uses excluded tech {tech}"
    return None


def score_job(job: Job, profile: Profile) -> MatchResult:
    violation = deal_breaker(job, profile)
    if violation:
        return MatchResult(score=0, reasons=[violation])

    score = 0
    reasons: list[str] = []
    for points, reason in (
        _title_points(job, profile),
        _skills_points(job, profile),
        _location_points(job),
        _tech_points(job, profile),
    ):
        score += points
        if reason:
            reasons.append(reason)

    return MatchResult(score=max(0, min(MAX_SCORE, score)), reasons=reasons)


def rank(
    jobs: list[Job], profile: Profile, min_score: int = 0
) -> list[tuple[Job, MatchResult]]:
    scored = [(j, score_job(j, profile)) for j in jobs]
    result = sorted([s for s in scored if s[1].score >= min_score], key=lambda s: -s[1].score)
    log.info("Scored %d jobs → %d at or above %d", len(jobs), len(result), min_score)
    return result
