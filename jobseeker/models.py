"""Data models for jobs, match results and scraper runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

JOB_TYPES: tuple[str, ...] = (
    "full-time", "part-time", "contract", "freelance",
    "internship", "remote", "unknown",
)

REQUIRED_FIELDS: tuple[str, ...] = ("external_id", "title", "company", "url")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Job:
    external_id: str
    source: str
    title: str
    company: str
    url: str
    location: str = ""
    description: str = ""
    salary_min: int | None = None
    salary_max: int | None = None
    salary_currency: str | None = None
    job_type: str = "unknown"
    remote: bool = False
    tags: str = ""
    posted_at: datetime = field(default_factory=utcnow)

    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty, plus ``url`` if not absolute http(s)."""
        missing = [name for name in REQUIRED_FIELDS if not (getattr(self, name) or "").strip()]
        if "url" not in missing and not self.url.startswith(("http://", "https://")):
            missing.append("url")
        return missing

    def is_valid(self) -> bool:
        return not self.missing_fields()

    def to_row(self) -> dict[str, Any]:
        return {
            "external_id": self.external_id,
            "source": self.source,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "description": self.description,
            "url": self.url,
            "salary_min": self.salary_min,
            "salary_max": self.salary_max,
            "salary_currency": self.salary_currency,
            "job_type": self.job_type,
            "remote": bool(self.remote),
            "tags": self.tags,
            "posted_at": self.posted_at.isoformat() if self.posted_at else None,
        }


@dataclass
class MatchResult:
    score: int
    reasons: list[str] = field(default_factory=list)


@dataclass
class ScraperRun:
    source: str
    jobs_found: int = 0
    jobs_added: int = 0
    jobs_updated: int = 0
    error: str | None = None
    started_at: datetime = field(default_factory=utcnow)
    finished_at: datetime | None = None
