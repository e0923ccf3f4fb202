"""Shared fixtures: a small deterministic profile, a Job factory and gates that never sleep."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from jobseeker.models import Job
from jobseeker.profile import DealBreakers, Profile, SearchDefaults, Skills
from jobseeker.ratelimit import RateGate
from jobseeker.sources.base import JobSource

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def profile() -> Profile:
    return Profile(
        name="Test User",
        title="Head of Engineering",
        target_titles=("Head of Engineering", "VP of Engineering", "CTO"),
        skills=Skills(
            primary=("Python", "Kubernetes", "AWS", "Docker"),
            secondary=("PostgreSQL", "Redis", "React"),
            devops=("Terraform", "CI/CD"),
        ),
        deal_breakers=DealBreakers(equity_only=True, excluded_tech=("PHP", "WordPress")),
        search=SearchDefaults(
            keywords=("software engineer", "tech lead", "cto", "vp engineering"),
            locations=("madrid", "valencia", "españa"),
        ),
    )


@pytest.fixture
def make_job():
    def factory(external_id: str = "test_1", **overrides) -> Job:
        fields = dict(
            external_id=external_id,
            source=external_id.split("_", 1)[0],
            title="Software Engineer",
            company="Acme",
            url=f"https://example.com/jobs/{external_id}",
            location="",
            description="",
            posted_at=datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return Job(**fields)

    return factory


@pytest.fixture
def sleeps() -> list:
    return []


@pytest.fixture
def gate(sleeps) -> RateGate:
    """Zero-interval gate that records any sleep instead of blocking."""
    return RateGate(0, sleep=sleeps.append)


def json_response(payload, status: int = 200) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    r.json.return_value = payload
    r.raise_for_status.return_value = None
    return r


def content_response(content: bytes, status: int = 200) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    r.content = content
    r.text = content.decode("utf-8")
    r.raise_for_status.return_value = None
    return r


class FakeSource(JobSource):
    """Returns canned jobs and records every search call."""

    def __init__(self, name, jobs=(), error=None, per_call=None):
        super().__init__()
        self.name = name
        self.jobs = list(jobs)
        self.error = error
        self.per_call = per_call
        self.calls = []

    def search(self, keywords="", location="", page=1, **hints):
        self.calls.append({"keywords": keywords, "location": location, "page": page, **hints})
        if self.error:
            raise self.error
        if self.per_call:
            return self.per_call(len(self.calls))
        return list(self.jobs)


def registry_of(*sources):
    return {s.name: (lambda s=s: s) for s in sources}
