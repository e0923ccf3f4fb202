import pytest

from jobseeker.scorer import MAX_SCORE, deal_breaker, rank, score_job

SIX_SKILLS = "We use Python, Kubernetes, AWS, Docker, PostgreSQL and Redis every day."


def test_title_without_target_or_keywords_scores_zero(make_job, profile):
    result = score_job(make_job(title="Senior Software Engineer"), profile)
    assert result.score == 0
    assert not any("title" in r.lower() for r in result.reasons)
    assert result.reasons == ["Location unclear"]


def test_strong_remote_vp_match(make_job, profile):
    job = make_job(title="VP of Engineering - Remote", location="Remote, Anywhere", description=SIX_SKILLS)
    result = score_job(job, profile)
    # title 30 + skills 25 + location 20 + primary stack 15
    assert result.score == 90
    assert result.reasons[0] == "Exact title match: VP of Engineering"
    assert result.reasons[1].startswith("Strong skills match (6)")
    assert "Remote/hybrid position" in result.reasons
    assert "Primary stack match (4)" in result.reasons


def test_equity_only_is_a_deal_breaker(make_job, profile):
    job = make_job(
        title="VP of Engineering - Remote",
        location="Remote",
        description="This is an equity only position, no salary. " + SIX_SKILLS,
    )
    result = score_job(job, profile)
    assert result.score == 0
    assert result.reasons == ["Deal breaker: equity-only position (no salary)"]


def test_excluded_tech_is_a_deal_breaker(make_job, profile):
    job = make_job(title="CTO", description="Our stack is PHP and Python.")
    assert deal_breaker(job, profile) == "Deal breaker: uses excluded tech PHP"
    assert score_job(job, profile).score == 0


def test_no_deal_breaker(make_job, profile):
    assert deal_breaker(make_job(description="Python and Go"), profile) is None


@pytest.mark.parametrize(
    "title, points_reason",
    [
        ("Engineering Lead", "Partial title match (2 keywords)"),
        ("Staff Designer", "Weak title match"),
        ("CTO at startup", "Exact title match: CTO"),
    ],
)
def test_title_tiers(make_job, profile, title, points_reason):
    assert points_reason in score_job(make_job(title=title), profile).reasons


@pytest.mark.parametrize(
    "location, reason",
    [
        ("Hybrid - Madrid", "Remote/hybrid position"),
        ("Valencia, Spain", "Spain-based position"),
        ("Berlin, Germany", "Europe-based position"),
        ("Tokyo", "Location unclear"),
    ],
)
def test_location_tiers(make_job, profile, location, reason):
    assert reason in score_job(make_job(location=location), profile).reasons


def test_skill_tiers(make_job, profile):
    weak = score_job(make_job(description="Python"), profile)
    good = score_job(make_job(description="Redis, React, Terraform"), profile)
    assert "Weak skills match (1)" in weak.reasons
    assert "Good skills match (3)" in good.reasons


def test_scores_always_within_bounds(make_job, profile):
    jobs = [
        make_job(title="Head of Engineering", location="Remote", description=SIX_SKILLS + " Terraform, React, CI/CD"),
        make_job(title=""),
        make_job(description="unpaid volunteer"),
        make_job(title="Staff Principal Lead Director", location="Spain"),
    ]
    for job in jobs:
        assert 0 <= score_job(job, profile).score <= MAX_SCORE


def test_absent_fields_count_as_empty(make_job, profile):
    job = make_job(title=None, company=None, location=None, description=None, tags=None)
    assert deal_breaker(job, profile) is None

    result = score_job(job, profile)
    assert result.score == 0
    assert 0 <= result.score <= MAX_SCORE
    assert result.reasons == ["Location unclear"]


def test_deal_breaker_score_stays_in_bounds_without_title(make_job, profile):
    job = make_job(title=None, location=None, description="Legacy WordPress site")
    assert deal_breaker(job, profile) == "Deal breaker: uses excluded tech WordPress"
    result = score_job(job, profile)
    assert result.score == 0 and 0 <= result.score <= MAX_SCORE


def test_rank_sorts_and_filters(make_job, profile):
    low = make_job("t_low", title="Cook")
    high = make_job("t_high", title="CTO", location="Remote", description=SIX_SKILLS)
    mid = make_job("t_mid", title="Engineering Lead")

    ranked = rank([low, high, mid], profile, min_score=10)
    assert [j.external_id for j, _ in ranked] == ["t_high", "t_mid"]
    assert ranked[0][1].score >= ranked[1][1].score
