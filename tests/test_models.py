from jobseeker.models import JOB_TYPES, MatchResult, ScraperRun


def test_valid_job(make_job):
    job = make_job()
    assert job.is_valid()
    assert job.missing_fields() == []


def test_missing_required_fields(make_job):
    job = make_job(title="", company="  ")
    assert job.missing_fields() == ["title", "company"]
    assert not job.is_valid()


def test_relative_url_is_invalid(make_job):
    assert make_job(url="/remote-jobs/x").missing_fields() == ["url"]
    assert make_job(url="").missing_fields() == ["url"]


def test_to_row(make_job):
    row = make_job(remote=True, tags="python,aws").to_row()
    assert row["remote"] is True
    assert row["posted_at"] == "2024-01-15T12:00:00+00:00"
    assert row["tags"] == "python,aws"
    assert set(row) >= {"external_id", "source", "title", "company", "url"}


def test_defaults(make_job):
    job = make_job()
    assert job.job_type in JOB_TYPES
    assert job.salary_min is None and job.salary_currency is None
    assert MatchResult(score=10).reasons == []
    run = ScraperRun(source="remoteok")
    assert run.jobs_found == 0 and run.error is None and run.finished_at is None
