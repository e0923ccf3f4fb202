from datetime import datetime, timezone

from jobseeker.normalize import (
    absolute_url,
    dedupe,
    join_tags,
    looks_remote,
    matches_keywords,
    normalize_job_type,
    parse_datetime,
    parse_salary,
    slug_from_url,
    split_keywords,
    stable_id,
)


def test_stable_id_is_deterministic_and_short():
    a = stable_id("Engineer", "Acme", "Madrid")
    assert a == stable_id("Engineer", "Acme", "Madrid")
    assert a != stable_id("Engineer", "Acme", "Valencia")
    assert len(a) == 12


def test_slug_from_url():
    assert slug_from_url("https://himalayas.app/companies/acme/jobs/senior-dev", r"/jobs/([^/?#]+)/?$") == "senior-dev"
    assert slug_from_url("https://weworkremotely.com/remote-jobs/acme-dev", r"/remote-jobs/(.+)$") == "acme-dev"
    assert slug_from_url("https://example.com/x", r"/jobs/([^/?#]+)/?$") is None
    assert slug_from_url(None, r"(.*)") is None


def test_absolute_url():
    assert absolute_url("/remote-jobs/x", "https://weworkremotely.com") == "https://weworkremotely.com/remote-jobs/x"
    assert absolute_url("https://a.com/b", "https://c.com") == "https://a.com/b"
    assert absolute_url("", "https://c.com") == "https://c.com"


def test_parse_datetime_formats():
    expected = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
    assert parse_datetime("2024-01-15T10:00:00Z") == expected
    assert parse_datetime("Mon, 15 Jan 2024 10:00:00 +0000") == expected
    assert parse_datetime(int(expected.timestamp())) == expected
    assert parse_datetime(int(expected.timestamp()) * 1000) == expected
    assert parse_datetime(str(int(expected.timestamp()))) == expected


def test_parse_datetime_naive_is_utc():
    assert parse_datetime("2024-01-15T10:00:00").tzinfo is not None


def test_parse_datetime_falls_back():
    default = datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert parse_datetime("not a date", default) == default
    assert parse_datetime(None, default) == default
    assert parse_datetime("", default) == default
    assert parse_datetime("garbage").tzinfo is not None


def test_parse_salary():
    assert parse_salary("$120,000") == 120000
    assert parse_salary(95000) == 95000
    assert parse_salary(95000.7) == 95000
    assert parse_salary("competitive") is None
    assert parse_salary(None) is None
    assert parse_salary(True) is None


def test_normalize_job_type():
    assert normalize_job_type("full_time") == "full-time"
    assert normalize_job_type("Permanent") == "full-time"
    assert normalize_job_type("part_time") == "part-time"
    assert normalize_job_type("contract") == "contract"
    assert normalize_job_type("Internship") == "internship"
    assert normalize_job_type("freelance") == "freelance"
    assert normalize_job_type("whatever") == "unknown"
    assert normalize_job_type(None, default="full-time") == "full-time"


def test_looks_remote():
    assert looks_remote("Senior Dev (Remote)")
    assert looks_remote(None, "Work from anywhere")
    assert not looks_remote("Madrid, Spain", None)


def test_join_tags_dedupes_in_order():
    assert join_tags(["python", "aws", "python", " ", None, "go"]) == "python,aws,go"
    assert join_tags("a, b,a") == "a,b"
    assert join_tags(None) == ""


def test_keywords():
    assert split_keywords("Python, Go  rust") == ["python", "go", "rust"]
    assert matches_keywords("Senior Python Developer", "java python")
    assert not matches_keywords("Senior Python Developer", "java")
    assert matches_keywords("anything", "")


def test_dedupe_keeps_first_and_is_idempotent(make_job):
    jobs = [
        make_job("a_1", title="first"),
        make_job("a_2"),
        make_job("a_1", title="second"),
        make_job("b_1"),
    ]
    once = dedupe(jobs)
    assert [j.external_id for j in once] == ["a_1", "a_2", "b_1"]
    assert once[0].title == "first"
    assert dedupe(once) == once
