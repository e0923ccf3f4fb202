from datetime import datetime
from unittest.mock import patch

from jobseeker import run_daily


def test_next_run_later_today():
    assert run_daily.next_run(datetime(2024, 3, 1, 7, 15), hour=8) == datetime(2024, 3, 1, 8, 0)


def test_next_run_tomorrow_once_passed():
    assert run_daily.next_run(datetime(2024, 3, 1, 8, 0), hour=8) == datetime(2024, 3, 2, 8, 0)
    assert run_daily.next_run(datetime(2024, 12, 31, 23, 0), hour=8) == datetime(2025, 1, 1, 8, 0)


def test_run_once_scrapes_all_sources():
    result = {"jobs_found": 1, "jobs_added": 1, "jobs_updated": 0, "high_matches": 0,
              "errors": {"adzuna": "timeout"}, "runs": []}
    with patch.object(run_daily, "run", return_value=result) as run:
        assert run_daily.run_once() is result
    run.assert_called_once_with(sources=("all",))
