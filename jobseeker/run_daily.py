"""
Run the scraper daily at DAILY_RUN_HOUR (local time, default 8).

Usage:
  - Cron (recommended): install with: python setup_cron.py
      Then: 0 8 * * * cd /path/to/project && .venv/bin/python -m jobseeker.run_daily --once
  - Or run this module in background: python -m jobseeker.run_daily
"""
from __future__ import annotations

import os
import sys
import time
from datetime import datetime, timedelta

from jobseeker.log import get_logger
from jobseeker.pipeline import run

log = get_logger(__name__)

TARGET_HOUR = int(os.environ.get("DAILY_RUN_HOUR", "8"))
TARGET_MINUTE = 0


def run_once() -> dict:
    result = run(sources=("all",))
    log.info(
        "Daily run: found=%d, new=%d, updated=%d, high matches=%d",
        result["jobs_found"], result["jobs_added"], result["jobs_updated"], result["high_matches"],
    )
    for source, error in result["errors"].items():
        log.warning("  %s failed: %s", source, error)
    return result


def next_run(now: datetime | None = None, hour: int = TARGET_HOUR) -> datetime:
    now = now or datetime.now()
    target = now.replace(hour=hour, minute=TARGET_MINUTE, second=0, microsecond=0)
    if now >= target:
        target = target + timedelta(days=1)
    return target


def main() -> None:
    log.info("Scheduler: run daily at %d:%02d", TARGET_HOUR, TARGET_MINUTE)
    while True:
        target = next_run()
        wait_secs = (target - datetime.now()).total_seconds()
        log.info("Next run at %s (in %.1f hours)", target, wait_secs / 3600)
        time.sleep(max(0.0, min(wait_secs, 86400)))
        now = datetime.now()
        if now.hour == TARGET_HOUR and now.minute < 30:
            log.info("Running scraper...")
            try:
                run_once()
            except Exception as exc:
                log.error("Daily run failed: %s", exc)
            log.info("Done. Next run tomorrow.")


if __name__ == "__main__":
    if "--once" in sys.argv:
        run_once()
        sys.exit(0)
    main()
