#!/usr/bin/env python3
"""
Install (or remove) the crontab entry that runs the daily scrape.

  python setup_cron.py            install at DAILY_RUN_HOUR (from .env, default 8)
  python setup_cron.py --print    show the entry without touching the crontab
  python setup_cron.py --remove   drop the entry

The entry carries a marker comment, so re-running after changing the hour
replaces the old line instead of adding a second one.
"""
from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parent
MARKER = "# jobseeker-daily"


def cron_entry(hour: int, root: Path = ROOT, python: Path | None = None) -> str:
    if not 0 <= hour <= 23:
        raise ValueError(f"DAILY_RUN_HOUR must be 0-23, got {hour}")
    python = python or root / ".venv" / "bin" / "python"
    return f"0 {hour} * * * cd {root} && {python} -m jobseeker.run_daily --once >> {root / 'logs' / 'cron.log'} 2>&1 {MARKER}"


def without_entry(crontab: str) -> list[str]:
    return [line for line in crontab.splitlines() if line.strip() and not line.rstrip().endswith(MARKER)]


def with_entry(crontab: str, entry: str) -> str:
    return "\n".join(without_entry(crontab) + [entry]) + "\n"


def _read_crontab() -> str:
    out = subprocess.run(["crontab", "-l"], capture_output=True, text=True, timeout=5)
    # Exit status 1 with "no crontab for user" just means empty.
    return out.stdout if out.returncode == 0 else ""


def _write_crontab(content: str) -> bool:
    proc = subprocess.run(["crontab", "-"], input=content, capture_output=True, text=True, timeout=5)
    if proc.returncode != 0:
        print(f"crontab refused the update: {proc.stderr.strip()}")
    return proc.returncode == 0


def _fallback_file(content: str) -> int:
    path = ROOT / "crontab.txt"
    path.write_text(content, encoding="utf-8")
    print(f"Wrote {path}. Install it manually with: crontab {path}")
    return 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--print", dest="show", action="store_true")
    mode.add_argument("--remove", action="store_true")
    args = parser.parse_args(argv)

    load_dotenv(ROOT / ".env")
    entry = cron_entry(int(os.environ.get("DAILY_RUN_HOUR", "8")))

    if args.show:
        print(entry)
        return 0

    if not args.remove and not (ROOT / ".venv" / "bin" / "python").exists():
        print("Error: .venv not found. Run: python -m venv .venv && .venv/bin/pip install -e .")
        return 1

    try:
        existing = _read_crontab()
    except (FileNotFoundError, subprocess.TimeoutExpired) as exc:
        print(f"Cannot read crontab ({exc}).")
        return 1 if args.remove else _fallback_file(entry + "\n")

    if args.remove:
        lines = without_entry(existing)
        content = "\n".join(lines) + "\n" if lines else ""
        if not _write_crontab(content):
            return 1
        print("Daily scrape entry removed.")
        return 0

    if entry in existing:
        print("Cron entry already present. No change.")
        return 0
    content = with_entry(existing, entry)
    try:
        if not _write_crontab(content):
            return _fallback_file(content)
    except subprocess.TimeoutExpired:
        return _fallback_file(content)
    print(f"Cron installed: {entry}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
