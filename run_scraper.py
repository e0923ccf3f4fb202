#!/usr/bin/env python3
"""Entry point to run one scrape across all sources."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobseeker.config import load_settings
from jobseeker.log import get_logger

log = get_logger(__name__)


def _check_setup() -> bool:
    """Return True if the profile is missing."""
    path = load_settings().profile_path
    if not path.exists():
        print()
        print(f"  No profile found at {path}.")
        print("  Copy config/profile.yaml and edit it, or set JOBSEEKER_PROFILE.")
        print()
        return True
    return False


if __name__ == "__main__":
    if _check_setup():
        sys.exit(1)

    from jobseeker.cli import main

    sys.exit(main(["scrape", *sys.argv[1:]]))
