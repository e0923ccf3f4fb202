"""Logging setup shared by the CLI, the scheduler and the library modules.

Console output goes to stdout at ``LOG_LEVEL``; a per-day file under
``JOBSEEKER_LOG_DIR`` (default ``<project>/logs``) always records DEBUG.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP client internals log every connection at DEBUG.
QUIET_LOGGERS = ("urllib3", "requests", "charset_normalizer")

_HANDLER_TAG = "_jobseeker"
_state = {"configured": False}


def log_dir() -> Path:
    default = Path(__file__).resolve().parent.parent / "logs"
    return Path(os.environ.get("JOBSEEKER_LOG_DIR") or default)


def log_file_for(day: date, directory: Path | None = None) -> Path:
    return (directory or log_dir()) / f"jobseeker_{day.isoformat()}.log"


def _level(value: str | int | None) -> int:
    if isinstance(value, int):
        return value
    name = (value or os.environ.get("LOG_LEVEL") or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure(level: str | int | None = None, directory: Path | None = None) -> None:
    """(Re)install the jobseeker handlers on the root logger.

    Handlers installed by someone else (pytest's caplog, an embedding app)
    are left alone; only our own are replaced.
    """
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    console_level = _level(level)
    formatter = logging.Formatter(FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    setattr(console, _HANDLER_TAG, True)
    root.addHandler(console)

    root.setLevel(logging.DEBUG)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    try:
        path = log_file_for(date.today(), directory)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        # Read-only checkout or container: console only.
        root.setLevel(console_level)
    else:
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        setattr(fh, _HANDLER_TAG, True)
        root.addHandler(fh)

    _state["configured"] = True


def get_logger(name: str) -> logging.Logger:
    """Named logger; the first call in a process installs the handlers."""
    if not _state["configured"]:
        configure()
    return logging.getLogger(name)
