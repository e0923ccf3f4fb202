"""Helpers shared by the source adapters to map raw payloads onto ``Job``."""
from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Iterable

from jobseeker.models import Job, utcnow

REMOTE_HINTS: tuple[str, ...] = (
    "remote", "anywhere", "worldwide", "work from home", "wfh", "teletrabajo",
)

_KEYWORD_SPLIT = re.compile(r"[\s,]+")


def stable_id(*parts: Any) -> str:
    """Short deterministic digest for payloads that carry no identifier."""
    raw = "|".join(str(p or "") for p in parts)
    return hashlib.sha256(raw.encode()).hexdigest()[:12]


def slug_from_url(url: str | None, pattern: str) -> str | None:
    """First capture group of *pattern* in *url*, with slashes flattened."""
    if not url:
        return None
    m = re.search(pattern, url)
    if m:
        return m.group(1).strip("/").replace("/", "_")
    return None


def sanitize_id(value: str, max_len: int = 50) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", value)[:max_len]


def absolute_url(url: str | None, base_url: str) -> str:
    url = (url or "").strip()
    if not url:
        return base_url
    if url.startswith(("http://", "https://")):
        return url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


def parse_datetime(value: Any, default: datetime | None = None) -> datetime:
    """Parse ISO strings, RFC 822 dates and epoch seconds/milliseconds.

    Anything unparsable falls back to *default*, or the current time.
    """
    fallback = default or utcnow()
    if value is None or value == "":
        return fallback

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts > 1e12:
            ts /= 1000.0
        try:
            dt = datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return fallback
    elif isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return parse_datetime(int(text), default)
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                dt = parsedate_to_datetime(text)
            except (TypeError, ValueError, IndexError):
                return fallback
    else:
        return fallback

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_salary(value: Any) -> int | None:
    """Strip everything but digits; unparsable or zero-length becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    digits = re.sub(r"[^0-9]", "", str(value))
    return int(digits) if digits else None


def normalize_job_type(raw: Any, default: str = "unknown") -> str:
    if not raw:
        return default
    low = str(raw).lower().replace("_", "-").replace(" ", "-")
    if "intern" in low:
        return "internship"
    if "contract" in low:
        return "contract"
    if "part" in low:
        return "part-time"
    if "freelance" in low:
        return "freelance"
    if "full" in low or "permanent" in low:
        return "full-time"
    if "remote" in low:
        return "remote"
    return "unknown"


def looks_remote(*texts: str | None) -> bool:
    blob = " ".join(t for t in texts if t).lower()
    return any(hint in blob for hint in REMOTE_HINTS)


def join_tags(tags: Iterable[Any] | str | None) -> str:
    if not tags:
        return ""
    if isinstance(tags, str):
        tags = tags.split(",")
    cleaned = [str(t).strip() for t in tags if t is not None and str(t).strip()]
    return ",".join(dict.fromkeys(cleaned))


def split_keywords(keywords: str | None) -> list[str]:
    return [kw for kw in _KEYWORD_SPLIT.split((keywords or "").lower()) if kw]


def matches_keywords(text: str, keywords: str | None) -> bool:
    """True when any whitespace/comma separated keyword occurs in *text*; no keywords matches all."""
    words = split_keywords(keywords)
    if not words:
        return True
    low = (text or "").lower()
    return any(kw in low for kw in words)


def dedupe(jobs: Iterable[Job]) -> list[Job]:
    """Keep the first job for each external_id, preserving order."""
    seen: set[str] = set()
    out: list[Job] = []
    for job in jobs:
        if job.external_id in seen:
            continue
        seen.add(job.external_id)
        out.append(job)
    return out
