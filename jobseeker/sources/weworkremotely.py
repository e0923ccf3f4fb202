"""We Work Remotely — RSS feed first, HTML category pages as a fallback.

The RSS feed carries dates and descriptions. The HTML pages are only scraped
when the feed yields nothing; their markup changes often, so every selector
miss skips the entry rather than failing the page.
"""
from __future__ import annotations

from typing import Any
from xml.etree import ElementTree

from bs4 import BeautifulSoup

from jobseeker.log import get_logger
from jobseeker.models import Job
from jobseeker.normalize import (
    absolute_url, join_tags, matches_keywords, normalize_job_type, parse_datetime, slug_from_url,
    stable_id,
)
from jobseeker.sources.base import DEFAULT_USER_AGENT, FETCH_ERRORS, JobSource

log = get_logger(__name__)

DEFAULT_CATEGORIES: list[str] = ["programming", "devops-sysadmin", "design"]

TITLE_TAG_KEYWORDS: list[str] = [
    "javascript", "python", "react", "node", "typescript", "go", "golang",
    "ruby", "rails", "php", "laravel", "java", "kotlin", "swift",
    "aws", "docker", "kubernetes", "devops", "frontend", "backend",
    "full-stack", "fullstack", "mobile", "ios", "android", "web",
    "senior", "lead", "principal", "staff", "manager", "director",
    "data", "engineer", "designer", "marketing", "sales", "product",
]

_SLUG_PATTERN = r"/remote-jobs/(.+)$"

_RSS_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "application/rss+xml, application/xml, text/xml, */*",
    "Accept-Language": "en-US,en;q=0.9",
}
_HTML_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Referer": "https://weworkremotely.com/",
}


def split_feed_title(text: str) -> tuple[str, str]:
    """``"Acme: Senior Engineer"`` -> ``("Acme", "Senior Engineer")``, split on the first colon."""
    company, sep, title = text.partition(":")
    if sep and company.strip() and title.strip():
        return company.strip(), title.strip()
    return "Unknown Company", text.strip()


def title_tags(title: str) -> str:
    low = (title or "").lower()
    return join_tags(kw for kw in TITLE_TAG_KEYWORDS if kw in low)


def _html_job_type(title: str) -> str:
    low = title.lower()
    for marker, job_type in (("contract", "contract"), ("part-time", "part-time"), ("freelance", "freelance")):
        if marker in low:
            return job_type
    return "full-time"


def _text(item: ElementTree.Element, tag: str) -> str:
    el = item.find(tag)
    return (el.text or "").strip() if el is not None else ""


class WeWorkRemotelySource(JobSource):
    name = "weworkremotely"
    base_url = "https://weworkremotely.com"
    rss_url = "https://weworkremotely.com/remote-jobs.rss"
    timeout = 20.0

    def search(self, keywords: str = "", location: str = "", page: int = 1, **hints: Any) -> list[Job]:
        jobs = self.fetch_rss(keywords)
        if jobs:
            log.debug("WeWorkRemotely RSS returned %d jobs", len(jobs))
            return jobs

        log.info("WeWorkRemotely RSS empty, falling back to HTML scraping")
        category = hints.get("category") or ""
        return self.fetch_html(keywords, category)

    # -- RSS ---------------------------------------------------------------

    def fetch_rss(self, keywords: str = "") -> list[Job]:
        try:
            r = self._get(self.rss_url, headers=_RSS_HEADERS)
            return self.parse_rss(r.content, keywords)
        except (ElementTree.ParseError, *FETCH_ERRORS) as exc:
            log.warning("WeWorkRemotely RSS error: %s", exc)
            return []

    def parse_rss(self, content: bytes | str, keywords: str = "") -> list[Job]:
        root = ElementTree.fromstring(content)
        jobs: list[Job] = []
        for item in root.iter("item"):
            job = self._rss_item_to_job(item)
            if job is None:
                continue
            category = _text(item, "category")
            if keywords and not matches_keywords(f"{job.title} {job.company} {job.tags} {category}", keywords):
                continue
            jobs.append(job)
        return jobs

    def _rss_item_to_job(self, item: ElementTree.Element) -> Job | None:
        raw_title = _text(item, "title")
        if not raw_title:
            return None
        company, title = split_feed_title(raw_title)

        link = _text(item, "guid") or _text(item, "link")
        url = absolute_url(link, self.base_url) if link else ""
        native_id = slug_from_url(url, _SLUG_PATTERN) or stable_id(raw_title)

        skills = _text(item, "skills")
        description = _text(item, "description")

        return Job(
            external_id=f"{self.name}_{native_id}",
            source=self.name,
            title=title,
            company=company,
            location=_text(item, "region") or "Remote",
            description=description or f"Remote position at {company}. Posted on We Work Remotely.",
            url=url,
            salary_currency="USD",
            job_type=normalize_job_type(_text(item, "type"), default="full-time"),
            remote=True,
            tags=join_tags(skills),
            posted_at=parse_datetime(_text(item, "pubDate")),
        )

    # -- HTML fallback -------------------------------------------------------

    def fetch_html(self, keywords: str = "", category: str = "") -> list[Job]:
        categories = [category] if category else DEFAULT_CATEGORIES
        jobs: list[Job] = []
        for cat in categories:
            url = f"{self.base_url}/categories/{cat}"
            try:
                r = self._get(url, headers=_HTML_HEADERS, timeout=15.0)
                batch = self.parse_html(r.text, keywords, cat)
            except FETCH_ERRORS as exc:
                log.warning("WeWorkRemotely category=%r error: %s", cat, exc)
                continue
            log.debug("WeWorkRemotely category=%r returned %d jobs", cat, len(batch))
            jobs.extend(batch)
        return jobs

    def parse_html(self, html: str, keywords: str = "", category: str = "") -> list[Job]:
        soup = BeautifulSoup(html, "html.parser")
        jobs: list[Job] = []
        for i, li in enumerate(soup.select("section.jobs li")):
            if "feature--ad" in (li.get("class") or []):
                continue

            title_el = li.select_one(".new-listing__header__title")
            link_el = li.select_one('a.listing-link--unlocked, a[href^="/remote-jobs/"]')
            title = title_el.get_text(strip=True) if title_el else ""
            href = link_el.get("href") if link_el else None
            if not title or not href:
                log.debug("WeWorkRemotely skipping entry %d: missing title or link", i)
                continue

            company_el = li.select_one(".new-listing__company-name")
            company = (company_el.get_text(strip=True) if company_el else "") or "Unknown Company"
            if keywords and not matches_keywords(f"{title} {company}", keywords):
                continue

            hq_el = li.select_one(".new-listing__company-headquarters")
            url = absolute_url(href, self.base_url)
            native_id = slug_from_url(url, _SLUG_PATTERN) or stable_id(title, company)

            jobs.append(
                Job(
                    external_id=f"{self.name}_{native_id}",
                    source=self.name,
                    title=title,
                    company=company,
                    location=(hq_el.get_text(strip=True) if hq_el else "") or "Remote",
                    description=f"Remote position at {company}. Posted on We Work Remotely in {category}.",
                    url=url,
                    salary_currency="USD",
                    job_type=_html_job_type(title),
                    remote=True,
                    tags=title_tags(title),
                    # Listing pages show no posting date.
                    posted_at=parse_datetime(None),
                )
            )
        return jobs
