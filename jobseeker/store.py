"""SQLite persistence for jobs, their match scores and scraper run logs."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, ForeignKey, Integer, Text,
    create_engine, event, func, or_, select, update,
)
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from jobseeker.log import get_logger
from jobseeker.models import Job, MatchResult, ScraperRun
from jobseeker.normalize import parse_datetime
from jobseeker.retry import retry

log = get_logger(__name__)

HIGH_MATCH_SCORE = 70

Base = declarative_base()


class JobRow(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(Text, unique=True, nullable=False)
    source = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    location = Column(Text)
    description = Column(Text)
    url = Column(Text, nullable=False)
    salary_min = Column(Integer)
    salary_max = Column(Integer)
    salary_currency = Column(Text)
    job_type = Column(Text)
    remote = Column(Boolean, default=False)
    tags = Column(Text)
    posted_at = Column(Text)  # ISO-8601 with offset
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())


class JobMatch(Base):
    __tablename__ = "job_matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), unique=True, nullable=False)
    match_score = Column(Integer, nullable=False)
    match_reasons = Column(JSON)
    status = Column(Text, nullable=False, default="new")
    favorited = Column(Boolean, nullable=False, default=False)
    applied = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())


class ScraperLog(Base):
    __tablename__ = "scraper_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source = Column(Text, nullable=False)
    jobs_found = Column(Integer, default=0)
    jobs_added = Column(Integer, default=0)
    jobs_updated = Column(Integer, default=0)
    error = Column(Text)
    started_at = Column(DateTime)
    finished_at = Column(DateTime, server_default=func.now())


_JOINED_COLUMNS = (
    *JobRow.__table__.columns,
    JobMatch.match_score, JobMatch.match_reasons, JobMatch.status,
    JobMatch.favorited, JobMatch.applied, JobMatch.notes,
)


def _joined():
    return select(*_JOINED_COLUMNS).select_from(JobRow).outerjoin(JobMatch, JobMatch.job_id == JobRow.id)


def _is_contention(exc: BaseException) -> bool:
    msg = str(exc).lower()
    return "locked" in msg or "busy" in msg


_write = retry(max_attempts=3, base_delay=0.2, retryable=(OperationalError,), when=_is_contention)


def _enable_foreign_keys(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def _as_dict(row: Base) -> dict[str, Any]:
    return {c.key: getattr(row, c.key) for c in row.__table__.columns}


class JobStore:
    """Upsert-by-external-id gateway over one SQLite file."""

    def __init__(self, path: Path | str = ":memory:") -> None:
        self.path = str(path)
        if self.path == ":memory:":
            url = "sqlite://"
        else:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            url = f"sqlite:///{self.path}"
        self.engine = create_engine(url, connect_args={"timeout": 10})
        event.listen(self.engine, "connect", _enable_foreign_keys)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        log.debug("Opened job store at %s", self.path)

    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "JobStore":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # -- writes ------------------------------------------------------------

    @_write
    def upsert_job(self, job: Job) -> tuple[int, bool]:
        """Insert or refresh *job*; returns ``(row id, is_new)``.

        Identity and text fields are kept from the first sighting; salary
        follows the latest fetch unless that fetch has none.
        """
        stmt = insert(JobRow).values(**job.to_row())
        stmt = stmt.on_conflict_do_update(
            index_elements=[JobRow.external_id],
            set_={
                "updated_at": func.now(),
                "salary_min": func.coalesce(stmt.excluded.salary_min, JobRow.salary_min),
                "salary_max": func.coalesce(stmt.excluded.salary_max, JobRow.salary_max),
            },
        )
        by_external_id = select(JobRow.id).where(JobRow.external_id == job.external_id)
        with self.Session.begin() as session:
            existing = session.scalar(by_external_id)
            session.execute(stmt)
            if existing is not None:
                return existing, False
            return session.scalar(by_external_id), True

    @_write
    def upsert_match(self, job_id: int, result: MatchResult) -> None:
        stmt = insert(JobMatch).values(
            job_id=job_id, match_score=result.score, match_reasons=list(result.reasons),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[JobMatch.job_id],
            set_={
                "match_score": stmt.excluded.match_score,
                "match_reasons": stmt.excluded.match_reasons,
                "updated_at": func.now(),
            },
        )
        with self.Session.begin() as session:
            session.execute(stmt)

    @_write
    def record_run(self, run: ScraperRun) -> None:
        row = ScraperLog(
            source=run.source,
            jobs_found=run.jobs_found,
            jobs_added=run.jobs_added,
            jobs_updated=run.jobs_updated,
            error=run.error,
            started_at=run.started_at,
        )
        if run.finished_at:
            row.finished_at = run.finished_at
        with self.Session.begin() as session:
            session.add(row)

    @_write
    def update_match(
        self,
        job_id: int,
        *,
        status: str | None = None,
        favorited: bool | None = None,
        notes: str | None = None,
    ) -> bool:
        """Change user-owned match fields; None leaves a field as is. False if the job has no match row."""
        changes: dict[str, Any] = {"updated_at": func.now()}
        if status is not None:
            changes["status"] = status
            if status == "applied":
                changes["applied"] = True
        if favorited is not None:
            changes["favorited"] = favorited
        if notes is not None:
            changes["notes"] = notes

        with self.Session.begin() as session:
            result = session.execute(
                update(JobMatch).where(JobMatch.job_id == job_id).values(**changes)
            )
        return result.rowcount > 0

    # -- reads -------------------------------------------------------------

    def list_jobs(
        self,
        *,
        min_score: int = 0,
        status: str = "all",
        favorited: bool | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        stmt = _joined()
        if min_score > 0:
            stmt = stmt.where(or_(JobMatch.match_score >= min_score, JobMatch.match_score.is_(None)))
        if status != "all":
            stmt = stmt.where(JobMatch.status == status)
        if favorited is not None:
            stmt = stmt.where(JobMatch.favorited == favorited)
        if search:
            term = f"%{search}%"
            stmt = stmt.where(or_(
                JobRow.title.like(term), JobRow.company.like(term), JobRow.description.like(term),
            ))
        stmt = stmt.order_by(JobMatch.match_score.desc(), JobRow.posted_at.desc()).limit(limit).offset(offset)

        with self.Session() as session:
            return [dict(r._mapping) for r in session.execute(stmt)]

    def get_job(self, job_id: int) -> dict[str, Any] | None:
        with self.Session() as session:
            row = session.execute(_joined().where(JobRow.id == job_id)).first()
        return dict(row._mapping) if row else None

    def all_jobs(self) -> list[tuple[int, Job]]:
        """Every stored job rebuilt as a ``Job``, for rescoring."""
        with self.Session() as session:
            return [
                (
                    r.id,
                    Job(
                        external_id=r.external_id,
                        source=r.source,
                        title=r.title,
                        company=r.company,
                        url=r.url,
                        location=r.location or "",
                        description=r.description or "",
                        salary_min=r.salary_min,
                        salary_max=r.salary_max,
                        salary_currency=r.salary_currency,
                        job_type=r.job_type or "unknown",
                        remote=bool(r.remote),
                        tags=r.tags or "",
                        posted_at=parse_datetime(r.posted_at),
                    ),
                )
                for r in session.scalars(select(JobRow).order_by(JobRow.id))
            ]

    def count_jobs(self) -> int:
        with self.Session() as session:
            return session.scalar(select(func.count()).select_from(JobRow))

    def stats(self) -> dict[str, Any]:
        matches = select(func.count()).select_from(JobMatch)
        with self.Session() as session:
            return {
                "total_jobs": session.scalar(select(func.count()).select_from(JobRow)),
                "high_matches": session.scalar(matches.where(JobMatch.match_score >= HIGH_MATCH_SCORE)),
                "favorited": session.scalar(matches.where(JobMatch.favorited.is_(True))),
                "applied": session.scalar(matches.where(JobMatch.status == "applied")),
                "last_update": session.scalar(select(func.max(JobRow.created_at))),
            }

    def recent_runs(self, limit: int = 20) -> list[dict[str, Any]]:
        with self.Session() as session:
            rows = session.scalars(select(ScraperLog).order_by(ScraperLog.id.desc()).limit(limit))
            return [_as_dict(r) for r in rows]
