"""Repository for job run operations."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import JobRun, utcnow


class JobRunRepository:
    """Repository for background job run tracking."""

    def __init__(self, session: Session):
        """Initialize the JobRunRepository with a database session."""
        self.session = session

    def start_job_run(self, job_type: str, attributes: dict | None = None) -> JobRun:
        """Start a new job run."""
        job = JobRun(
            job_type=job_type,
            status="running",
            attributes=attributes or {},
        )
        self.session.add(job)
        self.session.flush()
        return job

    def finish_job_run(
        self,
        job: JobRun,
        status: str = "success",
        error: str | None = None,
        metrics: dict | None = None,
    ) -> JobRun:
        """Finish a job run and update its status."""
        job.status = status
        job.error = error
        job.metrics = metrics or job.metrics
        job.finished_at = utcnow()
        self.session.flush()
        return job

    def get_recent_job_runs(self, job_type: str | None = None, limit: int = 50) -> list[JobRun]:
        """Get recent job runs, optionally filtered by type."""
        stmt = select(JobRun)
        if job_type:
            stmt = stmt.where(JobRun.job_type == job_type)
        stmt = stmt.order_by(JobRun.started_at.desc(), JobRun.id.desc()).limit(limit)
        return list(self.session.execute(stmt).scalars().all())
