"""Core logic for the periodic evidence integrity sweep.

This module contains the business logic of a sweep run, independent of
APScheduler or CLI concerns.
"""

from __future__ import annotations

import logging

from ..db.models import ActivityAction, CustodyAction, JobRun, utcnow
from ..db.repositories import EvidenceRepository, JobRunRepository
from ..errors import ConfigurationError
from ..workflow.context import WorkflowContext

logger = logging.getLogger(__name__)

JOB_TYPE = "integrity_sweep"


def _flag_unavailable(ctx: WorkflowContext, evidence_id: str, reason: str) -> bool:
    """Mark evidence as tampered once; returns True if this call flagged it."""
    with ctx.unit_of_work() as session:
        repo = EvidenceRepository(session)
        ev = repo.get_by_evidence_id(evidence_id)
        if ev is None or ev.tamper_detected_at is not None:
            return False
        now = utcnow()
        ev.tamper_detected_at = now
        ev.tamper_reason = reason
        ev.availability_verified = False
        ev.availability_checked_at = now
        repo.add_custody_entry(ev, CustodyAction.TAMPER_DETECTED, None, reason)
        case_pk = ev.case_pk

    ctx.activity.record(
        None,
        ActivityAction.TAMPER_DETECTED,
        f"Evidence {evidence_id} failed its availability check",
        case_pk=case_pk,
        resource_id=evidence_id,
        metadata={"reason": reason},
    )
    return True


def run_integrity_sweep(ctx: WorkflowContext) -> dict:
    """Re-check every pinned artifact for continued availability.

    Args:
        ctx: Workflow context with a database and a pinning service

    Returns:
        Dict with job status, job id and metrics

    Raises:
        ConfigurationError: If no pinning service is configured
    """
    if ctx.pinning is None:
        raise ConfigurationError("Integrity sweep needs a pinning service")

    with ctx.db.session() as session:
        job = JobRunRepository(session).start_job_run(
            job_type=JOB_TYPE, attributes={"backend": ctx.pinning.name}
        )
        job_id = job.id
        items = [
            (ev.evidence_id, ev.content_hash)
            for ev in EvidenceRepository(session).list_all()
        ]

    metrics = {"checked": 0, "available": 0, "unavailable": 0, "flagged": 0, "errors": 0}
    status, error = "success", None

    try:
        for evidence_id, content_hash in items:
            metrics["checked"] += 1
            try:
                check = ctx.pinning.check_availability(content_hash)
                if check.available:
                    metrics["available"] += 1
                    continue
                metrics["unavailable"] += 1
                reason = f"Artifact unavailable at {check.checked_url}: {check.error or 'unreachable'}"
                if _flag_unavailable(ctx, evidence_id, reason):
                    metrics["flagged"] += 1
                    logger.warning("Tamper suspected for evidence %s: %s", evidence_id, reason)
            except Exception as exc:
                metrics["errors"] += 1
                logger.warning("Integrity check failed for %s: %s", evidence_id, exc)

        logger.info(
            "Integrity sweep completed: %d checked, %d unavailable, %d newly flagged",
            metrics["checked"],
            metrics["unavailable"],
            metrics["flagged"],
        )
    except Exception as exc:
        status, error = "failed", str(exc)
        logger.exception("Integrity sweep failed")

    with ctx.db.session() as session:
        repo = JobRunRepository(session)
        repo.finish_job_run(
            session.get(JobRun, job_id), status=status, error=error, metrics=metrics
        )

    result = {"status": status, "job_id": job_id, "metrics": metrics}
    if error:
        result["error"] = error
    return result
