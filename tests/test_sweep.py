"""Tests for the periodic evidence integrity sweep."""

import pytest

from justicechain.db.models import ActivityAction, CustodyAction
from justicechain.errors import ConfigurationError
from justicechain.scheduler import run_integrity_sweep, run_scheduled_sweep
from justicechain.scheduler.core import JOB_TYPE
from justicechain.workflow import WorkflowContext


@pytest.fixture
def evidence(services, police, make_upload):
    case = services.cases.create_case(police, title="Sweep case")
    first = services.evidence.upload(police, case.case_id, make_upload(b"one"), "one.txt")
    second = services.evidence.upload(police, case.case_id, make_upload(b"two"), "two.txt")
    return first, second


def test_sweep_all_available(ctx, evidence, pinning):
    result = run_integrity_sweep(ctx)
    assert result["status"] == "success"
    assert result["metrics"]["checked"] == 2
    assert result["metrics"]["available"] == 2
    assert result["metrics"]["flagged"] == 0
    assert len(pinning.checks) == 2


def test_sweep_flags_missing_artifact_once(ctx, services, police, admin, evidence, pinning):
    """Test an unavailable artifact gets one TAMPER_DETECTED custody entry."""
    first, second = evidence
    pinning.missing.add(first.content_hash)

    result = run_integrity_sweep(ctx)
    assert result["metrics"]["unavailable"] == 1
    assert result["metrics"]["flagged"] == 1

    flagged = services.evidence.get(police, first.evidence_id)
    assert flagged.tamper_detected_at is not None
    assert "gateway.test" in flagged.tamper_reason
    assert flagged.availability_verified is False
    entry = flagged.custody[-1]
    assert entry.action == CustodyAction.TAMPER_DETECTED
    assert entry.actor is None
    assert entry.actor_role == "SYSTEM"
    assert services.evidence.get(police, second.evidence_id).tamper_detected_at is None

    again = run_integrity_sweep(ctx)
    assert again["metrics"]["unavailable"] == 1
    assert again["metrics"]["flagged"] == 0
    assert len(services.evidence.get_chain(police, first.evidence_id)) == 2

    actions = [e.action for e in services.audit.admin_feed(admin)]
    assert actions.count(ActivityAction.TAMPER_DETECTED) == 1


def test_sweep_records_job_runs(ctx, services, admin, evidence):
    run_integrity_sweep(ctx)
    runs = services.audit.job_runs(admin, job_type=JOB_TYPE)
    assert len(runs) == 1
    assert runs[0].status == "success"
    assert runs[0].finished_at is not None
    assert runs[0].metrics["checked"] == 2


def test_sweep_counts_probe_errors(ctx, evidence, pinning, monkeypatch):
    def explode(content_hash):
        raise RuntimeError("gateway timeout")

    monkeypatch.setattr(pinning, "check_availability", explode)
    result = run_integrity_sweep(ctx)
    assert result["status"] == "success"
    assert result["metrics"]["errors"] == 2


def test_sweep_needs_pinning(db):
    with pytest.raises(ConfigurationError):
        run_integrity_sweep(WorkflowContext.build(db))


def test_scheduled_sweep_never_raises(db):
    run_scheduled_sweep(WorkflowContext.build(db))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
