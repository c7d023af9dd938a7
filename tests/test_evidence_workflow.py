"""Tests for evidence upload, analysis, immutability and chain of custody."""

import hashlib

import pytest

from justicechain.db.models import AnalysisStatus, CaseStatus, CustodyAction, EvidenceStatus
from justicechain.errors import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from justicechain.workflow import EvidenceService, WorkflowContext


@pytest.fixture
def case(services, police):
    return services.cases.create_case(police, title="Evidence case", police_station="Central")


def test_upload_pins_file_and_starts_custody(services, police, case, pinning, ledger, make_upload):
    """Test upload stores the pinning reference, sha256 and an UPLOADED custody entry."""
    path = make_upload(b"camera footage")
    ev = services.evidence.upload(
        police, case.case_id, path, "footage.mp4", title="CCTV", evidence_type="VIDEO",
        mime_type="video/mp4",
    )

    assert ev.evidence_id.startswith("EVID_")
    assert ev.case_id == case.case_id
    assert ev.status == EvidenceStatus.UPLOADED
    assert ev.analysis_status == AnalysisStatus.PENDING
    assert ev.sha256 == hashlib.sha256(b"camera footage").hexdigest()
    assert ev.content_hash in pinning.objects
    assert ev.content_uri == f"ipfs://{ev.content_hash}"
    assert ev.file_size == len(b"camera footage")
    assert ev.uploaded_by.id == police.user_id
    assert [c.action for c in ev.custody] == [CustodyAction.UPLOADED]
    assert ev.custody[0].hash == ev.sha256
    assert ("add_evidence", "1", ev.content_hash) in ledger.calls
    assert ev.blockchain_tx_hash is not None

    assert not path.exists()
    assert services.cases.get_case(police, case.case_id).evidence_ids == [ev.evidence_id]


def test_upload_cleans_up_when_pinning_fails(services, police, case, pinning, make_upload):
    pinning.fail_uploads = True
    path = make_upload()

    with pytest.raises(DependencyError):
        services.evidence.upload(police, case.case_id, path, "doc.pdf")

    assert not path.exists()
    assert services.evidence.list_by_case(police, case.case_id) == []



def test_upload_wraps_store_connection_errors(services, police, case, pinning, monkeypatch, make_upload):
    def unreachable(*args, **kwargs):
        raise ConnectionError("minio endpoint unreachable")

    monkeypatch.setattr(pinning, "upload", unreachable)
    path = make_upload()
    with pytest.raises(DependencyError, match="minio endpoint unreachable"):
        services.evidence.upload(police, case.case_id, path, "doc.pdf")
    assert not path.exists()


def test_upload_cleans_up_on_rejection(services, forensic, case, make_upload):
    path = make_upload()
    with pytest.raises(AuthorizationError):
        services.evidence.upload(forensic, case.case_id, path, "doc.pdf")
    assert not path.exists()


def test_upload_to_unknown_case(services, police, make_upload):
    path = make_upload()
    with pytest.raises(NotFoundError):
        services.evidence.upload(police, "CASE_0_0", path, "doc.pdf")
    assert not path.exists()


def test_upload_without_pinning_service(db, police, case, make_upload):
    evidence = EvidenceService(WorkflowContext.build(db))
    with pytest.raises(ConfigurationError):
        evidence.upload(police, case.case_id, make_upload(), "doc.pdf")


def test_upload_rejects_unknown_type(services, police, case, make_upload):
    with pytest.raises(ValidationError):
        services.evidence.upload(police, case.case_id, make_upload(), "x", evidence_type="HOLOGRAM")


def test_submit_analysis(services, police, forensic, admin, case, ledger, make_upload):
    """Test analysis is recorded, custody grows and the case advances once all items are done."""
    services.cases.assign_forensic(admin, case.case_id, forensic.user_id)
    first = services.evidence.upload(police, case.case_id, make_upload(b"a"), "a.txt")
    second = services.evidence.upload(police, case.case_id, make_upload(b"b"), "b.txt")

    analysed = services.evidence.submit_analysis(forensic, first.evidence_id, "Report A", "note")
    assert analysed.status == EvidenceStatus.ANALYSIS_COMPLETE
    assert analysed.analysis_status == AnalysisStatus.COMPLETE
    assert analysed.analyzed_by.id == forensic.user_id
    assert analysed.analysis_notes == "note"
    assert [c.action for c in analysed.custody] == [CustodyAction.UPLOADED, CustodyAction.ANALYZED]
    assert services.cases.get_case(admin, case.case_id).status == CaseStatus.IN_FORENSIC_ANALYSIS

    services.evidence.submit_analysis(forensic, second.evidence_id, "Report B")
    assert services.cases.get_case(admin, case.case_id).status == CaseStatus.ANALYSIS_COMPLETE

    digest = hashlib.sha256(b"Report A").hexdigest()
    assert ("submit_forensic_report", "1", digest) in ledger.calls


def test_each_analysis_bumps_case_version(services, police, forensic, admin, case, make_upload):
    """Test every analysis writes the case row so parallel final submissions conflict."""
    services.cases.assign_forensic(admin, case.case_id, forensic.user_id)
    first = services.evidence.upload(police, case.case_id, make_upload(b"a"), "a.txt")
    second = services.evidence.upload(police, case.case_id, make_upload(b"b"), "b.txt")
    before = services.cases.get_case(admin, case.case_id)

    services.evidence.submit_analysis(forensic, first.evidence_id, "Report A")
    middle = services.cases.get_case(admin, case.case_id)
    assert middle.status == CaseStatus.IN_FORENSIC_ANALYSIS
    assert middle.version > before.version

    services.evidence.submit_analysis(forensic, second.evidence_id, "Report B")
    assert services.cases.get_case(admin, case.case_id).version > middle.version


def test_submit_analysis_requires_forensic(services, police, case, make_upload):
    ev = services.evidence.upload(police, case.case_id, make_upload(), "a.txt")
    with pytest.raises(AuthorizationError):
        services.evidence.submit_analysis(police, ev.evidence_id, "Report")


def test_submit_analysis_requires_report(services, police, forensic, case, make_upload):
    ev = services.evidence.upload(police, case.case_id, make_upload(), "a.txt")
    with pytest.raises(ValidationError):
        services.evidence.submit_analysis(forensic, ev.evidence_id, "  ")


def test_mark_immutable(services, police, judge, case, make_upload):
    """Test locking after a successful availability check."""
    ev = services.evidence.upload(police, case.case_id, make_upload(), "a.txt")

    locked = services.evidence.mark_immutable(judge, ev.evidence_id)
    assert locked.is_immutable is True
    assert locked.status == EvidenceStatus.IMMUTABLE
    assert locked.verified_by.id == judge.user_id
    assert locked.availability_verified is True
    assert locked.custody[-1].action == CustodyAction.LOCKED
    assert "not re-hashed" in locked.custody[-1].detail

    with pytest.raises(ConflictError):
        services.evidence.mark_immutable(judge, ev.evidence_id)


def test_immutable_evidence_blocks_analysis(services, police, forensic, judge, case, make_upload):
    ev = services.evidence.upload(police, case.case_id, make_upload(), "a.txt")
    services.evidence.mark_immutable(judge, ev.evidence_id)
    with pytest.raises(ConflictError):
        services.evidence.submit_analysis(forensic, ev.evidence_id, "Too late")


def test_mark_immutable_requires_available_artifact(services, police, judge, case, pinning, make_upload):
    ev = services.evidence.upload(police, case.case_id, make_upload(), "a.txt")
    pinning.missing.add(ev.content_hash)

    with pytest.raises(DependencyError):
        services.evidence.mark_immutable(judge, ev.evidence_id)
    assert services.evidence.get(police, ev.evidence_id).is_immutable is False


def test_mark_immutable_requires_judge(services, police, case, make_upload):
    ev = services.evidence.upload(police, case.case_id, make_upload(), "a.txt")
    with pytest.raises(AuthorizationError):
        services.evidence.mark_immutable(police, ev.evidence_id)


def test_verify_availability(services, police, case, pinning, make_upload):
    ev = services.evidence.upload(police, case.case_id, make_upload(), "a.txt")

    result = services.evidence.verify_availability(police, ev.evidence_id)
    assert result.available is True
    assert result.method == "gateway-availability"
    assert result.checked_url.endswith(ev.content_hash)
    chain = services.evidence.get_chain(police, ev.evidence_id)
    assert [c.action for c in chain] == [CustodyAction.UPLOADED, CustodyAction.VERIFIED]

    pinning.missing.add(ev.content_hash)
    result = services.evidence.verify_availability(police, ev.evidence_id)
    assert result.available is False
    assert result.status_code == 404
    assert len(services.evidence.get_chain(police, ev.evidence_id)) == 2
    assert services.evidence.get(police, ev.evidence_id).availability_verified is False


def test_get_hashes(services, police, case, make_upload):
    ev = services.evidence.upload(police, case.case_id, make_upload(b"xyz"), "a.txt")
    hashes = services.evidence.get_hashes(police, ev.evidence_id)
    assert hashes.sha256 == hashlib.sha256(b"xyz").hexdigest()
    assert hashes.content_hash == ev.content_hash
    assert hashes.is_immutable is False


def test_evidence_reads_follow_case_visibility(services, police, other_police, case, make_upload):
    ev = services.evidence.upload(police, case.case_id, make_upload(), "a.txt")
    with pytest.raises(AuthorizationError):
        services.evidence.get(other_police, ev.evidence_id)
    with pytest.raises(AuthorizationError):
        services.evidence.list_by_case(other_police, case.case_id)


def test_unknown_evidence(services, police):
    with pytest.raises(NotFoundError):
        services.evidence.get(police, "EVID_0_0")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
