"""Read models returned by the workflow layer and the API.

Views are built while the owning session is still open, so relationships
(uploader, analyst, custody actors) are populated from the ORM objects.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .db.models import (
    ActivityAction,
    AnalysisStatus,
    CaseStatus,
    CustodyAction,
    EvidenceStatus,
    EvidenceType,
    Priority,
    Reliability,
    Role,
    SuspectStatus,
    TransferStatus,
    VerdictDecision,
)


class _View(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserRef(_View):
    """Minimal identity of an actor referenced by another record."""

    id: int
    username: str
    role: Role
    full_name: str | None = None


class UserView(_View):
    id: int
    username: str
    email: str | None = None
    full_name: str | None = None
    role: Role
    role_id: str
    wallet_address: str | None = None
    is_verified: bool
    is_suspended: bool
    role_tx_hash: str | None = None
    created_at: datetime
    last_login_at: datetime | None = None


class TimelineEntryView(_View):
    status: CaseStatus
    event: str
    actor: UserRef | None = None
    note: str | None = None
    timestamp: datetime


class HearingView(_View):
    id: int
    scheduled_at: datetime
    location: str | None = None
    notes: str | None = None
    scheduled_by: UserRef
    created_at: datetime


class TransferRequestView(BaseModel):
    status: TransferStatus
    to_station: str | None = None
    reason: str | None = None
    requested_by_id: int | None = None
    requested_at: datetime | None = None
    decided_by_id: int | None = None
    decided_at: datetime | None = None
    decision_note: str | None = None


class CaseView(_View):
    """A case with its timeline and assignments populated."""

    id: int
    case_id: str
    title: str
    description: str | None = None
    case_number: str | None = None
    location: str | None = None
    priority: Priority
    police_station: str | None = None
    status: CaseStatus
    is_draft: bool
    registered_by: UserRef
    assigned_forensic: UserRef | None = None
    assigned_judge: UserRef | None = None
    approved_by: UserRef | None = None
    approved_at: datetime | None = None
    blockchain_case_id: str | None = None
    blockchain_tx_hash: str | None = None
    approval_tx_hash: str | None = None
    transfer_request: TransferRequestView | None = None
    verdict_decision: VerdictDecision | None = None
    verdict_summary: str | None = None
    verdict_html: str | None = None
    verdict_by: UserRef | None = None
    verdict_at: datetime | None = None
    verdict_tx_hash: str | None = None
    closed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None
    version: int
    evidence_ids: list[str] = Field(default_factory=list)
    timeline: list[TimelineEntryView] = Field(default_factory=list)

    @classmethod
    def from_case(cls, case) -> CaseView:
        view = cls.model_validate(case)
        view.evidence_ids = [ev.evidence_id for ev in case.evidence]
        if case.transfer_status is not None:
            view.transfer_request = TransferRequestView(
                status=case.transfer_status,
                to_station=case.transfer_to_station,
                reason=case.transfer_reason,
                requested_by_id=case.transfer_requested_by_id,
                requested_at=case.transfer_requested_at,
                decided_by_id=case.transfer_decided_by_id,
                decided_at=case.transfer_decided_at,
                decision_note=case.transfer_decision_note,
            )
        return view


class CustodyEntryView(_View):
    action: CustodyAction
    actor: UserRef | None = None
    actor_role: str | None = None
    timestamp: datetime
    detail: str | None = None
    hash: str | None = None


class EvidenceView(_View):
    """An evidence item with uploader, analyst and custody chain populated."""

    id: int
    evidence_id: str
    case_id: str
    evidence_type: EvidenceType
    title: str
    description: str | None = None
    uploaded_by: UserRef
    file_name: str | None = None
    file_size: int | None = None
    mime_type: str | None = None
    content_hash: str
    gateway_url: str | None = None
    content_uri: str | None = None
    sha256: str
    status: EvidenceStatus
    analysis_status: AnalysisStatus
    analyzed_by: UserRef | None = None
    analysis_report: str | None = None
    analysis_notes: str | None = None
    analyzed_at: datetime | None = None
    is_immutable: bool
    verified_by: UserRef | None = None
    verified_at: datetime | None = None
    availability_verified: bool
    availability_checked_at: datetime | None = None
    tamper_detected_at: datetime | None = None
    tamper_reason: str | None = None
    blockchain_tx_hash: str | None = None
    uploaded_at: datetime
    version: int
    custody: list[CustodyEntryView] = Field(default_factory=list)

    @classmethod
    def from_evidence(cls, ev) -> EvidenceView:
        data = {name: getattr(ev, name) for name in cls.model_fields if name != "case_id"}
        data["case_id"] = ev.case.case_id
        return cls.model_validate(data, from_attributes=True)


class EvidenceHashesView(BaseModel):
    evidence_id: str
    content_hash: str
    sha256: str
    gateway_url: str | None = None
    content_uri: str | None = None
    is_immutable: bool


class AvailabilityView(BaseModel):
    """Result of a gateway availability probe; not a content hash proof."""

    evidence_id: str
    available: bool
    method: str
    checked_url: str
    status_code: int | None = None
    error: str | None = None
    checked_at: datetime


class LedgerAnchorView(BaseModel):
    """An evidence hash read back from the ledger and compared with the local record."""

    index: int
    evidence_id: str
    content_hash: str
    ledger_hash: str
    matches: bool


class LedgerRecordView(BaseModel):
    case_id: str
    blockchain_case_id: str
    police_officer: str
    forensic_officer: str
    judge_officer: str
    approved: bool
    closed: bool
    anchors: list[LedgerAnchorView] = Field(default_factory=list)


class NoteView(_View):
    note_id: str
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    is_confidential: bool
    content_hash: str
    created_by: UserRef
    created_at: datetime
    updated_at: datetime | None = None


class SuspectView(_View):
    suspect_id: str
    name: str
    age: int | None = None
    gender: str | None = None
    address: str | None = None
    description: str | None = None
    status: SuspectStatus
    arrest_date: datetime | None = None
    release_date: datetime | None = None
    content_hash: str
    created_by: UserRef
    created_at: datetime


class WitnessView(_View):
    witness_id: str
    name: str
    contact: str | None = None
    address: str | None = None
    statement: str
    reliability: Reliability
    content_hash: str
    created_by: UserRef
    created_at: datetime


class ActivityLogView(_View):
    log_id: str
    performed_by: UserRef | None = None
    performed_by_role: str | None = None
    action: ActivityAction
    case_pk: int | None = None
    resource_id: str | None = None
    description: str
    attributes: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime


class JobRunView(_View):
    id: int
    job_type: str
    status: str
    started_at: datetime
    finished_at: datetime | None = None
    error: str | None = None
    metrics: dict[str, Any] = Field(default_factory=dict)
