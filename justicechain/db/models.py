"""SQLAlchemy ORM models for justicechain."""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship

from . import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enum(enum_cls):
    # stored as VARCHAR so migrations stay portable across SQLite and PostgreSQL
    return SQLEnum(enum_cls, native_enum=False, length=32, validate_strings=True)


class Role(str, Enum):
    """Actor roles; each has a disjoint set of permitted actions."""
    POLICE = "POLICE"
    FORENSIC = "FORENSIC"
    JUDGE = "JUDGE"
    ADMIN = "ADMIN"


class CaseStatus(str, Enum):
    DRAFT = "DRAFT"
    REGISTERED = "REGISTERED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    IN_FORENSIC_ANALYSIS = "IN_FORENSIC_ANALYSIS"
    ANALYSIS_COMPLETE = "ANALYSIS_COMPLETE"
    HEARING = "HEARING"
    CLOSED = "CLOSED"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TransferStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class VerdictDecision(str, Enum):
    GUILTY = "GUILTY"
    NOT_GUILTY = "NOT_GUILTY"
    DISMISSED = "DISMISSED"


class EvidenceType(str, Enum):
    DOCUMENT = "DOCUMENT"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    DIGITAL = "DIGITAL"
    PHYSICAL = "PHYSICAL"
    OTHER = "OTHER"


class EvidenceStatus(str, Enum):
    UPLOADED = "UPLOADED"
    PENDING_ANALYSIS = "PENDING_ANALYSIS"
    ANALYZING = "ANALYZING"
    ANALYSIS_COMPLETE = "ANALYSIS_COMPLETE"
    VERIFIED = "VERIFIED"
    IMMUTABLE = "IMMUTABLE"


class AnalysisStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"
    REJECTED = "REJECTED"


class CustodyAction(str, Enum):
    """Events recorded on an evidence item's chain of custody."""
    UPLOADED = "UPLOADED"
    ACCESSED = "ACCESSED"
    ANALYZED = "ANALYZED"
    VERIFIED = "VERIFIED"
    LOCKED = "LOCKED"
    TRANSFERRED = "TRANSFERRED"
    TAMPER_DETECTED = "TAMPER_DETECTED"


class SuspectStatus(str, Enum):
    UNDER_WATCH = "UNDER_WATCH"
    ARRESTED = "ARRESTED"
    RELEASED = "RELEASED"
    CONVICTED = "CONVICTED"


class Reliability(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ActivityAction(str, Enum):
    """Audit trail action labels."""
    CASE_CREATED = "CASE_CREATED"
    CASE_DRAFTED = "CASE_DRAFTED"
    CASE_UPDATED = "CASE_UPDATED"
    CASE_SUBMITTED = "CASE_SUBMITTED"
    CASE_APPROVED = "CASE_APPROVED"
    FORENSIC_ASSIGNED = "FORENSIC_ASSIGNED"
    JUDGE_ASSIGNED = "JUDGE_ASSIGNED"
    TRANSFER_REQUESTED = "TRANSFER_REQUESTED"
    TRANSFER_APPROVED = "TRANSFER_APPROVED"
    TRANSFER_REJECTED = "TRANSFER_REJECTED"
    HEARING_SCHEDULED = "HEARING_SCHEDULED"
    VERDICT_SUBMITTED = "VERDICT_SUBMITTED"
    EVIDENCE_UPLOADED = "EVIDENCE_UPLOADED"
    EVIDENCE_ANALYZED = "EVIDENCE_ANALYZED"
    EVIDENCE_VERIFIED = "EVIDENCE_VERIFIED"
    EVIDENCE_LOCKED = "EVIDENCE_LOCKED"
    TAMPER_DETECTED = "TAMPER_DETECTED"
    NOTE_ADDED = "NOTE_ADDED"
    NOTE_UPDATED = "NOTE_UPDATED"
    SUSPECT_ADDED = "SUSPECT_ADDED"
    SUSPECT_STATUS_UPDATED = "SUSPECT_STATUS_UPDATED"
    WITNESS_ADDED = "WITNESS_ADDED"
    WITNESS_RELIABILITY_UPDATED = "WITNESS_RELIABILITY_UPDATED"
    USER_REGISTERED = "USER_REGISTERED"
    USER_APPROVED = "USER_APPROVED"
    USER_SUSPENDED = "USER_SUSPENDED"
    USER_UNSUSPENDED = "USER_UNSUSPENDED"
    WALLET_UPDATED = "WALLET_UPDATED"


class User(Base):
    """A registered actor. Never hard-deleted."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)
    role = Column(_enum(Role), nullable=False, index=True)
    role_id = Column(String(64), unique=True, nullable=False)  # POLI_<millis>_<rand>
    wallet_address = Column(String(42), nullable=True, index=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_suspended = Column(Boolean, default=False, nullable=False)
    role_tx_hash = Column(String(80), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"


class Case(Base):
    """A unit of investigative work from registration to verdict."""
    __tablename__ = "cases"

    id = Column(Integer, primary_key=True)
    case_id = Column(String(64), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    case_number = Column(String(100), nullable=True, index=True)
    location = Column(String(255), nullable=True)
    priority = Column(_enum(Priority), default=Priority.MEDIUM, nullable=False)
    police_station = Column(String(255), nullable=True)
    status = Column(_enum(CaseStatus), nullable=False, index=True)
    is_draft = Column(Boolean, default=False, nullable=False)

    registered_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    assigned_forensic_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    assigned_judge_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)

    # Ledger linkage
    blockchain_case_id = Column(String(80), nullable=True)
    blockchain_tx_hash = Column(String(80), nullable=True)
    approval_tx_hash = Column(String(80), nullable=True)

    # Transfer request (NONE -> PENDING -> APPROVED/REJECTED)
    transfer_status = Column(_enum(TransferStatus), nullable=True)
    transfer_to_station = Column(String(255), nullable=True)
    transfer_reason = Column(Text, nullable=True)
    transfer_requested_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    transfer_requested_at = Column(DateTime, nullable=True)
    transfer_decided_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    transfer_decided_at = Column(DateTime, nullable=True)
    transfer_decision_note = Column(Text, nullable=True)

    # Verdict
    verdict_decision = Column(_enum(VerdictDecision), nullable=True)
    verdict_summary = Column(Text, nullable=True)
    verdict_html = Column(Text, nullable=True)
    verdict_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    verdict_at = Column(DateTime, nullable=True)
    verdict_tx_hash = Column(String(80), nullable=True)
    closed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    registered_by = relationship("User", foreign_keys=[registered_by_id])
    assigned_forensic = relationship("User", foreign_keys=[assigned_forensic_id])
    assigned_judge = relationship("User", foreign_keys=[assigned_judge_id])
    approved_by = relationship("User", foreign_keys=[approved_by_id])
    verdict_by = relationship("User", foreign_keys=[verdict_by_id])
    timeline = relationship(
        "CaseTimelineEntry",
        back_populates="case",
        cascade="all, delete-orphan",
        order_by="CaseTimelineEntry.id",
    )
    hearings = relationship(
        "Hearing", back_populates="case", cascade="all, delete-orphan", order_by="Hearing.id"
    )
    evidence = relationship(
        "Evidence", back_populates="case", cascade="all, delete-orphan", order_by="Evidence.id"
    )
    notes = relationship("InvestigationNote", back_populates="case", cascade="all, delete-orphan")
    suspects = relationship("Suspect", back_populates="case", cascade="all, delete-orphan")
    witnesses = relationship("Witness", back_populates="case", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Case(case_id={self.case_id}, status={self.status})>"


class CaseTimelineEntry(Base):
    """Append-only record of case status changes."""
    __tablename__ = "case_timeline"

    id = Column(Integer, primary_key=True)
    case_pk = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    status = Column(_enum(CaseStatus), nullable=False)  # case status after the event
    event = Column(String(64), nullable=False)  # CASE_CREATED, TRANSFER_APPROVED, ...
    actor_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    note = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=utcnow, nullable=False)

    case = relationship("Case", back_populates="timeline")
    actor = relationship("User")

    def __repr__(self):
        return f"<CaseTimelineEntry(case_pk={self.case_pk}, event={self.event})>"


class Hearing(Base):
    """A scheduled court hearing."""
    __tablename__ = "hearings"

    id = Column(Integer, primary_key=True)
    case_pk = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    scheduled_at = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    scheduled_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    case = relationship("Case", back_populates="hearings")
    scheduled_by = relationship("User")

    def __repr__(self):
        return f"<Hearing(case_pk={self.case_pk}, scheduled_at={self.scheduled_at})>"


class Evidence(Base):
    """An artifact attached to a case, pinned in a content-addressed store."""
    __tablename__ = "evidence"

    id = Column(Integer, primary_key=True)
    evidence_id = Column(String(64), unique=True, nullable=False, index=True)
    case_pk = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    evidence_type = Column(_enum(EvidenceType), default=EvidenceType.OTHER, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    uploaded_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    file_name = Column(String(255), nullable=True)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(255), nullable=True)
    content_hash = Column(String(128), nullable=False, index=True)  # pinning reference
    gateway_url = Column(String(500), nullable=True)
    content_uri = Column(String(500), nullable=True)  # ipfs://<hash> or minio://bucket/key
    sha256 = Column(String(64), nullable=False, index=True)

    status = Column(_enum(EvidenceStatus), default=EvidenceStatus.UPLOADED, nullable=False)
    analysis_status = Column(_enum(AnalysisStatus), default=AnalysisStatus.PENDING, nullable=False)
    analyzed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    analysis_report = Column(Text, nullable=True)
    analysis_notes = Column(Text, nullable=True)
    analyzed_at = Column(DateTime, nullable=True)

    is_immutable = Column(Boolean, default=False, nullable=False)
    verified_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    verified_at = Column(DateTime, nullable=True)
    availability_verified = Column(Boolean, default=False, nullable=False)
    availability_checked_at = Column(DateTime, nullable=True)
    tamper_detected_at = Column(DateTime, nullable=True)
    tamper_reason = Column(Text, nullable=True)
    blockchain_tx_hash = Column(String(80), nullable=True)

    uploaded_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    case = relationship("Case", back_populates="evidence")
    uploaded_by = relationship("User", foreign_keys=[uploaded_by_id])
    analyzed_by = relationship("User", foreign_keys=[analyzed_by_id])
    verified_by = relationship("User", foreign_keys=[verified_by_id])
    custody = relationship(
        "CustodyEntry",
        back_populates="evidence",
        cascade="all, delete-orphan",
        order_by="CustodyEntry.id",
    )

    def __repr__(self):
        return f"<Evidence(evidence_id={self.evidence_id}, status={self.status})>"


class CustodyEntry(Base):
    """Append-only chain-of-custody event."""
    __tablename__ = "custody_entries"

    id = Column(Integer, primary_key=True)
    evidence_pk = Column(Integer, ForeignKey("evidence.id"), nullable=False, index=True)
    action = Column(_enum(CustodyAction), nullable=False)
    actor_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # None for system sweeps
    actor_role = Column(String(32), nullable=True)
    timestamp = Column(DateTime, default=utcnow, nullable=False)
    detail = Column(Text, nullable=True)
    hash = Column(String(64), nullable=True)

    evidence = relationship("Evidence", back_populates="custody")
    actor = relationship("User")

    def __repr__(self):
        return f"<CustodyEntry(evidence_pk={self.evidence_pk}, action={self.action})>"


class InvestigationNote(Base):
    __tablename__ = "investigation_notes"

    id = Column(Integer, primary_key=True)
    note_id = Column(String(64), unique=True, nullable=False, index=True)
    case_pk = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(JSON, default=list, nullable=False)
    is_confidential = Column(Boolean, default=False, nullable=False)
    content_hash = Column(String(64), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="notes")
    created_by = relationship("User")

    def __repr__(self):
        return f"<InvestigationNote(note_id={self.note_id})>"


class Suspect(Base):
    __tablename__ = "suspects"

    id = Column(Integer, primary_key=True)
    suspect_id = Column(String(64), unique=True, nullable=False, index=True)
    case_pk = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=True)
    gender = Column(String(32), nullable=True)
    address = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    status = Column(_enum(SuspectStatus), default=SuspectStatus.UNDER_WATCH, nullable=False)
    arrest_date = Column(DateTime, nullable=True)
    release_date = Column(DateTime, nullable=True)
    content_hash = Column(String(64), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="suspects")
    created_by = relationship("User")

    def __repr__(self):
        return f"<Suspect(suspect_id={self.suspect_id}, status={self.status})>"


class Witness(Base):
    __tablename__ = "witnesses"

    id = Column(Integer, primary_key=True)
    witness_id = Column(String(64), unique=True, nullable=False, index=True)
    case_pk = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    contact = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    statement = Column(Text, nullable=False)
    reliability = Column(_enum(Reliability), default=Reliability.MEDIUM, nullable=False)
    content_hash = Column(String(64), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="witnesses")
    created_by = relationship("User")

    def __repr__(self):
        return f"<Witness(witness_id={self.witness_id}, reliability={self.reliability})>"


class ActivityLog(Base):
    """Append-only audit trail; references to users and cases are lookups only."""
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True)
    log_id = Column(String(64), unique=True, nullable=False, index=True)
    performed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    performed_by_role = Column(String(32), nullable=True)
    action = Column(_enum(ActivityAction), nullable=False, index=True)
    case_pk = Column(Integer, ForeignKey("cases.id"), nullable=True, index=True)
    resource_id = Column(String(64), nullable=True)
    description = Column(Text, nullable=False)
    attributes = Column(JSON, default=dict, nullable=False)
    timestamp = Column(DateTime, default=utcnow, nullable=False, index=True)

    performed_by = relationship("User")
    case = relationship("Case")

    def __repr__(self):
        return f"<ActivityLog(action={self.action}, performed_by_id={self.performed_by_id})>"


class JobRun(Base):
    """Track background job executions (integrity sweeps)."""
    __tablename__ = "job_runs"

    id = Column(Integer, primary_key=True)
    job_type = Column(String(50), nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)  # running, success, failed
    started_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    finished_at = Column(DateTime, nullable=True)
    error = Column(Text, nullable=True)
    metrics = Column(JSON, default=dict, nullable=False)
    attributes = Column(JSON, default=dict, nullable=False)

    def __repr__(self):
        return f"<JobRun(id={self.id}, job_type={self.job_type}, status={self.status})>"
