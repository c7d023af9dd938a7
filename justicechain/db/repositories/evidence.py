"""Repository for evidence operations."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ...ids import EVIDENCE_PREFIX, generate_public_id, unique_public_id
from ..models import Case, CustodyAction, CustodyEntry, Evidence, EvidenceType, User


class EvidenceRepository:
    """Repository for evidence records and their custody chain."""

    def __init__(self, session: Session):
        """Initialize the EvidenceRepository with a database session."""
        self.session = session

    def add_evidence(
        self,
        case: Case,
        uploaded_by: User,
        title: str,
        content_hash: str,
        sha256: str,
        evidence_type: EvidenceType = EvidenceType.OTHER,
        description: str | None = None,
        file_name: str | None = None,
        file_size: int | None = None,
        mime_type: str | None = None,
        gateway_url: str | None = None,
        content_uri: str | None = None,
    ) -> Evidence:
        """Add evidence record."""
        ev = Evidence(
            evidence_id=unique_public_id(
                self.session, Evidence.evidence_id, lambda: generate_public_id(EVIDENCE_PREFIX)
            ),
            case=case,
            uploaded_by=uploaded_by,
            title=title,
            description=description,
            evidence_type=evidence_type,
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
            content_hash=content_hash,
            gateway_url=gateway_url,
            content_uri=content_uri,
            sha256=sha256,
        )
        self.session.add(ev)
        self.session.flush()
        return ev

    def get_by_evidence_id(self, evidence_id: str) -> Evidence | None:
        stmt = select(Evidence).where(Evidence.evidence_id == evidence_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_case(self, case: Case) -> list[Evidence]:
        """List all evidence for a case in upload order."""
        stmt = select(Evidence).where(Evidence.case_pk == case.id).order_by(Evidence.id)
        return list(self.session.execute(stmt).scalars().all())

    def list_all(self) -> list[Evidence]:
        stmt = select(Evidence).order_by(Evidence.id)
        return list(self.session.execute(stmt).scalars().all())

    def add_custody_entry(
        self,
        evidence: Evidence,
        action: CustodyAction,
        actor: User | None,
        detail: str | None = None,
    ) -> CustodyEntry:
        """Append a custody event stamped with the evidence's current sha256."""
        entry = CustodyEntry(
            evidence=evidence,
            action=action,
            actor=actor,
            actor_role=actor.role.value if actor is not None else "SYSTEM",
            detail=detail,
            hash=evidence.sha256,
        )
        self.session.add(entry)
        self.session.flush()
        return entry
