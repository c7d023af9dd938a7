"""Repository for case operations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from ...ids import CASE_PREFIX, generate_public_id, unique_public_id
from ..models import Case, CaseStatus, CaseTimelineEntry, Hearing, Priority, Role, User


class CaseRepository:
    """Repository for cases, their timeline and their hearings."""

    def __init__(self, session: Session):
        """Initialize the CaseRepository with a database session."""
        self.session = session

    def add_case(
        self,
        registered_by: User,
        title: str,
        status: CaseStatus,
        is_draft: bool,
        description: str | None = None,
        case_number: str | None = None,
        location: str | None = None,
        priority: Priority = Priority.MEDIUM,
        police_station: str | None = None,
    ) -> Case:
        """Add a case with a freshly issued public identifier."""
        case = Case(
            case_id=unique_public_id(
                self.session, Case.case_id, lambda: generate_public_id(CASE_PREFIX)
            ),
            title=title,
            description=description,
            case_number=case_number,
            location=location,
            priority=priority,
            police_station=police_station,
            status=status,
            is_draft=is_draft,
            registered_by=registered_by,
        )
        self.session.add(case)
        self.session.flush()
        return case

    def get_by_case_id(self, case_id: str) -> Case | None:
        stmt = select(Case).where(Case.case_id == case_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_cases(self) -> list[Case]:
        """List every case, newest first."""
        stmt = select(Case).order_by(Case.created_at.desc(), Case.id.desc())
        return list(self.session.execute(stmt).scalars().all())

    def list_registered_by(self, user_id: int) -> list[Case]:
        stmt = (
            select(Case)
            .where(Case.registered_by_id == user_id)
            .order_by(Case.created_at.desc(), Case.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_assigned_to(self, user_id: int, role: Role) -> list[Case]:
        """Cases where the user is the assigned forensic officer or judge."""
        column = Case.assigned_forensic_id if role is Role.FORENSIC else Case.assigned_judge_id
        stmt = (
            select(Case)
            .where(column == user_id)
            .order_by(Case.created_at.desc(), Case.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def add_timeline_entry(
        self,
        case: Case,
        event: str,
        actor: User | None,
        note: str | None = None,
    ) -> CaseTimelineEntry:
        """Append a timeline row recording the case's current status."""
        entry = CaseTimelineEntry(
            case=case,
            status=case.status,
            event=event,
            actor=actor,
            note=note,
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    def add_hearing(
        self,
        case: Case,
        scheduled_at: datetime,
        scheduled_by: User,
        location: str | None = None,
        notes: str | None = None,
    ) -> Hearing:
        hearing = Hearing(
            case=case,
            scheduled_at=scheduled_at,
            scheduled_by=scheduled_by,
            location=location,
            notes=notes,
        )
        self.session.add(hearing)
        self.session.flush()
        return hearing
