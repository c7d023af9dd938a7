"""Repository for the activity log."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ...ids import LOG_PREFIX, generate_public_id, unique_public_id
from ..models import ActivityAction, ActivityLog


class ActivityRepository:
    """Append and query audit trail entries."""

    def __init__(self, session: Session):
        """Initialize the ActivityRepository with a database session."""
        self.session = session

    def add_entry(
        self,
        action: ActivityAction,
        description: str,
        performed_by_id: int | None = None,
        performed_by_role: str | None = None,
        case_pk: int | None = None,
        resource_id: str | None = None,
        attributes: dict | None = None,
    ) -> ActivityLog:
        entry = ActivityLog(
            log_id=unique_public_id(
                self.session, ActivityLog.log_id, lambda: generate_public_id(LOG_PREFIX)
            ),
            action=action,
            description=description,
            performed_by_id=performed_by_id,
            performed_by_role=performed_by_role,
            case_pk=case_pk,
            resource_id=resource_id,
            attributes=attributes or {},
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    def latest(self, limit: int = 100) -> list[ActivityLog]:
        stmt = select(ActivityLog).order_by(ActivityLog.id.desc()).limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def for_case(self, case_pk: int) -> list[ActivityLog]:
        stmt = (
            select(ActivityLog)
            .where(ActivityLog.case_pk == case_pk)
            .order_by(ActivityLog.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def for_user(self, user_id: int, limit: int = 50) -> list[ActivityLog]:
        stmt = (
            select(ActivityLog)
            .where(ActivityLog.performed_by_id == user_id)
            .order_by(ActivityLog.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all())
