"""Best-effort audit trail writer.

Entries are written in their own session after the primary operation has
committed. A failed write is logged and dropped; it never fails the caller.
"""

from __future__ import annotations

import logging
from typing import Any

from .db import Database
from .db.models import ActivityAction
from .db.repositories import ActivityRepository
from .logging_utils import actor_fields
from .schemas import ActivityLogView

logger = logging.getLogger(__name__)

ADMIN_FEED_LIMIT = 100
USER_FEED_LIMIT = 50


class ActivityLogger:
    """Appends and reads activity log entries."""

    def __init__(self, db: Database):
        self.db = db

    def record(
        self,
        actor,
        action: ActivityAction,
        description: str,
        case_pk: int | None = None,
        resource_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ActivityLogView | None:
        """Append one entry; returns None when the write failed.

        Args:
            actor: The acting ``Actor`` (or None for system jobs)
            action: Activity action label
            description: Human-readable summary
            case_pk: Internal id of the related case, if any
            resource_id: Public id of the related record, if any
            metadata: Extra structured detail
        """
        try:
            with self.db.session() as session:
                row = ActivityRepository(session).add_entry(
                    action=action,
                    description=description,
                    performed_by_id=actor.user_id if actor is not None else None,
                    performed_by_role=actor.role.value if actor is not None else "SYSTEM",
                    case_pk=case_pk,
                    resource_id=resource_id,
                    attributes=metadata,
                )
                view = ActivityLogView.model_validate(row)
        except Exception as e:
            logger.warning(
                "Activity log write failed (%s): %s", action.value, e, extra=actor_fields(actor)
            )
            return None
        logger.debug("%s: %s", action.value, description, extra=actor_fields(actor))
        return view

    def admin_feed(self, limit: int = ADMIN_FEED_LIMIT) -> list[ActivityLogView]:
        with self.db.session() as session:
            rows = ActivityRepository(session).latest(limit)
            return [ActivityLogView.model_validate(r) for r in rows]

    def for_case(self, case_pk: int) -> list[ActivityLogView]:
        with self.db.session() as session:
            rows = ActivityRepository(session).for_case(case_pk)
            return [ActivityLogView.model_validate(r) for r in rows]

    def for_user(self, user_id: int, limit: int = USER_FEED_LIMIT) -> list[ActivityLogView]:
        with self.db.session() as session:
            rows = ActivityRepository(session).for_user(user_id, limit)
            return [ActivityLogView.model_validate(r) for r in rows]
