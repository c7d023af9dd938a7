"""Role-checked reads over the activity log and background job history."""

from __future__ import annotations

from ..db.models import Role
from ..db.repositories import JobRunRepository
from ..errors import AuthorizationError
from ..schemas import ActivityLogView, JobRunView
from .context import Actor, WorkflowContext, load_visible_case, require_role


class AuditService:
    def __init__(self, ctx: WorkflowContext):
        self.ctx = ctx

    def admin_feed(self, actor: Actor) -> list[ActivityLogView]:
        """Latest entries across the system."""
        require_role(actor, Role.ADMIN, message="Only admin can view audit logs")
        return self.ctx.activity.admin_feed()

    def case_feed(self, actor: Actor, case_id: str) -> list[ActivityLogView]:
        with self.ctx.db.session() as session:
            case_pk = load_visible_case(session, case_id, actor).id
        return self.ctx.activity.for_case(case_pk)

    def user_feed(self, actor: Actor, user_id: int) -> list[ActivityLogView]:
        if actor.role is not Role.ADMIN and actor.user_id != user_id:
            raise AuthorizationError("Not authorized to view this user's activity")
        return self.ctx.activity.for_user(user_id)

    def job_runs(self, actor: Actor, job_type: str | None = None, limit: int = 50) -> list[JobRunView]:
        """Recent background job runs, newest first."""
        require_role(actor, Role.ADMIN, message="Only admin can view job history")
        with self.ctx.db.session() as session:
            runs = JobRunRepository(session).get_recent_job_runs(job_type=job_type, limit=limit)
            return [JobRunView.model_validate(r) for r in runs]
