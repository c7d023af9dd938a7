"""Identity and administration API routers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query

from ...db.models import Role
from ...scheduler import run_integrity_sweep
from ...schemas import ActivityLogView, JobRunView, LedgerRecordView, UserView
from ...workflow.context import require_role
from ..deps import ServicesDep
from ..errors import to_http_error
from ..models import RoleVerification, UserRegister, WalletUpdate
from ..security import CurrentActor

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])
users_router = APIRouter(prefix="/users", tags=["users"])


# --- /auth ---


@auth_router.post("/register", response_model=UserView, status_code=201)
def register_endpoint(body: UserRegister, services: ServicesDep):
    """Self-register as POLICE, FORENSIC or JUDGE; an admin must approve."""
    try:
        return services.users.register(
            body.username, body.role, body.wallet, body.email, body.full_name
        )
    except Exception as e:
        raise to_http_error("Register user", e) from e


@auth_router.get("/me", response_model=UserView)
def me_endpoint(actor: CurrentActor, services: ServicesDep):
    try:
        return services.users.me(actor)
    except Exception as e:
        raise to_http_error("Get profile", e) from e


@auth_router.put("/wallet", response_model=UserView)
def update_wallet_endpoint(body: WalletUpdate, actor: CurrentActor, services: ServicesDep):
    """Change the caller's wallet address."""
    try:
        return services.users.update_wallet(actor, body.wallet)
    except Exception as e:
        raise to_http_error("Update wallet", e) from e


@auth_router.post("/verify-role")
def verify_role_endpoint(body: RoleVerification, services: ServicesDep):
    """Check a wallet's role registration on the ledger."""
    try:
        verified = services.users.check_verification(body.wallet, body.role)
        return {"wallet": body.wallet, "role": Role(body.role).value, "verified": verified}
    except Exception as e:
        raise to_http_error("Verify role", e) from e


# --- /users ---


@users_router.get("/{user_id}", response_model=UserView)
def get_user_endpoint(user_id: int, actor: CurrentActor, services: ServicesDep):
    try:
        return services.users.get_user(actor, user_id)
    except Exception as e:
        raise to_http_error("Get user", e) from e


@users_router.get("/{user_id}/activity", response_model=List[ActivityLogView])
def user_activity_endpoint(user_id: int, actor: CurrentActor, services: ServicesDep):
    """Recent activity by one user (self or admin)."""
    try:
        return services.audit.user_feed(actor, user_id)
    except Exception as e:
        raise to_http_error("User activity", e) from e


# --- /admin ---


@admin_router.get("/users", response_model=List[UserView])
def list_users_endpoint(
    actor: CurrentActor,
    services: ServicesDep,
    role: Optional[Role] = Query(None, description="Filter by role"),
):
    try:
        return services.users.list_users(actor, role)
    except Exception as e:
        raise to_http_error("List users", e) from e


@admin_router.put("/users/{user_id}/approve", response_model=UserView)
def approve_user_endpoint(user_id: int, actor: CurrentActor, services: ServicesDep):
    """Verify a user and register their role on the ledger."""
    try:
        return services.users.approve_user(actor, user_id)
    except Exception as e:
        raise to_http_error("Approve user", e) from e


@admin_router.put("/users/{user_id}/suspend", response_model=UserView)
def toggle_suspension_endpoint(user_id: int, actor: CurrentActor, services: ServicesDep):
    """Suspend or reinstate a user."""
    try:
        return services.users.toggle_suspension(actor, user_id)
    except Exception as e:
        raise to_http_error("Toggle suspension", e) from e


@admin_router.get("/audit-logs", response_model=List[ActivityLogView])
def audit_logs_endpoint(actor: CurrentActor, services: ServicesDep):
    """Latest activity across the system."""
    try:
        return services.audit.admin_feed(actor)
    except Exception as e:
        raise to_http_error("Audit logs", e) from e


@admin_router.get("/jobs", response_model=List[JobRunView])
def job_runs_endpoint(
    actor: CurrentActor,
    services: ServicesDep,
    limit: int = Query(50, ge=1, le=500),
):
    try:
        return services.audit.job_runs(actor, limit=limit)
    except Exception as e:
        raise to_http_error("List job runs", e) from e


@admin_router.post("/integrity-sweep")
def integrity_sweep_endpoint(actor: CurrentActor, services: ServicesDep):
    """Run an evidence availability sweep now."""
    try:
        require_role(actor, Role.ADMIN, message="Only admin can run integrity sweeps")
        return run_integrity_sweep(services.ctx)
    except Exception as e:
        raise to_http_error("Integrity sweep", e) from e


@admin_router.get("/status")
def status_endpoint(actor: CurrentActor, services: ServicesDep):
    """Report which external integrations are configured."""
    try:
        require_role(actor, Role.ADMIN, message="Only admin can view system status")
        ctx = services.ctx
        ledger = ctx.gateway.client
        return {
            "pinning": ctx.pinning.name if ctx.pinning is not None else None,
            "ledger_enabled": ledger is not None,
            "ledger_account": ledger.address if ledger is not None else None,
        }
    except Exception as e:
        raise to_http_error("System status", e) from e


@admin_router.get("/ledger/cases/{case_id}", response_model=LedgerRecordView)
def ledger_record_endpoint(case_id: str, actor: CurrentActor, services: ServicesDep):
    """Read a case's on-chain record and compare its anchored evidence hashes."""
    try:
        return services.cases.ledger_record(actor, case_id)
    except Exception as e:
        raise to_http_error("Ledger record", e) from e
