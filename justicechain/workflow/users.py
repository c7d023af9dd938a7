"""Identity store operations: registration, approval, suspension, wallets."""

from __future__ import annotations

import logging

from ..config import is_wallet_address
from ..db.models import ActivityAction, Role, utcnow
from ..db.repositories import UserRepository
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..schemas import UserView
from .context import Actor, WorkflowContext, load_actor_user, parse_enum, require_role

logger = logging.getLogger(__name__)

SELF_REGISTER_ROLES = (Role.POLICE, Role.FORENSIC, Role.JUDGE)


def _check_wallet(wallet: str | None, required: bool = True) -> str | None:
    if not wallet:
        if required:
            raise ValidationError("Wallet address is required")
        return None
    if not is_wallet_address(wallet):
        raise ValidationError("Invalid wallet address format")
    return wallet


class UserService:
    def __init__(self, ctx: WorkflowContext):
        self.ctx = ctx

    def _create(
        self,
        username: str,
        role: Role,
        email: str | None,
        full_name: str | None,
        wallet: str | None,
        is_verified: bool,
    ) -> UserView:
        if not username or not username.strip():
            raise ValidationError("Username is required")
        username = username.strip()
        with self.ctx.unit_of_work() as session:
            repo = UserRepository(session)
            if repo.get_by_username(username) is not None:
                raise ValidationError(f"Username {username} is already taken")
            user = repo.add_user(
                username=username,
                role=role,
                email=email,
                full_name=full_name,
                wallet_address=wallet,
                is_verified=is_verified,
            )
            view = UserView.model_validate(user)

        self.ctx.activity.record(
            Actor(view.id, view.role),
            ActivityAction.USER_REGISTERED,
            f"Registered {view.role.value} user {view.username}",
            resource_id=view.role_id,
        )
        return view

    def register(
        self,
        username: str,
        role: Role | str,
        wallet: str,
        email: str | None = None,
        full_name: str | None = None,
    ) -> UserView:
        """Self-registration; the account stays unverified until an admin approves it."""
        role = parse_enum(Role, role, "role")
        if role not in SELF_REGISTER_ROLES:
            raise ValidationError("Role must be POLICE, FORENSIC or JUDGE")
        wallet = _check_wallet(wallet)
        return self._create(username, role, email, full_name, wallet, is_verified=False)

    def create_admin(
        self, username: str, email: str | None = None, wallet: str | None = None
    ) -> UserView:
        """Bootstrap an administrator (CLI only)."""
        wallet = _check_wallet(wallet, required=False)
        return self._create(username, Role.ADMIN, email, None, wallet, is_verified=True)

    def get_user(self, actor: Actor, user_id: int) -> UserView:
        if actor.role is not Role.ADMIN and actor.user_id != user_id:
            raise AuthorizationError("Not authorized to view this user")
        with self.ctx.db.session() as session:
            user = UserRepository(session).get(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            return UserView.model_validate(user)

    def me(self, actor: Actor) -> UserView:
        return self.get_user(actor, actor.user_id)

    def list_users(self, actor: Actor, role: Role | str | None = None) -> list[UserView]:
        require_role(actor, Role.ADMIN, message="Only admin can list users")
        role = parse_enum(Role, role, "role") if role else None
        with self.ctx.db.session() as session:
            return [UserView.model_validate(u) for u in UserRepository(session).list_users(role)]

    def update_wallet(self, actor: Actor, wallet: str) -> UserView:
        """Bind the wallet presented at login; last write wins."""
        wallet = _check_wallet(wallet)
        with self.ctx.unit_of_work() as session:
            user = load_actor_user(session, actor)
            previous = user.wallet_address
            user.wallet_address = wallet
            user.last_login_at = utcnow()
            view = UserView.model_validate(user)

        if previous != wallet:
            self.ctx.activity.record(
                actor,
                ActivityAction.WALLET_UPDATED,
                f"Wallet for {view.username} set to {wallet}",
                metadata={"previous": previous},
            )
        return view

    def approve_user(self, actor: Actor, user_id: int) -> UserView:
        """Verify a user and register the role on-chain (advisory)."""
        require_role(actor, Role.ADMIN, message="Only admin can approve users")
        with self.ctx.db.session() as session:
            load_actor_user(session, actor)
            user = UserRepository(session).get(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            role, wallet = user.role, user.wallet_address

        tx_hash = None
        if wallet and role is not Role.ADMIN:
            result = self.ctx.notifier.register_role(role.value, wallet)
            if result is not None and result.success:
                tx_hash = result.tx_hash

        with self.ctx.unit_of_work() as session:
            user = UserRepository(session).get(user_id)
            user.is_verified = True
            if tx_hash:
                user.role_tx_hash = tx_hash
            view = UserView.model_validate(user)

        self.ctx.activity.record(
            actor,
            ActivityAction.USER_APPROVED,
            f"Approved user {view.username}",
            resource_id=view.role_id,
            metadata={"tx_hash": tx_hash},
        )
        return view

    def toggle_suspension(self, actor: Actor, user_id: int) -> UserView:
        require_role(actor, Role.ADMIN, message="Only admin can suspend users")
        if user_id == actor.user_id:
            raise ValidationError("Administrators cannot suspend themselves")
        with self.ctx.unit_of_work() as session:
            load_actor_user(session, actor)
            user = UserRepository(session).get(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            user.is_suspended = not user.is_suspended
            view = UserView.model_validate(user)

        self.ctx.activity.record(
            actor,
            ActivityAction.USER_SUSPENDED if view.is_suspended else ActivityAction.USER_UNSUSPENDED,
            f"{'Suspended' if view.is_suspended else 'Reinstated'} user {view.username}",
            resource_id=view.role_id,
        )
        return view

    def check_verification(self, wallet: str, role: Role | str) -> bool:
        """Ask the ledger whether ``wallet`` holds ``role``."""
        wallet = _check_wallet(wallet)
        role = parse_enum(Role, role, "role")
        return self.ctx.gateway.is_role_registered(role.value, wallet)
