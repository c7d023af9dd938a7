"""Shared handles passed into every workflow service."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..activity import ActivityLogger
from ..db import Database
from ..db.models import Case, Role, User
from ..db.repositories import CaseRepository, UserRepository
from ..errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..ledger import LedgerGateway, LedgerNotifier
from ..storage import PinningService


@dataclass(frozen=True)
class Actor:
    """Authenticated caller identity, resolved upstream from a bearer token."""

    user_id: int
    role: Role


@dataclass
class WorkflowContext:
    """Explicit dependencies; one per app or per test."""

    db: Database
    activity: ActivityLogger
    pinning: PinningService | None = None
    notifier: LedgerNotifier | None = None
    gateway: LedgerGateway | None = None
    upload_dir: Path | None = None

    def __post_init__(self):
        if self.notifier is None:
            self.notifier = LedgerNotifier(None)
        if self.gateway is None:
            self.gateway = LedgerGateway(None)

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """Session scope that reports lost optimistic-lock races as conflicts."""
        try:
            with self.db.session() as session:
                yield session
        except StaleDataError as e:
            raise ConflictError(
                "The record was modified by another request; reload and retry"
            ) from e

    @classmethod
    def build(
        cls,
        db: Database,
        pinning: PinningService | None = None,
        ledger_client=None,
        upload_dir: Path | str | None = None,
    ) -> WorkflowContext:
        return cls(
            db=db,
            activity=ActivityLogger(db),
            pinning=pinning,
            notifier=LedgerNotifier(ledger_client),
            gateway=LedgerGateway(ledger_client),
            upload_dir=Path(upload_dir) if upload_dir else None,
        )


def require_role(actor: Actor, *roles: Role, message: str | None = None) -> None:
    """Raise AuthorizationError unless the actor holds one of ``roles``."""
    if actor.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        raise AuthorizationError(message or f"Only {allowed} can perform this action")


def load_actor_user(session: Session, actor: Actor) -> User:
    """Fetch the acting user; suspended accounts may not act."""
    user = UserRepository(session).get(actor.user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.is_suspended:
        raise AuthorizationError("Account is suspended")
    return user


def can_view_case(case: Case, actor: Actor) -> bool:
    """POLICE see what they registered, FORENSIC and JUDGE what they are assigned."""
    if actor.role is Role.ADMIN:
        return True
    if actor.role is Role.POLICE:
        return case.registered_by_id == actor.user_id
    if actor.role is Role.FORENSIC:
        return case.assigned_forensic_id == actor.user_id
    if actor.role is Role.JUDGE:
        return case.assigned_judge_id == actor.user_id
    return False


def load_case(session: Session, case_id: str) -> Case:
    case = CaseRepository(session).get_by_case_id(case_id)
    if case is None:
        raise NotFoundError(f"Case {case_id} not found")
    return case


def load_visible_case(session: Session, case_id: str, actor: Actor) -> Case:
    case = load_case(session, case_id)
    if not can_view_case(case, actor):
        raise AuthorizationError("Not authorized to access this case")
    return case


def parse_enum(enum_cls, value, label: str):
    """Coerce user input into ``enum_cls`` or raise ValidationError."""
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}'. Expected one of: {allowed}") from e
