"""Repository for user operations."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ...ids import generate_role_id, unique_public_id
from ..models import Role, User


class UserRepository:
    """Repository for the identity store."""

    def __init__(self, session: Session):
        """Initialize the UserRepository with a database session."""
        self.session = session

    def add_user(
        self,
        username: str,
        role: Role,
        email: str | None = None,
        full_name: str | None = None,
        wallet_address: str | None = None,
        is_verified: bool = False,
    ) -> User:
        """Add a user with a freshly issued role identifier."""
        user = User(
            username=username,
            email=email,
            full_name=full_name,
            role=role,
            role_id=unique_public_id(self.session, User.role_id, lambda: generate_role_id(role.value)),
            wallet_address=wallet_address,
            is_verified=is_verified,
        )
        self.session.add(user)
        self.session.flush()
        return user

    def get(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_users(self, role: Role | None = None) -> list[User]:
        """List users, newest first, optionally filtered by role."""
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc())
        return list(self.session.execute(stmt).scalars().all())
