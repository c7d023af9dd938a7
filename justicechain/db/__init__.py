"""Database layer for justicechain."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

# Declarative base for all ORM models
Base = declarative_base()


class Database:
    """Engine plus session factory for one database URL.

    Handed explicitly to the workflow layer, the API app and the scheduler;
    tests build one per temporary SQLite file.
    """

    def __init__(self, database_url: str, echo: bool = False):
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.url = database_url
        self.engine = create_engine(
            database_url, echo=echo, pool_pre_ping=True, connect_args=connect_args
        )
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)

    def create_all(self) -> None:
        """Create every table known to the ORM (development and tests)."""
        # import for side effects: registers the mappers on Base.metadata
        from . import models  # noqa: F401

        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session scope that commits on success and rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
