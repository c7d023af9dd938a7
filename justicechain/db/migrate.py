"""Helpers to run Alembic migrations programmatically."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config

from ..config import DATABASE_URL_ENV


def get_alembic_config(database_url: Optional[str] = None) -> Config:
    """
    Get Alembic configuration.

    Priority order for database URL:
    1. Explicit database_url parameter
    2. JUSTICECHAIN_DATABASE_URL environment variable
    3. alembic.ini default
    """
    here = Path(__file__).resolve().parents[2]
    cfg = Config(str(here / "alembic.ini"))
    cfg.set_main_option("script_location", str(here / "alembic"))

    url = database_url or os.getenv(DATABASE_URL_ENV)
    if url:
        cfg.set_main_option("sqlalchemy.url", url)
        cfg.attributes["database_url"] = url

    return cfg


def upgrade(head: str = "head", database_url: Optional[str] = None) -> None:
    cfg = get_alembic_config(database_url)
    command.upgrade(cfg, head)


def downgrade(revision: str = "-1", database_url: Optional[str] = None) -> None:
    cfg = get_alembic_config(database_url)
    command.downgrade(cfg, revision)
