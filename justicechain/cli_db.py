"""CLI commands for database operations in justicechain."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich import print

from .db.migrate import downgrade as db_downgrade_fn
from .db.migrate import upgrade as db_upgrade_fn

db_app = typer.Typer(help="Database operations (init, upgrade, downgrade)")


@db_app.command("upgrade", help="Run Alembic upgrade head")
def db_upgrade(
    database_url: Optional[str] = typer.Option(None, help="Database URL (default: env or alembic.ini)"),
    revision: str = typer.Option("head", help="Target revision"),
):
    """Run database migrations (alembic upgrade head)."""
    db_upgrade_fn(revision, database_url=database_url)
    print("[green]Database upgrade complete")


@db_app.command("downgrade", help="Revert Alembic migrations")
def db_downgrade(
    database_url: Optional[str] = typer.Option(None, help="Database URL (default: env or alembic.ini)"),
    revision: str = typer.Option("-1", help="Target revision"),
):
    db_downgrade_fn(revision, database_url=database_url)
    print(f"[green]Downgraded database to {revision}")


@db_app.command("init", help="Create tables directly from the models (development)")
def db_init(
    database_url: Optional[str] = typer.Option(None, help="Database URL (default: from config/env)"),
    config: Optional[Path] = typer.Option(None, exists=True, help="Path to config.yaml"),
):
    """Create all tables without Alembic; suitable for SQLite dev databases."""
    from .config import AppConfig
    from .db import Database

    if not database_url:
        cfg = AppConfig.load(config) if config else AppConfig.from_env()
        database_url = cfg.database_url
    db = Database(database_url)
    db.create_all()
    db.dispose()
    print(f"[green]Initialized database[/green] {database_url}")
