from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from .cli_db import db_app
from .config import AppConfig
from .db import Database
from .db.models import Role
from .db.repositories import JobRunRepository, UserRepository
from .errors import WorkflowError
from .ledger import LedgerClient
from .logging_utils import setup_logging
from .scheduler import run_integrity_sweep
from .scheduler.core import JOB_TYPE
from .storage import build_pinning_service
from .workflow import UserService, WorkflowContext

app = typer.Typer(help="justicechain case and evidence management CLI")
app.add_typer(db_app, name="db")

users = typer.Typer(help="Manage user accounts")
app.add_typer(users, name="users")

ledger = typer.Typer(help="Inspect the ledger connection")
app.add_typer(ledger, name="ledger")

sweep = typer.Typer(help="Evidence integrity sweeps")
app.add_typer(sweep, name="sweep")


def _load_config(config: Optional[Path]) -> AppConfig:
    cfg = AppConfig.load(config) if config else AppConfig.from_env()
    setup_logging(cfg.logging.level, cfg.logging.json_logs)
    return cfg


def _context(cfg: AppConfig, with_pinning: bool = False) -> WorkflowContext:
    db = Database(cfg.database_url)
    db.create_all()
    pinning = build_pinning_service(cfg.pinning) if with_pinning else None
    return WorkflowContext.build(db, pinning=pinning, upload_dir=cfg.upload_dir)


ConfigOpt = typer.Option(None, exists=True, help="Path to config.yaml (default: env)")


@app.command()
def init_config(out: Path = typer.Option("config.yaml", help="Output config path")):
    """Create a starter config file."""
    if out.exists():
        print(f"[yellow]{out} already exists; not overwriting")
        raise typer.Exit(code=1)
    AppConfig().save(out)
    print(f"[green]Wrote config template to {out}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the API server (config from JUSTICECHAIN_CONFIG or env)."""
    import uvicorn

    uvicorn.run(
        "justicechain.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@users.command("create-admin")
def create_admin(
    username: str = typer.Argument(..., help="Admin username"),
    email: Optional[str] = typer.Option(None, help="Contact email"),
    wallet: Optional[str] = typer.Option(None, help="Wallet address"),
    config: Optional[Path] = ConfigOpt,
):
    """Bootstrap an administrator account."""
    cfg = _load_config(config)
    try:
        user = UserService(_context(cfg)).create_admin(username, email=email, wallet=wallet)
    except WorkflowError as e:
        print(f"[red]{e.message}")
        raise typer.Exit(code=1)
    print(f"[green]Created admin[/green] {user.username} (id={user.id}, role_id={user.role_id})")


@users.command("list")
def list_users(
    role: Optional[Role] = typer.Option(None, help="Filter by role"),
    config: Optional[Path] = ConfigOpt,
):
    """List user accounts."""
    cfg = _load_config(config)
    ctx = _context(cfg)
    with ctx.db.session() as session:
        rows = UserRepository(session).list_users(role=role)
        table = Table(title="Users")
        for col in ("ID", "Username", "Role", "Role ID", "Verified", "Suspended"):
            table.add_column(col)
        for u in rows:
            table.add_row(
                str(u.id),
                u.username,
                u.role.value,
                u.role_id,
                "yes" if u.is_verified else "no",
                "yes" if u.is_suspended else "no",
            )
    print(table)


@users.command("token")
def issue_dev_token(
    user_id: int = typer.Argument(..., help="User id"),
    hours: int = typer.Option(12, help="Token lifetime in hours"),
    config: Optional[Path] = ConfigOpt,
):
    """Print a signed bearer token for local testing."""
    from .api.security import issue_token

    cfg = _load_config(config)
    ctx = _context(cfg)
    with ctx.db.session() as session:
        user = UserRepository(session).get(user_id)
        if user is None:
            print(f"[red]User {user_id} not found")
            raise typer.Exit(code=1)
        role = user.role
    try:
        print(issue_token(cfg, user_id, role, hours=hours))
    except WorkflowError as e:
        print(f"[red]{e.message}")
        raise typer.Exit(code=1)


@ledger.command("status")
def ledger_status(config: Optional[Path] = ConfigOpt):
    """Show the configured network and whether the RPC endpoint responds."""
    cfg = _load_config(config)
    if not cfg.ledger.enabled:
        print("[yellow]Ledger integration is disabled")
        raise typer.Exit(code=0)
    try:
        client = LedgerClient.connect(cfg.ledger)
    except WorkflowError as e:
        print(f"[red]{e.message}")
        raise typer.Exit(code=1)
    profile = cfg.ledger.profile()
    connected = client.w3.is_connected()
    print(f"Network: [bold]{profile.name}[/bold] (chain {profile.chain_id})")
    print(f"Contract: {cfg.ledger.contract_address}")
    print(f"Account: {client.address}")
    print(f"Connected: {'[green]yes' if connected else '[red]no'}")
    if not connected:
        raise typer.Exit(code=1)


@sweep.command("once")
def sweep_once(config: Optional[Path] = ConfigOpt):
    """Run one integrity sweep immediately."""
    cfg = _load_config(config)
    try:
        result = run_integrity_sweep(_context(cfg, with_pinning=True))
    except WorkflowError as e:
        print(f"[red]{e.message}")
        raise typer.Exit(code=1)
    colour = "green" if result["status"] == "success" else "red"
    print(f"[{colour}]Sweep {result['status']}[/{colour}] job={result['job_id']} {result['metrics']}")
    if result["status"] != "success":
        raise typer.Exit(code=1)


@sweep.command("runs")
def sweep_runs(
    limit: int = typer.Option(20, help="Max runs to display"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    config: Optional[Path] = ConfigOpt,
):
    """Show recent integrity sweep runs."""
    cfg = _load_config(config)
    ctx = _context(cfg)
    with ctx.db.session() as session:
        runs = JobRunRepository(session).get_recent_job_runs(job_type=JOB_TYPE, limit=limit)
        data = [
            {
                "id": r.id,
                "status": r.status,
                "started_at": r.started_at.isoformat() if r.started_at else None,
                "finished_at": r.finished_at.isoformat() if r.finished_at else None,
                "error": r.error,
                "metrics": r.metrics,
            }
            for r in runs
        ]

    if json_output:
        print(json.dumps(data, indent=2))
        return

    table = Table(title="Integrity sweeps")
    for col in ("ID", "Status", "Started", "Finished", "Flagged", "Error"):
        table.add_column(col)
    for r in data:
        table.add_row(
            str(r["id"]),
            r["status"],
            r["started_at"] or "",
            r["finished_at"] or "",
            str((r["metrics"] or {}).get("flagged", "")),
            (r["error"] or "")[:60],
        )
    print(table)


if __name__ == "__main__":
    app()
