"""Tests for the justicechain CLI commands."""

import pytest
from typer.testing import CliRunner

from justicechain.cli import app
from justicechain.config import AppConfig

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(tmp_path, monkeypatch):
    """Point the CLI at a throwaway SQLite database."""
    monkeypatch.delenv("JUSTICECHAIN_CONFIG", raising=False)
    monkeypatch.setenv("JUSTICECHAIN_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("JUSTICECHAIN_JWT_SECRET", "cli-secret")


def test_init_config(tmp_path):
    out = tmp_path / "config.yaml"
    result = runner.invoke(app, ["init-config", "--out", str(out)])
    assert result.exit_code == 0
    assert AppConfig.load(out).pinning.type == "pinata"

    again = runner.invoke(app, ["init-config", "--out", str(out)])
    assert again.exit_code == 1


def test_create_admin_and_list():
    result = runner.invoke(app, ["users", "create-admin", "root", "--email", "root@example.org"])
    assert result.exit_code == 0
    assert "Created admin" in result.stdout

    duplicate = runner.invoke(app, ["users", "create-admin", "root"])
    assert duplicate.exit_code == 1

    listing = runner.invoke(app, ["users", "list"])
    assert listing.exit_code == 0
    assert "root" in listing.stdout
    assert "ADMIN" in listing.stdout


def test_dev_token():
    runner.invoke(app, ["users", "create-admin", "root"])
    assert runner.invoke(app, ["users", "token", "1"]).exit_code == 0
    assert runner.invoke(app, ["users", "token", "99"]).exit_code == 1


def test_db_init(tmp_path):
    url = f"sqlite:///{tmp_path / 'fresh.db'}"
    result = runner.invoke(app, ["db", "init", "--database-url", url])
    assert result.exit_code == 0
    assert (tmp_path / "fresh.db").exists()


def test_ledger_status_disabled():
    result = runner.invoke(app, ["ledger", "status"])
    assert result.exit_code == 0
    assert "disabled" in result.stdout


def test_sweep_runs_empty():
    result = runner.invoke(app, ["sweep", "runs"])
    assert result.exit_code == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
