"""Tests for configuration loading, validation and environment overrides."""

import pydantic
import pytest

from justicechain.config import (
    AppConfig,
    LedgerConfig,
    MinioPinningConfig,
    PinataPinningConfig,
    is_wallet_address,
)
from justicechain.errors import ConfigurationError


def test_defaults():
    cfg = AppConfig()
    assert cfg.database_url == "sqlite:///./justicechain.db"
    assert isinstance(cfg.pinning, PinataPinningConfig)
    assert cfg.ledger.enabled is False
    assert cfg.integrity_sweep.interval_seconds == 300
    assert cfg.auth.algorithm == "HS256"


def test_env_overrides(monkeypatch):
    monkeypatch.delenv("JUSTICECHAIN_CONFIG", raising=False)
    monkeypatch.setenv("JUSTICECHAIN_DATABASE_URL", "sqlite:///other.db")
    monkeypatch.setenv("JUSTICECHAIN_JWT_SECRET", "s3cret")
    monkeypatch.setenv("JUSTICECHAIN_ADMIN_PRIVATE_KEY", "0xkey")
    cfg = AppConfig.from_env()
    assert cfg.database_url == "sqlite:///other.db"
    assert cfg.require_jwt_secret() == "s3cret"
    assert cfg.ledger.admin_private_key == "0xkey"


def test_load_from_file(tmp_path, monkeypatch):
    monkeypatch.delenv("JUSTICECHAIN_DATABASE_URL", raising=False)
    path = tmp_path / "justicechain.yaml"
    path.write_text(
        "database_url: sqlite:///cases.db\n"
        "pinning:\n"
        "  type: minio\n"
        "  endpoint: localhost:9000\n"
        "  bucket: evidence\n"
        "  secure: false\n"
        "logging:\n"
        "  json: true\n"
    )
    monkeypatch.setenv("JUSTICECHAIN_CONFIG", str(path))
    cfg = AppConfig.from_env()
    assert cfg.database_url == "sqlite:///cases.db"
    assert isinstance(cfg.pinning, MinioPinningConfig)
    assert cfg.pinning.bucket == "evidence"
    assert cfg.logging.json_logs is True


def test_missing_jwt_secret():
    with pytest.raises(ConfigurationError):
        AppConfig().require_jwt_secret()


def test_enabled_ledger_needs_contract():
    with pytest.raises(pydantic.ValidationError):
        LedgerConfig(enabled=True)


def test_network_profiles():
    sepolia = LedgerConfig(infura_api_key="abc").profile()
    assert sepolia.rpc_url == "https://sepolia.infura.io/v3/abc"
    assert sepolia.chain_id == 11155111

    custom = LedgerConfig(network="mumbai", rpc_url="http://localhost:8545", chain_id=1337).profile()
    assert custom.rpc_url == "http://localhost:8545"
    assert custom.chain_id == 1337


def test_gateway_url_gets_trailing_slash():
    cfg = PinataPinningConfig(type="pinata", gateway_url="https://ipfs.example.org/ipfs")
    assert cfg.gateway_url == "https://ipfs.example.org/ipfs/"


def test_unknown_pinning_backend():
    with pytest.raises(pydantic.ValidationError):
        AppConfig.model_validate({"pinning": {"type": "dropbox"}})


def test_wallet_format():
    assert is_wallet_address("0x" + "a" * 40)
    assert not is_wallet_address("0x" + "g" * 40)
    assert not is_wallet_address("1234")
    assert not is_wallet_address(None)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
