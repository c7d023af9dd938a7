"""Configuration models and utilities for justicechain."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

# type: ignore[import-untyped]
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .errors import ConfigurationError

CONFIG_ENV = "JUSTICECHAIN_CONFIG"
DATABASE_URL_ENV = "JUSTICECHAIN_DATABASE_URL"
JWT_SECRET_ENV = "JUSTICECHAIN_JWT_SECRET"
ADMIN_KEY_ENV = "JUSTICECHAIN_ADMIN_PRIVATE_KEY"

DEFAULT_PINATA_GATEWAY = "https://gateway.pinata.cloud/ipfs/"


class PinataPinningConfig(BaseModel):
    """Configuration for the Pinata pinning backend."""

    type: Literal["pinata"]
    api_key: str | None = None
    secret_api_key: str | None = None
    api_url: str = "https://api.pinata.cloud"
    gateway_url: str = DEFAULT_PINATA_GATEWAY
    timeout: float = 30.0

    @field_validator("gateway_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Gateway URLs are joined with the content hash by concatenation."""
        return v if v.endswith("/") else v + "/"


class MinioPinningConfig(BaseModel):
    """Configuration for a MinIO bucket used as content-addressed store."""

    type: Literal["minio"]
    endpoint: str
    bucket: str
    access_key: str | None = None
    secret_key: str | None = None
    secure: bool = True


PinningConfig = PinataPinningConfig | MinioPinningConfig


class NetworkProfile(BaseModel):
    """Connection details for a ledger network."""

    name: str
    rpc_url: str
    chain_id: int


NETWORKS: dict[str, NetworkProfile] = {
    "sepolia": NetworkProfile(
        name="Ethereum Sepolia Testnet",
        rpc_url="https://sepolia.infura.io/v3/{infura_api_key}",
        chain_id=11155111,
    ),
    "mumbai": NetworkProfile(
        name="Polygon Mumbai Testnet",
        rpc_url="https://rpc-mumbai.maticvigil.com",
        chain_id=80001,
    ),
}


class LedgerConfig(BaseModel):
    """Configuration for the smart-contract ledger mirror."""

    enabled: bool = False
    network: Literal["sepolia", "mumbai"] = "sepolia"
    contract_address: str | None = None
    rpc_url: str | None = None  # overrides the network profile URL
    infura_api_key: str | None = None
    admin_private_key: str | None = None
    chain_id: int | None = None
    receipt_timeout: int = 120

    @model_validator(mode="after")
    def validate_enabled(self) -> LedgerConfig:
        """An enabled ledger needs a contract to talk to."""
        if self.enabled and not self.contract_address:
            raise ValueError("ledger.contract_address is required when the ledger is enabled")
        return self

    def profile(self) -> NetworkProfile:
        """Resolve the effective network profile."""
        base = NETWORKS[self.network]
        url = self.rpc_url or base.rpc_url.format(infura_api_key=self.infura_api_key or "")
        return NetworkProfile(
            name=base.name,
            rpc_url=url,
            chain_id=self.chain_id or base.chain_id,
        )


class AuthConfig(BaseModel):
    """Bearer token verification settings."""

    jwt_secret: str | None = None
    algorithm: str = "HS256"


class IntegritySweepConfig(BaseModel):
    """Periodic re-check of pinned evidence availability."""

    enabled: bool = True
    interval_seconds: int = Field(default=300, ge=1)


class LoggingConfig(BaseModel):
    """Logging preferences."""

    level: str = "INFO"
    json_logs: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}


class AppConfig(BaseModel):
    """Application configuration settings."""

    version: str = "0.1"
    database_url: str = "sqlite:///./justicechain.db"
    upload_dir: str = "./uploads"
    auth: AuthConfig = Field(default_factory=AuthConfig)
    pinning: PinningConfig = Field(
        default_factory=lambda: PinataPinningConfig(type="pinata"), discriminator="type"
    )
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    integrity_sweep: IntegritySweepConfig = Field(default_factory=IntegritySweepConfig)
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def load(path: Path | str) -> AppConfig:
        """Load configuration from a file."""
        p = Path(path)
        data = yaml.safe_load(p.read_text()) or {}
        return AppConfig.model_validate(data).with_env_overrides()

    @staticmethod
    def from_env() -> AppConfig:
        """Load from JUSTICECHAIN_CONFIG when set, else defaults plus env overrides."""
        path = os.getenv(CONFIG_ENV)
        if path:
            return AppConfig.load(path)
        return AppConfig().with_env_overrides()

    def save(self, path: Path | str) -> None:
        """Save configuration to a file."""
        p = Path(path)
        p.write_text(
            yaml.safe_dump(self.model_dump(mode="python", by_alias=True), sort_keys=False)
        )

    def with_env_overrides(self) -> AppConfig:
        """Return a copy with secrets and the database URL taken from the environment."""
        cfg = self.model_copy(deep=True)
        url = os.getenv(DATABASE_URL_ENV)
        if url:
            cfg.database_url = url
        secret = os.getenv(JWT_SECRET_ENV)
        if secret:
            cfg.auth.jwt_secret = secret
        key = os.getenv(ADMIN_KEY_ENV)
        if key:
            cfg.ledger.admin_private_key = key
        return cfg

    def require_jwt_secret(self) -> str:
        """Return the bearer verification secret or fail loudly."""
        if not self.auth.jwt_secret:
            raise ConfigurationError(
                f"auth.jwt_secret is not configured (set it or {JWT_SECRET_ENV})"
            )
        return self.auth.jwt_secret


_WALLET_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_wallet_address(value: str | None) -> bool:
    """Check the 0x-prefixed 40 hex digit address format."""
    return bool(value) and bool(_WALLET_RE.match(value))
