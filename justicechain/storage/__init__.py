"""Evidence pinning backends."""

from __future__ import annotations

from ..config import MinioPinningConfig, PinataPinningConfig, PinningConfig
from .base import AvailabilityResult, PinningError, PinningService, PinResult, sha256_file


def build_pinning_service(cfg: PinningConfig) -> PinningService:
    """Instantiate the backend selected by the ``pinning.type`` discriminator."""
    if isinstance(cfg, PinataPinningConfig):
        from .pinata_backend import PinataPinningService

        return PinataPinningService(
            api_key=cfg.api_key,
            secret_api_key=cfg.secret_api_key,
            api_url=cfg.api_url,
            gateway_url=cfg.gateway_url,
            timeout=cfg.timeout,
        )
    if isinstance(cfg, MinioPinningConfig):
        from .minio_backend import MinioPinningService

        return MinioPinningService(
            endpoint=cfg.endpoint,
            bucket=cfg.bucket,
            access_key=cfg.access_key,
            secret_key=cfg.secret_key,
            secure=cfg.secure,
        )
    raise ValueError(f"Unsupported pinning backend: {cfg!r}")


__all__ = [
    "AvailabilityResult",
    "PinResult",
    "PinningError",
    "PinningService",
    "build_pinning_service",
    "sha256_file",
]
