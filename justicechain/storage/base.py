"""Abstract base class for evidence pinning backends in justicechain."""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

CHUNK_SIZE = 1024 * 1024


@dataclass
class PinResult:
    """Durable reference returned by a successful upload."""

    content_hash: str
    gateway_url: str
    content_uri: str
    size: int | None = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AvailabilityResult:
    """Outcome of a reachability probe against the store.

    This is an existence check only, the content is not re-hashed.
    """

    available: bool
    checked_url: str
    status_code: int | None = None
    error: str | None = None
    method: str = "gateway-availability"


class PinningError(Exception):
    """Raised when the pinning backend rejects or cannot complete an upload."""


def sha256_file(path: Path | str) -> str:
    """Hex sha256 of a file's contents, read in chunks."""
    h = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


class PinningService(ABC):
    """Content-addressed store for evidence artifacts."""

    name = "pinning"

    @abstractmethod
    def upload(
        self, src_path: Path | str, name: str, metadata: Dict[str, Any] | None = None
    ) -> PinResult:
        """Pin a local file and return its content reference."""
        raise NotImplementedError

    @abstractmethod
    def check_availability(self, content_hash: str) -> AvailabilityResult:
        """Check that a previously pinned artifact is still reachable."""
        raise NotImplementedError

    @abstractmethod
    def test_connection(self) -> bool:
        """Verify credentials and connectivity."""
        raise NotImplementedError

    def gateway_url(self, content_hash: str) -> str:
        """Public URL for a content hash."""
        raise NotImplementedError
