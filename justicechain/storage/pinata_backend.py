"""Pinata (IPFS pinning service) backend for justicechain evidence."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import requests

from .base import AvailabilityResult, PinningError, PinningService, PinResult

logger = logging.getLogger(__name__)


class PinataPinningService(PinningService):
    """Pins evidence files to IPFS through the Pinata HTTP API."""

    name = "pinata"

    def __init__(
        self,
        api_key: str | None,
        secret_api_key: str | None,
        api_url: str = "https://api.pinata.cloud",
        gateway_url: str = "https://gateway.pinata.cloud/ipfs/",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the PinataPinningService with API credentials."""
        self.api_key = api_key
        self.secret_api_key = secret_api_key
        self.api_url = api_url.rstrip("/")
        self.gateway = gateway_url if gateway_url.endswith("/") else gateway_url + "/"
        self.timeout = timeout
        self.http = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        if not self.api_key or not self.secret_api_key:
            raise PinningError("Pinata API credentials are not configured")
        return {
            "pinata_api_key": self.api_key,
            "pinata_secret_api_key": self.secret_api_key,
        }

    def gateway_url(self, content_hash: str) -> str:
        return f"{self.gateway}{content_hash}"

    def upload(
        self, src_path: Path | str, name: str, metadata: dict[str, Any] | None = None
    ) -> PinResult:
        """Upload a file to Pinata and return its IPFS hash."""
        p = Path(src_path)
        pinata_metadata = {
            "name": name,
            "keyvalues": {k: str(v) for k, v in (metadata or {}).items()},
        }
        try:
            with open(p, "rb") as fh:
                resp = self.http.post(
                    f"{self.api_url}/pinning/pinFileToIPFS",
                    headers=self._headers(),
                    files={"file": (name, fh)},
                    data={
                        "pinataMetadata": json.dumps(pinata_metadata),
                        "pinataOptions": json.dumps({"cidVersion": 0}),
                    },
                    timeout=self.timeout,
                )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            raise PinningError(f"Pinata upload failed: {e}") from e
        except OSError as e:
            raise PinningError(f"Cannot read upload {p}: {e}") from e

        ipfs_hash = payload.get("IpfsHash")
        if not ipfs_hash:
            raise PinningError(f"Pinata response missing IpfsHash: {payload}")

        logger.info("Pinned %s to IPFS as %s", name, ipfs_hash)
        return PinResult(
            content_hash=ipfs_hash,
            gateway_url=self.gateway_url(ipfs_hash),
            content_uri=f"ipfs://{ipfs_hash}",
            size=payload.get("PinSize"),
            raw=payload,
        )

    def check_availability(self, content_hash: str) -> AvailabilityResult:
        """HEAD the public gateway for the hash."""
        url = self.gateway_url(content_hash)
        try:
            resp = self.http.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.warning("Gateway check failed for %s: %s", content_hash, e)
            return AvailabilityResult(available=False, checked_url=url, error=str(e))
        return AvailabilityResult(
            available=resp.status_code == 200,
            checked_url=url,
            status_code=resp.status_code,
            error=None if resp.status_code == 200 else f"HTTP {resp.status_code}",
        )

    def test_connection(self) -> bool:
        """Call Pinata's authentication test endpoint."""
        try:
            resp = self.http.get(
                f"{self.api_url}/data/testAuthentication",
                headers=self._headers(),
                timeout=self.timeout,
            )
            return resp.status_code == 200
        except (requests.RequestException, PinningError) as e:
            logger.warning("Pinata authentication test failed: %s", e)
            return False
