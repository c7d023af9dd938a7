"""Minio backend: a bucket used as a content-addressed evidence store."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from minio import Minio
from minio.error import MinioException
from urllib3.exceptions import HTTPError

from .base import AvailabilityResult, PinningError, PinningService, PinResult, sha256_file


# S3Error subclasses MinioException; transport failures surface as urllib3 or OS errors
TRANSPORT_ERRORS = (MinioException, HTTPError, OSError)


class MinioPinningService(PinningService):
    """Stores each artifact under its sha256, so the key is the content hash."""

    name = "minio"

    def __init__(
        self,
        endpoint: str,
        bucket: str,
        access_key: str | None = None,
        secret_key: str | None = None,
        secure: bool = True,
        client: Minio | None = None,
    ) -> None:
        """Initialize the MinioPinningService with connection details."""
        self.bucket = bucket
        self.endpoint = endpoint
        self.secure = secure
        self.client = client or Minio(
            endpoint, access_key=access_key, secret_key=secret_key, secure=secure
        )
        self._ensure_bucket()

    def _ensure_bucket(self) -> None:
        """Ensure the bucket exists in Minio; create if missing."""
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)

    def _key(self, content_hash: str) -> str:
        return f"evidence/{content_hash}"

    def gateway_url(self, content_hash: str) -> str:
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.endpoint}/{self.bucket}/{self._key(content_hash)}"

    def upload(
        self, src_path: Path | str, name: str, metadata: dict[str, Any] | None = None
    ) -> PinResult:
        """Upload a file keyed by its sha256."""
        p = Path(src_path)
        digest = sha256_file(p)
        meta = {"name": name}
        meta.update({k: str(v) for k, v in (metadata or {}).items()})
        try:
            self.client.fput_object(self.bucket, self._key(digest), str(p), metadata=meta)
        except TRANSPORT_ERRORS as e:
            raise PinningError(f"Minio upload failed: {e}") from e
        return PinResult(
            content_hash=digest,
            gateway_url=self.gateway_url(digest),
            content_uri=f"minio://{self.bucket}/{self._key(digest)}",
            size=p.stat().st_size,
        )

    def check_availability(self, content_hash: str) -> AvailabilityResult:
        """Stat the object in the bucket."""
        url = self.gateway_url(content_hash)
        try:
            self.client.stat_object(self.bucket, self._key(content_hash))
            return AvailabilityResult(available=True, checked_url=url, method="object-stat")
        except TRANSPORT_ERRORS as e:
            return AvailabilityResult(
                available=False, checked_url=url, error=str(e), method="object-stat"
            )

    def test_connection(self) -> bool:
        try:
            return self.client.bucket_exists(self.bucket)
        except TRANSPORT_ERRORS:
            return False
