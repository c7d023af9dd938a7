"""Tests for the Pinata and MinIO pinning backends with mocked transports."""

import hashlib
from unittest.mock import MagicMock

import pytest
import requests
from minio.error import MinioException
from urllib3.exceptions import ProtocolError

from justicechain.config import PinataPinningConfig
from justicechain.storage import PinningError, build_pinning_service, sha256_file
from justicechain.storage.minio_backend import MinioPinningService
from justicechain.storage.pinata_backend import PinataPinningService


@pytest.fixture
def artifact(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"jpeg bytes")
    return path


def _pinata(session):
    return PinataPinningService("key", "secret", session=session)


def test_pinata_upload(artifact):
    session = MagicMock()
    session.post.return_value.json.return_value = {"IpfsHash": "QmAbc", "PinSize": 10}

    result = _pinata(session).upload(artifact, "photo.jpg", {"case_id": "CASE_1"})

    assert result.content_hash == "QmAbc"
    assert result.content_uri == "ipfs://QmAbc"
    assert result.gateway_url == "https://gateway.pinata.cloud/ipfs/QmAbc"
    assert result.size == 10
    args, kwargs = session.post.call_args
    assert args[0] == "https://api.pinata.cloud/pinning/pinFileToIPFS"
    assert kwargs["headers"] == {"pinata_api_key": "key", "pinata_secret_api_key": "secret"}
    assert '"case_id": "CASE_1"' in kwargs["data"]["pinataMetadata"]


def test_pinata_upload_errors(artifact):
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("unreachable")
    with pytest.raises(PinningError):
        _pinata(session).upload(artifact, "photo.jpg")

    session = MagicMock()
    session.post.return_value.json.return_value = {"error": "bad"}
    with pytest.raises(PinningError):
        _pinata(session).upload(artifact, "photo.jpg")

    with pytest.raises(PinningError):
        PinataPinningService(None, None, session=MagicMock()).upload(artifact, "photo.jpg")


def test_pinata_availability():
    session = MagicMock()
    session.head.return_value.status_code = 200
    ok = _pinata(session).check_availability("QmAbc")
    assert ok.available is True
    assert ok.checked_url == "https://gateway.pinata.cloud/ipfs/QmAbc"

    session.head.return_value.status_code = 404
    missing = _pinata(session).check_availability("QmAbc")
    assert missing.available is False
    assert missing.error == "HTTP 404"

    session.head.side_effect = requests.Timeout("slow")
    down = _pinata(session).check_availability("QmAbc")
    assert down.available is False
    assert down.status_code is None


def test_pinata_test_connection():
    session = MagicMock()
    session.get.return_value.status_code = 200
    assert _pinata(session).test_connection() is True
    assert PinataPinningService(None, None, session=session).test_connection() is False


def test_build_pinata_from_config():
    service = build_pinning_service(
        PinataPinningConfig(type="pinata", api_key="k", secret_api_key="s", gateway_url="https://gw/ipfs")
    )
    assert service.name == "pinata"
    assert service.gateway_url("QmX") == "https://gw/ipfs/QmX"


def test_minio_creates_bucket_and_keys_by_sha256(artifact):
    client = MagicMock()
    client.bucket_exists.return_value = False
    service = MinioPinningService("minio:9000", "evidence", secure=False, client=client)
    client.make_bucket.assert_called_once_with("evidence")

    result = service.upload(artifact, "photo.jpg")
    digest = hashlib.sha256(b"jpeg bytes").hexdigest()
    assert result.content_hash == digest
    assert result.content_uri == f"minio://evidence/evidence/{digest}"
    assert result.size == len(b"jpeg bytes")
    client.fput_object.assert_called_once_with(
        "evidence", f"evidence/{digest}", str(artifact), metadata={"name": "photo.jpg"}
    )

    check = service.check_availability(digest)
    assert check.available is True
    assert check.method == "object-stat"
    assert check.checked_url == f"http://minio:9000/evidence/evidence/{digest}"


@pytest.mark.parametrize(
    "error",
    [
        ProtocolError("Connection aborted."),
        ConnectionError("minio endpoint unreachable"),
        MinioException("access denied"),
    ],
)
def test_minio_transport_failures(artifact, error):
    """Test connection-level failures map to PinningError or an unavailable result."""
    client = MagicMock()
    client.bucket_exists.return_value = True
    service = MinioPinningService("minio:9000", "evidence", secure=False, client=client)

    client.fput_object.side_effect = error
    with pytest.raises(PinningError):
        service.upload(artifact, "photo.jpg")

    client.stat_object.side_effect = error
    check = service.check_availability("abc")
    assert check.available is False
    assert check.error == str(error)

    client.bucket_exists.side_effect = error
    assert service.test_connection() is False


def test_sha256_file(artifact):
    assert sha256_file(artifact) == hashlib.sha256(b"jpeg bytes").hexdigest()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
