"""Tests for the best-effort ledger notifier and the blocking gateway."""

from unittest.mock import MagicMock

import pytest

from justicechain.errors import ConfigurationError, DependencyError
from justicechain.ledger import LedgerGateway, LedgerNotifier, TxResult


def test_disabled_notifier_skips():
    notifier = LedgerNotifier(None)
    assert notifier.enabled is False
    assert notifier.create_case() is None
    assert notifier.register_role("POLICE", "0x1") is None


def test_notifier_swallows_exceptions():
    client = MagicMock()
    client.add_evidence.side_effect = RuntimeError("rpc down")
    assert LedgerNotifier(client).add_evidence("1", "QmHash") is None


def test_notifier_returns_failed_results():
    client = MagicMock()
    client.give_verdict.return_value = TxResult.failed("reverted")
    result = LedgerNotifier(client).give_verdict("1", "GUILTY")
    assert result.success is False


def test_gateway_requires_client():
    with pytest.raises(ConfigurationError):
        LedgerGateway(None).approve_case("1")
    with pytest.raises(ConfigurationError):
        LedgerGateway(None).is_role_registered("POLICE", "0x1")


def test_gateway_raises_on_failure():
    client = MagicMock()
    client.approve_case.return_value = TxResult.failed("reverted")
    with pytest.raises(DependencyError):
        LedgerGateway(client).approve_case("1")


def test_gateway_reads():
    client = MagicMock()
    client.is_role_registered.return_value = TxResult(success=True, data={"registered": True})
    client.verify_evidence.return_value = TxResult(success=True, data={"content_hash": "QmHash"})
    gateway = LedgerGateway(client)
    assert gateway.is_role_registered("POLICE", "0x1") is True
    assert gateway.verify_evidence("1", 0) == "QmHash"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
