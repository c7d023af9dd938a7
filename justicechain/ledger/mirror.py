"""Two ways of talking to the ledger.

``LedgerNotifier`` mirrors workflow events on a best-effort basis: failures
are logged and swallowed. ``LedgerGateway`` is a blocking dependency: a
failure aborts the calling operation.
"""

from __future__ import annotations

import logging

from ..errors import ConfigurationError, DependencyError
from .client import LedgerClient, TxResult

logger = logging.getLogger(__name__)


class LedgerNotifier:
    """Fire-and-forget mirror of selected workflow events."""

    def __init__(self, client: LedgerClient | None):
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _notify(self, label: str, *args) -> TxResult | None:
        if self.client is None:
            logger.debug("Ledger disabled; skipping %s", label)
            return None
        try:
            result = getattr(self.client, label)(*args)
        except Exception as e:
            logger.warning("Ledger %s raised: %s", label, e)
            return None
        if not result.success:
            logger.warning("Ledger %s failed: %s", label, result.error)
        return result

    def register_role(self, role: str, address: str) -> TxResult | None:
        return self._notify("register_role", role, address)

    def create_case(self) -> TxResult | None:
        return self._notify("create_case")

    def add_evidence(self, case_ref: str, content_hash: str) -> TxResult | None:
        return self._notify("add_evidence", case_ref, content_hash)

    def submit_forensic_report(self, case_ref: str, content_hash: str) -> TxResult | None:
        return self._notify("submit_forensic_report", case_ref, content_hash)

    def give_verdict(self, case_ref: str, decision: str) -> TxResult | None:
        return self._notify("give_verdict", case_ref, decision)


class LedgerGateway:
    """Ledger calls whose failure must fail the caller."""

    def __init__(self, client: LedgerClient | None):
        self.client = client

    def _require_client(self) -> LedgerClient:
        if self.client is None:
            raise ConfigurationError("Ledger integration is not configured")
        return self.client

    def approve_case(self, case_ref: str) -> TxResult:
        """Approve a case on-chain.

        Raises:
            ConfigurationError: If the ledger is disabled
            DependencyError: If the transaction fails
        """
        result = self._require_client().approve_case(case_ref)
        if not result.success:
            raise DependencyError(f"Ledger approval failed: {result.error}")
        return result

    def get_case(self, case_ref: str) -> TxResult:
        result = self._require_client().get_case(case_ref)
        if not result.success:
            raise DependencyError(f"Ledger query failed: {result.error}")
        return result

    def is_role_registered(self, role: str, address: str) -> bool:
        result = self._require_client().is_role_registered(role, address)
        if not result.success:
            raise DependencyError(f"Ledger query failed: {result.error}")
        return bool(result.data.get("registered"))

    def verify_evidence(self, case_ref: str, index: int) -> str:
        result = self._require_client().verify_evidence(case_ref, index)
        if not result.success:
            raise DependencyError(f"Ledger query failed: {result.error}")
        return result.data["content_hash"]
