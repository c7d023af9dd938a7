"""Signed-transaction client for the JusticeChain ledger contract.

Every transaction method follows the same protocol: estimate gas, add a
fixed 20% margin, read the gas price and pending nonce, sign with the admin
key, submit and wait for the receipt. Methods never raise; failures come
back as ``TxResult(success=False, error=...)`` and the caller decides
whether that is fatal. There is no retry and no idempotency key.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from web3 import Web3

from ..config import LedgerConfig
from ..errors import ConfigurationError
from .abi import JUSTICE_CHAIN_ABI, ROLE_REGISTRY_FUNCTIONS

logger = logging.getLogger(__name__)

GAS_MARGIN = 1.2


@dataclass
class TxResult:
    """Outcome of one ledger transaction or query."""

    success: bool
    tx_hash: str | None = None
    block_number: int | None = None
    gas_used: int | None = None
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failed(cls, error: str) -> TxResult:
        return cls(success=False, error=error)


def with_gas_margin(estimate: int) -> int:
    """Apply the safety margin to a gas estimate, rounding up."""
    return int(math.ceil(estimate * GAS_MARGIN))


class LedgerClient:
    """Binds one contract, one network and one signing account."""

    def __init__(self, w3, contract, account, chain_id: int, receipt_timeout: int = 120):
        self.w3 = w3
        self.contract = contract
        self.account = account
        self.chain_id = chain_id
        self.receipt_timeout = receipt_timeout

    @classmethod
    def connect(cls, cfg: LedgerConfig) -> LedgerClient:
        """Build a client from configuration.

        Raises:
            ConfigurationError: If the contract address or signing key is missing
        """
        if not cfg.contract_address:
            raise ConfigurationError("ledger.contract_address is not configured")
        if not cfg.admin_private_key:
            raise ConfigurationError("ledger.admin_private_key is not configured")

        profile = cfg.profile()
        w3 = Web3(Web3.HTTPProvider(profile.rpc_url))
        contract = w3.eth.contract(
            address=Web3.to_checksum_address(cfg.contract_address), abi=JUSTICE_CHAIN_ABI
        )
        account = w3.eth.account.from_key(cfg.admin_private_key)
        logger.info(
            "Ledger bound to %s on %s (chain %s)",
            cfg.contract_address,
            profile.name,
            profile.chain_id,
        )
        return cls(w3, contract, account, profile.chain_id, cfg.receipt_timeout)

    @property
    def address(self) -> str:
        return self.account.address

    def _transact(self, label: str, build) -> tuple[TxResult, Any]:
        """Build the call, estimate, sign, send and wait.

        ``build`` is a zero-argument callable returning the contract call, so
        argument coercion and ABI lookup failures also come back as results.
        Returns the result and the raw receipt.
        """
        try:
            call = build()
            gas = call.estimate_gas({"from": self.account.address})
            tx = call.build_transaction(
                {
                    "from": self.account.address,
                    "gas": with_gas_margin(gas),
                    "gasPrice": self.w3.eth.gas_price,
                    "nonce": self.w3.eth.get_transaction_count(self.account.address, "pending"),
                    "chainId": self.chain_id,
                }
            )
            signed = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except Exception as e:
            logger.error("Ledger %s failed: %s", label, e)
            return TxResult.failed(str(e)), None

        if receipt.get("status", 1) == 0:
            return (
                TxResult(
                    success=False,
                    tx_hash=Web3.to_hex(tx_hash),
                    block_number=receipt.get("blockNumber"),
                    gas_used=receipt.get("gasUsed"),
                    error="Transaction reverted",
                ),
                receipt,
            )

        result = TxResult(
            success=True,
            tx_hash=Web3.to_hex(tx_hash),
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
        )
        logger.info("Ledger %s confirmed in block %s: %s", label, result.block_number, result.tx_hash)
        return result, receipt

    def register_role(self, role: str, address: str) -> TxResult:
        result, _ = self._transact(
            "registerRole",
            lambda: self.contract.functions.registerRole(role, Web3.to_checksum_address(address)),
        )
        return result

    def create_case(self) -> TxResult:
        """Create a case; the on-chain id is read from the CaseCreated event."""
        result, receipt = self._transact("createCase", lambda: self.contract.functions.createCase())
        if result.success and receipt is not None:
            try:
                events = self.contract.events.CaseCreated().process_receipt(receipt)
            except Exception as e:
                logger.warning("Could not decode CaseCreated event: %s", e)
                events = []
            if events:
                result.data["case_ref"] = str(events[0]["args"]["caseId"])
        return result

    def approve_case(self, case_ref: str) -> TxResult:
        result, _ = self._transact(
            "approveCase", lambda: self.contract.functions.approveCase(int(case_ref))
        )
        return result

    def add_evidence(self, case_ref: str, content_hash: str) -> TxResult:
        result, _ = self._transact(
            "addEvidence", lambda: self.contract.functions.addEvidence(int(case_ref), content_hash)
        )
        return result

    def submit_forensic_report(self, case_ref: str, content_hash: str) -> TxResult:
        result, _ = self._transact(
            "submitForensicReport",
            lambda: self.contract.functions.submitForensicReport(int(case_ref), content_hash),
        )
        return result

    def give_verdict(self, case_ref: str, decision: str) -> TxResult:
        result, _ = self._transact(
            "giveVerdict", lambda: self.contract.functions.giveVerdict(int(case_ref), decision)
        )
        return result

    # --- read-only queries, no caching ---

    def get_case(self, case_ref: str) -> TxResult:
        try:
            row = self.contract.functions.cases(int(case_ref)).call()
        except Exception as e:
            logger.error("Ledger cases(%s) failed: %s", case_ref, e)
            return TxResult.failed(str(e))
        case_id, police, forensic, judge, approved, closed = row
        return TxResult(
            success=True,
            data={
                "case_id": str(case_id),
                "police_officer": police,
                "forensic_officer": forensic,
                "judge_officer": judge,
                "approved": bool(approved),
                "closed": bool(closed),
            },
        )

    def verify_evidence(self, case_ref: str, index: int) -> TxResult:
        try:
            stored = self.contract.functions.verifyEvidence(int(case_ref), int(index)).call()
        except Exception as e:
            logger.error("Ledger verifyEvidence(%s, %s) failed: %s", case_ref, index, e)
            return TxResult.failed(str(e))
        return TxResult(success=True, data={"content_hash": stored})

    def is_role_registered(self, role: str, address: str) -> TxResult:
        fn_name = ROLE_REGISTRY_FUNCTIONS.get(role.upper())
        if fn_name is None:
            return TxResult.failed(f"Role {role} is not registered on-chain")
        try:
            fn = getattr(self.contract.functions, fn_name)
            registered = fn(Web3.to_checksum_address(address)).call()
        except Exception as e:
            logger.error("Ledger %s(%s) failed: %s", fn_name, address, e)
            return TxResult.failed(str(e))
        return TxResult(success=True, data={"registered": bool(registered)})
