"""Smart-contract ledger integration."""

from __future__ import annotations

from .client import GAS_MARGIN, LedgerClient, TxResult, with_gas_margin
from .mirror import LedgerGateway, LedgerNotifier

__all__ = [
    "GAS_MARGIN",
    "LedgerClient",
    "LedgerGateway",
    "LedgerNotifier",
    "TxResult",
    "with_gas_margin",
]
