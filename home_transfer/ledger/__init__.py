"""Ledger backends that hand out transaction contexts to the contract."""

from home_transfer.ledger.base import BaseLedger, BaseTransaction, TransactionContext
from home_transfer.ledger.memory import InMemoryLedger, MemoryTransaction

__all__ = [
    "BaseLedger",
    "BaseTransaction",
    "InMemoryLedger",
    "MemoryTransaction",
    "TransactionContext",
]
