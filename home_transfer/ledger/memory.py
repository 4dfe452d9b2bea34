"""In-memory append-only ledger with snapshot reads and MVCC commit validation."""

from __future__ import annotations

import bisect
import threading
from dataclasses import dataclass
from datetime import datetime, timezone

from home_transfer.exceptions import TransactionConflictError
from home_transfer.ledger.base import BaseLedger, BaseTransaction


@dataclass(frozen=True)
class Version:
    """One committed value of a key."""

    value: bytes
    tx_id: str
    seq: int  # Commit sequence number of the ledger
    committed_at: datetime


class InMemoryLedger(BaseLedger):
    """Ledger kept in process memory.

    Every committed write appends a new :class:`Version`; nothing is ever
    removed. Each commit advances a ledger-wide sequence number, and a
    transaction only sees versions committed at or before the sequence it
    started at. Commit fails with :class:`TransactionConflictError` if any key
    the transaction read has gained a version since.
    """

    def __init__(self) -> None:
        super().__init__()
        self._versions: dict[str, list[Version]] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def begin(
        self,
        tx_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> MemoryTransaction:
        with self._lock:
            snapshot = self._seq
        return MemoryTransaction(self, snapshot, tx_id=tx_id, timestamp=timestamp)

    def current(self, key: str) -> bytes | None:
        """Latest committed value of ``key``, outside any transaction."""
        with self._lock:
            versions = self._versions.get(key)
            return versions[-1].value if versions else None

    def versions(self, key: str) -> list[Version]:
        """All committed versions of ``key``, oldest first."""
        with self._lock:
            return list(self._versions.get(key, []))

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._versions)

    def _visible(self, key: str, snapshot: int) -> list[Version]:
        with self._lock:
            versions = self._versions.get(key, [])
            end = bisect.bisect_right(versions, snapshot, key=lambda v: v.seq)
            return versions[:end]

    def _commit(self, tx: MemoryTransaction) -> None:
        with self._lock:
            for key, seen in tx.read_set.items():
                if len(self._versions.get(key, [])) != seen:
                    raise TransactionConflictError(key)
            if not tx.writes:
                return
            self._seq += 1
            committed_at = datetime.now(timezone.utc)
            for key, value in tx.writes.items():
                self._versions.setdefault(key, []).append(
                    Version(value=value, tx_id=tx.tx_id, seq=self._seq, committed_at=committed_at)
                )


class MemoryTransaction(BaseTransaction):
    """Transaction over an :class:`InMemoryLedger` snapshot."""

    def __init__(
        self,
        ledger: InMemoryLedger,
        snapshot: int,
        tx_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        super().__init__(ledger, tx_id=tx_id, timestamp=timestamp)
        self.snapshot = snapshot
        # Number of versions of each read key visible to this transaction
        self.read_set: dict[str, int] = {}

    def _read(self, key: str) -> bytes | None:
        versions = self.ledger._visible(key, self.snapshot)
        self.read_set[key] = len(versions)
        return versions[-1].value if versions else None

    def _read_history(self, key: str) -> list[bytes]:
        versions = self.ledger._visible(key, self.snapshot)
        self.read_set[key] = len(versions)
        return [version.value for version in versions]

    def _apply(self) -> None:
        self.ledger._commit(self)
