"""Transaction context contract and the bookkeeping shared by ledger backends."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Protocol

from home_transfer.exceptions import TransactionClosedError
from home_transfer.models.base import Event

logger = logging.getLogger(__name__)

EventListener = Callable[[Event], None]


class TransactionContext(Protocol):
    """What the contract is allowed to touch during one invocation."""

    tx_id: str
    timestamp: datetime

    def get(self, key: str) -> bytes | None: ...

    def put(self, key: str, value: bytes) -> None: ...

    def history(self, key: str) -> list[bytes]: ...

    def set_event(self, event: Event) -> None: ...


class BaseTransaction(ABC):
    """Buffered-write transaction.

    Reads go to the backend snapshot and never observe this transaction's own
    pending writes. Writes and the event are held until :meth:`commit`.

    Parameters
    ----------
    ledger : BaseLedger
        Ledger that receives the writes on commit.
    tx_id : str | None
        Transaction id (random when omitted).
    timestamp : datetime | None
        Transaction timestamp (now, UTC, when omitted).
    """

    def __init__(
        self,
        ledger: BaseLedger,
        tx_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        self.ledger = ledger
        self.tx_id = tx_id or uuid.uuid4().hex
        self.timestamp = timestamp or datetime.now(timezone.utc)
        self._writes: dict[str, bytes] = {}
        self._event: Event | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def writes(self) -> dict[str, bytes]:
        """Pending writes, in write order."""
        return dict(self._writes)

    @property
    def event(self) -> Event | None:
        return self._event

    def get(self, key: str) -> bytes | None:
        """Committed value of ``key`` as of the transaction snapshot, or None."""
        self._check_open()
        return self._read(key)

    def put(self, key: str, value: bytes) -> None:
        """Stage ``value`` under ``key``; visible to others only after commit."""
        self._check_open()
        self._writes[key] = bytes(value)

    def history(self, key: str) -> list[bytes]:
        """Committed versions of ``key``, oldest first."""
        self._check_open()
        return self._read_history(key)

    def set_event(self, event: Event) -> None:
        """Attach the event published on commit. The last call wins."""
        self._check_open()
        self._event = event

    def commit(self) -> None:
        """Apply all staged writes atomically, then publish the event."""
        self._check_open()
        try:
            self._apply()
        finally:
            self._closed = True
        logger.debug("Committed tx %s (%d writes)", self.tx_id, len(self._writes))
        if self._event is not None:
            self.ledger.publish(self._event)

    def rollback(self) -> None:
        """Discard staged writes and the event."""
        if self._closed:
            return
        try:
            self._discard()
        finally:
            self._closed = True
            self._writes.clear()
            self._event = None
        logger.debug("Rolled back tx %s", self.tx_id)

    def __enter__(self) -> BaseTransaction:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
        elif not self._closed:
            self.commit()

    def _check_open(self) -> None:
        if self._closed:
            raise TransactionClosedError(f"Transaction {self.tx_id} is already closed")

    @abstractmethod
    def _read(self, key: str) -> bytes | None:
        """Read the committed value of ``key`` from the backend."""

    @abstractmethod
    def _read_history(self, key: str) -> list[bytes]:
        """Read all committed versions of ``key`` from the backend."""

    @abstractmethod
    def _apply(self) -> None:
        """Write ``self._writes`` to the backend atomically."""

    def _discard(self) -> None:
        """Release backend resources held by an abandoned transaction."""


class BaseLedger(ABC):
    """Hands out transactions and fans committed events out to listeners."""

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []

    def subscribe(self, listener: EventListener) -> None:
        """Call ``listener`` with every event of every committed transaction."""
        self._listeners.append(listener)

    def publish(self, event: Event) -> None:
        """Deliver a committed event to all listeners.

        The transaction is already committed at this point, so a failing
        listener is logged and the remaining listeners still run.
        """
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Event listener failed for %s (%s)", event.event_type, event.event_id
                )

    @abstractmethod
    def begin(
        self,
        tx_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> BaseTransaction:
        """Open a new transaction."""

    def close(self) -> None:
        """Release ledger resources."""
