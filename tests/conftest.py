"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from home_transfer.ledger.memory import InMemoryLedger, MemoryTransaction
from home_transfer.models import HomeRecord


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Fresh, empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def ctx(ledger: InMemoryLedger) -> MemoryTransaction:
    """Open transaction on the empty ledger."""
    return ledger.begin(tx_id="tx-test-001", timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def sample_record() -> HomeRecord:
    """Sample home record."""
    return HomeRecord(id="5", name="N", area="A", owner="O", value="V")
