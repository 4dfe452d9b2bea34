"""Tests for the in-memory ledger and transaction bookkeeping."""

from datetime import datetime, timezone

import pytest

from home_transfer.contract import add_new_record, change_owner
from home_transfer.exceptions import TransactionClosedError, TransactionConflictError
from home_transfer.ledger.memory import InMemoryLedger
from home_transfer.models import Event, HomeRecord


def _event(subject: str = "1") -> Event:
    return Event(
        event_id="tx-1",
        event_type="home.created",
        event_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        source="HomeTransfer",
        subject=subject,
        data={},
    )


class TestMemoryTransaction:
    """Tests for reads, writes and commit of a single transaction."""

    def test_get_absent_key(self, ledger: InMemoryLedger) -> None:
        tx = ledger.begin()

        assert tx.get("nope") is None

    def test_writes_invisible_before_commit(self, ledger: InMemoryLedger) -> None:
        tx = ledger.begin()
        tx.put("k", b"v")

        assert tx.get("k") is None
        assert ledger.current("k") is None

        tx.commit()

        assert ledger.current("k") == b"v"

    def test_snapshot_read(self, ledger: InMemoryLedger) -> None:
        reader = ledger.begin()

        with ledger.begin() as writer:
            writer.put("k", b"v")

        assert reader.get("k") is None
        assert ledger.begin().get("k") == b"v"

    def test_rollback_discards_writes(self, ledger: InMemoryLedger) -> None:
        tx = ledger.begin()
        tx.put("k", b"v")
        tx.set_event(_event())
        tx.rollback()

        assert ledger.current("k") is None
        assert tx.writes == {}
        assert tx.event is None

    def test_context_manager_rolls_back_on_exception(self, ledger: InMemoryLedger) -> None:
        with pytest.raises(RuntimeError):
            with ledger.begin() as tx:
                tx.put("k", b"v")
                raise RuntimeError("boom")

        assert ledger.current("k") is None

    def test_closed_transaction_rejected(self, ledger: InMemoryLedger) -> None:
        tx = ledger.begin()
        tx.commit()

        with pytest.raises(TransactionClosedError):
            tx.get("k")
        with pytest.raises(TransactionClosedError):
            tx.put("k", b"v")
        with pytest.raises(TransactionClosedError):
            tx.commit()

    def test_rollback_after_commit_is_noop(self, ledger: InMemoryLedger) -> None:
        tx = ledger.begin()
        tx.put("k", b"v")
        tx.commit()
        tx.rollback()

        assert ledger.current("k") == b"v"

    def test_tx_id_and_timestamp(self, ledger: InMemoryLedger) -> None:
        ts = datetime(2024, 5, 1, tzinfo=timezone.utc)
        tx = ledger.begin(tx_id="abc", timestamp=ts)

        assert tx.tx_id == "abc"
        assert tx.timestamp == ts
        assert len(ledger.begin().tx_id) == 32


class TestInMemoryLedger:
    """Tests for versions, conflicts and event delivery."""

    def test_versions_are_appended(self, ledger: InMemoryLedger) -> None:
        for value in (b"a", b"b"):
            with ledger.begin(tx_id=value.decode()) as tx:
                tx.put("k", value)

        versions = ledger.versions("k")
        assert [v.value for v in versions] == [b"a", b"b"]
        assert [v.tx_id for v in versions] == ["a", "b"]
        assert ledger.keys() == ["k"]

    def test_commit_sequence(self, ledger: InMemoryLedger) -> None:
        for key in ("a", "b", "a"):
            with ledger.begin() as tx:
                tx.put(key, b"v")
        with ledger.begin() as tx:
            tx.get("a")

        assert [v.seq for v in ledger.versions("a")] == [1, 3]
        assert [v.seq for v in ledger.versions("b")] == [2]
        assert ledger.begin().snapshot == 3

    def test_commit_stamped_at_commit_time(self, ledger: InMemoryLedger) -> None:
        started = datetime(2000, 1, 1, tzinfo=timezone.utc)
        tx = ledger.begin(timestamp=started)
        tx.put("k", b"v")
        before = datetime.now(timezone.utc)
        tx.commit()

        committed_at = ledger.versions("k")[0].committed_at
        assert committed_at >= before
        assert tx.timestamp == started

    def test_history_respects_snapshot(self, ledger: InMemoryLedger) -> None:
        with ledger.begin() as tx:
            tx.put("k", b"a")
        reader = ledger.begin()
        with ledger.begin() as tx:
            tx.put("k", b"b")

        assert reader.history("k") == [b"a"]
        assert ledger.begin().history("k") == [b"a", b"b"]

    def test_concurrent_owner_change_conflicts(self, ledger: InMemoryLedger) -> None:
        with ledger.begin() as tx:
            add_new_record(tx, "5", "N", "A", "O", "V")

        first = ledger.begin()
        second = ledger.begin()
        change_owner(first, "5", "P")
        change_owner(second, "5", "Q")
        first.commit()

        with pytest.raises(TransactionConflictError) as exc_info:
            second.commit()

        assert exc_info.value.key == "5"
        assert HomeRecord.decode(ledger.current("5")).owner == "P"
        assert second.closed

    def test_concurrent_create_conflicts(self, ledger: InMemoryLedger) -> None:
        first = ledger.begin()
        second = ledger.begin()
        add_new_record(first, "9", "N", "A", "O", "V")
        add_new_record(second, "9", "M", "B", "P", "W")
        first.commit()

        with pytest.raises(TransactionConflictError):
            second.commit()

        assert len(ledger.versions("9")) == 1

    def test_blind_writes_do_not_conflict(self, ledger: InMemoryLedger) -> None:
        first = ledger.begin()
        second = ledger.begin()
        first.put("k", b"a")
        second.put("k", b"b")
        first.commit()
        second.commit()

        assert ledger.current("k") == b"b"

    def test_event_published_after_commit(self, ledger: InMemoryLedger) -> None:
        received = []
        ledger.subscribe(received.append)
        event = _event()

        with ledger.begin() as tx:
            tx.put("1", b"v")
            tx.set_event(event)

        assert received == [event]

    def test_no_event_on_conflict(self, ledger: InMemoryLedger) -> None:
        received = []
        ledger.subscribe(received.append)
        tx = ledger.begin()
        tx.get("k")
        tx.set_event(_event())
        with ledger.begin() as other:
            other.put("k", b"v")

        with pytest.raises(TransactionConflictError):
            tx.commit()

        assert received == []

    def test_failing_listener_does_not_undo_commit(self, ledger: InMemoryLedger) -> None:
        received = []

        def broken(event: Event) -> None:
            raise RuntimeError("sink down")

        ledger.subscribe(broken)
        ledger.subscribe(received.append)

        with ledger.begin() as tx:
            tx.put("1", b"v")
            tx.set_event(_event())

        assert ledger.current("1") == b"v"
        assert len(received) == 1

