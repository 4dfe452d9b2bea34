"""Tests for the command-line scripts."""

import json
from unittest.mock import MagicMock, patch

import pytest

from home_transfer.config import HomeTransferConfig
from home_transfer.exceptions import LedgerError
from home_transfer.ledger.memory import InMemoryLedger
from home_transfer.runtime import execute
from scripts import invoke, load_records


@pytest.fixture
def ledger() -> InMemoryLedger:
    """In-memory ledger whose close() is observable."""
    ledger = InMemoryLedger()
    ledger.close = MagicMock()
    return ledger


class TestLoadRecords:
    """Tests for load_records.load."""

    def test_load_creates_and_transfers(self, ledger: InMemoryLedger) -> None:
        with patch("scripts.load_records.build_ledger", return_value=ledger):
            counts = load_records.load(HomeTransferConfig(seed=1), count=5, transfer_rate=1.0)

        assert counts == {"created": 5, "rejected": 0, "transferred": 5}
        assert len(ledger.keys()) == 5
        ledger.close.assert_called_once()

    def test_sink_closed_when_ledger_fails(self, ledger: InMemoryLedger) -> None:
        sink = MagicMock()
        calls = []

        def failing_execute(*args, **kwargs):
            calls.append(args)
            if len(calls) == 3:
                raise LedgerError("connection lost")
            return execute(*args, **kwargs)

        with patch("scripts.load_records.build_ledger", return_value=ledger), patch(
            "scripts.load_records.build_sink", return_value=sink
        ), patch("scripts.load_records.execute", side_effect=failing_execute):
            with pytest.raises(LedgerError):
                load_records.load(HomeTransferConfig(seed=1), count=5, transfer_rate=0.0)

        assert sink.write_event.call_count == 2
        sink.close.assert_called_once()
        ledger.close.assert_called_once()


class TestInvoke:
    """Tests for invoke.main."""

    def test_query_after_init(self, ledger: InMemoryLedger, capsys: pytest.CaptureFixture) -> None:
        with patch("sys.argv", ["invoke.py", "--init", "QueryById", "1"]), patch(
            "scripts.invoke.setup_logging"
        ), patch("scripts.invoke.build_ledger", return_value=ledger), patch(
            "scripts.invoke.build_sink", return_value=None
        ):
            code = invoke.main()

        output = json.loads(capsys.readouterr().out)
        assert code == 0
        assert output["result"]["owner"] == "Mark"
        ledger.close.assert_called_once()

    def test_rejection_exit_code(self, ledger: InMemoryLedger, capsys: pytest.CaptureFixture) -> None:
        with patch("sys.argv", ["invoke.py", "QueryById", "missing"]), patch(
            "scripts.invoke.setup_logging"
        ), patch("scripts.invoke.build_ledger", return_value=ledger), patch(
            "scripts.invoke.build_sink", return_value=None
        ):
            code = invoke.main()

        output = json.loads(capsys.readouterr().out)
        assert code == 1
        assert output["code"] == "HOME_NOT_FOUND"

    def test_sink_closed_when_ledger_fails(self, ledger: InMemoryLedger) -> None:
        sink = MagicMock()

        with patch("sys.argv", ["invoke.py", "ChangeOwner", "1", "Ann"]), patch(
            "scripts.invoke.setup_logging"
        ), patch("scripts.invoke.build_ledger", return_value=ledger), patch(
            "scripts.invoke.build_sink", return_value=sink
        ), patch("scripts.invoke.execute", side_effect=LedgerError("connection lost")):
            code = invoke.main()

        assert code == 2
        sink.close.assert_called_once()
        ledger.close.assert_called_once()
