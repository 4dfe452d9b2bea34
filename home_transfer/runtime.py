"""Minimal ledger runtime: run one contract operation per transaction."""

from __future__ import annotations

import logging
from typing import Any

from home_transfer.config import EventConfig, HomeTransferConfig, KafkaConfig
from home_transfer.contract import Failure, OperationRegistry, Result, contract
from home_transfer.exceptions import UnknownOperationError
from home_transfer.ledger.base import BaseLedger
from home_transfer.ledger.memory import InMemoryLedger

logger = logging.getLogger(__name__)


def execute(
    ledger: BaseLedger,
    name: str,
    *args: Any,
    registry: OperationRegistry = contract,
) -> Result:
    """Invoke operation ``name`` in a fresh transaction on ``ledger``.

    Successful submit operations are committed. Read-only evaluations and
    rejected invocations are rolled back. Exceptions raised by the ledger,
    including commit conflicts, roll the transaction back and propagate.
    """
    if name not in registry:
        return Failure(UnknownOperationError(name))

    tx = ledger.begin()
    try:
        result = registry.invoke(tx, name, *args)
        if result.ok and registry.is_submit(name):
            tx.commit()
        else:
            tx.rollback()
    except Exception:
        tx.rollback()
        raise

    logger.debug("%s(%s) in tx %s -> ok=%s", name, ", ".join(map(str, args)), tx.tx_id, result.ok)
    return result


def build_ledger(config: HomeTransferConfig) -> BaseLedger:
    """Create the ledger backend selected by ``config.ledger.backend``."""
    if config.ledger.backend == "postgres":
        from home_transfer.ledger.postgres import PostgresLedger

        ledger: BaseLedger = PostgresLedger(config.postgres)
        ledger.ensure_schema()
    else:
        ledger = InMemoryLedger()
    logger.info("Using %s ledger", config.ledger.backend)
    return ledger


def build_sink(events: EventConfig, kafka: KafkaConfig | None = None):
    """Create the event sink selected by ``events.sink``, or None."""
    if events.sink == "console":
        from home_transfer.sinks.console import ConsoleSink

        return ConsoleSink(pretty=events.pretty)
    if events.sink == "kafka":
        from home_transfer.sinks.kafka import KafkaSink

        return KafkaSink(kafka or KafkaConfig(), topic=events.topic)
    return None
