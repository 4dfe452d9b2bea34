#!/usr/bin/env python3
"""Load synthetic home records into the ledger through the contract.

Each record is created with its own AddNewRecord transaction, so every created
home also produces a ``home.created`` event on the configured sink. Optionally
a share of the records is transferred to a new owner afterwards.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from home_transfer.config import EventConfig, HomeTransferConfig
from home_transfer.exceptions import HomeTransferError
from home_transfer.generators import HomeRecordGenerator
from home_transfer.logging import setup_logging
from home_transfer.runtime import build_ledger, build_sink, execute

logger = logging.getLogger("load_records")


def load(config: HomeTransferConfig, count: int, transfer_rate: float) -> dict[str, int]:
    """Create ``count`` records and transfer a share of them.

    Returns
    -------
    dict[str, int]
        Counts of created, rejected and transferred records.
    """
    ledger = build_ledger(config)
    generator = HomeRecordGenerator(seed=config.seed)
    counts = {"created": 0, "rejected": 0, "transferred": 0}
    created = []
    sink = None

    # Committed events are flushed even when a later transaction fails
    try:
        sink = build_sink(config.events, config.kafka)
        if sink is not None:
            ledger.subscribe(sink.write_event)

        for record in generator.generate_batch(count):
            result = execute(ledger, "AddNewRecord", *record.to_dict().values())
            if result.ok:
                counts["created"] += 1
                created.append(record)
            else:
                counts["rejected"] += 1
                logger.warning("Skipped %s: %s", record.id, result.error)

        for record in created:
            if generator.random.random() >= transfer_rate:
                continue
            if execute(ledger, "ChangeOwner", record.id, generator.fake.name()).ok:
                counts["transferred"] += 1
    finally:
        if sink is not None:
            sink.close()
        ledger.close()
    return counts


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Load synthetic home records into the ledger",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=100,
        help="Number of records to create (default: 100)",
    )
    parser.add_argument(
        "--transfer-rate",
        type=float,
        default=0.2,
        help="Share of created records transferred to a new owner (default: 0.2)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (overrides SEED)",
    )
    parser.add_argument(
        "--sink",
        choices=["none", "console", "kafka"],
        default=None,
        help="Event sink (overrides EVENT_SINK)",
    )
    args = parser.parse_args()

    config = HomeTransferConfig.from_env()
    if args.seed is not None:
        config.seed = args.seed
    if args.sink is not None:
        config.events = EventConfig(
            sink=args.sink,
            topic_prefix=config.events.topic_prefix,
            pretty=config.events.pretty,
        )
    setup_logging(config.log_level, config.log_format)

    start = time.monotonic()
    try:
        counts = load(config, args.count, args.transfer_rate)
    except HomeTransferError as exc:
        logger.error("Load failed: %s", exc)
        return 1

    logger.info(
        "Loaded in %.2fs: created=%d rejected=%d transferred=%d",
        time.monotonic() - start,
        counts["created"],
        counts["rejected"],
        counts["transferred"],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
