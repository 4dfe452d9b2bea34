#!/usr/bin/env python3
"""Invoke one HomeTransfer operation against the configured ledger.

Examples:
    python scripts/invoke.py Initialize
    python scripts/invoke.py AddNewRecord 2 Lakeside 1800 Ann 420000
    python scripts/invoke.py ChangeOwner 2 Bob
    python scripts/invoke.py QueryById 2

The ledger backend, event sink and logging come from the environment
(LEDGER_BACKEND, POSTGRES_*, EVENT_SINK, KAFKA_*, LOG_LEVEL). With the default
in-memory ledger state only lives for the duration of the command, so
``--init`` seeds the default record first.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from home_transfer.config import HomeTransferConfig
from home_transfer.contract import contract
from home_transfer.exceptions import HomeTransferError
from home_transfer.logging import setup_logging
from home_transfer.runtime import build_ledger, build_sink, execute
from home_transfer.sinks.serialization import serialize_value

logger = logging.getLogger("invoke")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Invoke a HomeTransfer contract operation",
    )
    parser.add_argument(
        "operation",
        choices=contract.names(),
        help="Operation name",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Operation arguments, in order",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Run Initialize before the operation",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print the JSON result",
    )
    args = parser.parse_args()

    config = HomeTransferConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    try:
        ledger = build_ledger(config)
    except HomeTransferError as exc:
        logger.error("Ledger failure: %s", exc)
        return 2

    sink = None
    try:
        sink = build_sink(config.events, config.kafka)
        if sink is not None:
            ledger.subscribe(sink.write_event)

        if args.init:
            execute(ledger, "Initialize").unwrap()

        result = execute(ledger, args.operation, *args.args)
    except HomeTransferError as exc:
        logger.error("Ledger failure: %s", exc)
        return 2
    finally:
        if sink is not None:
            sink.close()
        ledger.close()

    if result.ok:
        output = {"ok": True, "result": serialize_value(result.value)}
    else:
        output = {"ok": False, "code": result.error.code, "message": str(result.error)}
    print(json.dumps(output, indent=2 if args.pretty else None, ensure_ascii=False))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
