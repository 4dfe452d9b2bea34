"""Console sink for debugging and development."""

import json
from typing import Any

from home_transfer.models.base import Event
from home_transfer.sinks.serialization import to_dict


class ConsoleSink:
    """Print committed events to stdout."""

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output.
        max_records : int | None
            Maximum records to print per batch (None for all).
        """
        self.pretty = pretty
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def write_event(self, event: Event) -> None:
        """Print one event; usable directly as a ledger listener."""
        self._print(event)
        self._counts[event.event_type] = self._counts.get(event.event_type, 0) + 1

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Print a batch of events or records under a header."""
        print(f"\n{'='*60}")
        print(f"Topic: {topic} ({len(records)} records)")
        print("=" * 60)

        display_records = records[: self.max_records] if self.max_records else records
        for record in display_records:
            self._print(record)

        if self.max_records and len(records) > self.max_records:
            print(f"... and {len(records) - self.max_records} more records")

        self._counts[topic] = self._counts.get(topic, 0) + len(records)

    def close(self) -> None:
        """Print summary and close."""
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for name, count in self._counts.items():
            print(f"  {name}: {count} records")

    def _print(self, record: Any) -> None:
        data = to_dict(record)
        if self.pretty:
            print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        else:
            print(json.dumps(data, ensure_ascii=False, default=str))
