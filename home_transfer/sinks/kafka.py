"""Kafka sink publishing committed contract events."""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from home_transfer.config import KafkaConfig
from home_transfer.exceptions import SinkError
from home_transfer.models.base import Event
from home_transfer.sinks.serialization import to_dict

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "dev.ledger.home-events"


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0

    @property
    def throughput(self) -> float:
        """Calculate events per second achieved."""
        if self.start_time is None or self.end_time is None:
            return 0.0
        duration = self.end_time - self.start_time
        return self.sent / duration if duration > 0 else 0.0


class KafkaSink:
    """Publish events as JSON to a Kafka topic, keyed by record id."""

    def __init__(self, config: KafkaConfig | str, topic: str = DEFAULT_TOPIC) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        topic : str
            Topic used by :meth:`write_event`.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.topic = topic
        self.producer = self._create_producer()
        self.stats = ProducerStats()

    def _create_producer(self) -> Producer:
        """Create Kafka producer with configuration."""
        try:
            return Producer(self.config.to_dict())
        except KafkaException as exc:
            raise SinkError(f"Cannot create Kafka producer: {exc}") from exc

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Send a single event or record to a Kafka topic."""
        value = json.dumps(to_dict(record), ensure_ascii=False, default=str).encode("utf-8")

        if key is None and isinstance(record, Event):
            key = record.subject

        if self.stats.start_time is None:
            self.stats.start_time = time.time()

        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=value,
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as exc:
            raise SinkError(f"Cannot produce to {topic}: {exc}") from exc
        self.stats.sent += 1
        self.producer.poll(0)

    def write_event(self, event: Event) -> None:
        """Publish one committed event; usable directly as a ledger listener."""
        self.send(self.topic, event)

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Write a batch of records to a Kafka topic."""
        logger.info("Writing batch to %s: %d records", topic, len(records))

        for record in records:
            self.send(topic, record)

        self.flush()
        logger.info(
            "Batch complete: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        self.stats.end_time = time.time()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
