"""Configuration management for home-transfer."""

import os
from dataclasses import dataclass, field
from typing import Any

from home_transfer.exceptions import ConfigurationError

LEDGER_BACKENDS = ("memory", "postgres")
EVENT_SINKS = ("none", "console", "kafka")


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "homeledger"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class LedgerConfig:
    """Which ledger backend hands out transaction contexts."""

    backend: str = "memory"

    def __post_init__(self) -> None:
        if self.backend not in LEDGER_BACKENDS:
            raise ConfigurationError(
                f"Unknown ledger backend '{self.backend}', expected one of {LEDGER_BACKENDS}"
            )


@dataclass
class EventConfig:
    """Where committed contract events are published."""

    sink: str = "none"
    topic_prefix: str = "dev.ledger"
    pretty: bool = False

    def __post_init__(self) -> None:
        if self.sink not in EVENT_SINKS:
            raise ConfigurationError(
                f"Unknown event sink '{self.sink}', expected one of {EVENT_SINKS}"
            )

    @property
    def topic(self) -> str:
        """Topic committed home events are published to."""
        return f"{self.topic_prefix}.home-events"


@dataclass
class HomeTransferConfig:
    """Main configuration for home-transfer."""

    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    events: EventConfig = field(default_factory=EventConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "HomeTransferConfig":
        """Create config from environment variables."""
        try:
            postgres = PostgresConfig(
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=int(os.getenv("POSTGRES_PORT", "5432")),
                database=os.getenv("POSTGRES_DB", "homeledger"),
                user=os.getenv("POSTGRES_USER", "postgres"),
                password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        ledger = LedgerConfig(backend=os.getenv("LEDGER_BACKEND", "memory").lower())

        events = EventConfig(
            sink=os.getenv("EVENT_SINK", "none").lower(),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.ledger"),
            pretty=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            ledger=ledger,
            postgres=postgres,
            kafka=kafka,
            events=events,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
