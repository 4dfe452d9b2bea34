"""Sinks that receive committed contract events."""

from home_transfer.sinks.console import ConsoleSink
from home_transfer.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "KafkaSink"]
