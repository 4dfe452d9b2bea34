"""Base models shared across the contract and its sinks."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """Standard event envelope attached to a transaction and published on commit."""

    event_id: str  # Transaction id that produced the event
    event_type: str  # entity.action (e.g., home.created)
    event_time: datetime
    source: str  # Contract that emitted the event
    subject: str  # Record id affected
    data: dict
    metadata: dict = field(default_factory=dict)
