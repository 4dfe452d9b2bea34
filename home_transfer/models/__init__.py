"""Domain models for the home transfer contract."""

from home_transfer.models.base import Event
from home_transfer.models.record import FIELD_NAMES, HomeRecord

__all__ = ["Event", "FIELD_NAMES", "HomeRecord"]
