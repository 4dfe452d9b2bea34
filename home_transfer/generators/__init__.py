"""Synthetic data generators."""

from home_transfer.generators.base import BaseGenerator
from home_transfer.generators.record import HomeRecordGenerator

__all__ = ["BaseGenerator", "HomeRecordGenerator"]
