"""Success/failure values returned by contract operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from home_transfer.exceptions import HomeTransferError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Operation completed; ``value`` is its output."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Operation was rejected; ``error`` says why. Nothing was written."""

    error: HomeTransferError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        """Raise the carried error."""
        raise self.error


Result = Union[Success[T], Failure]
