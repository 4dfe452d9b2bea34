"""Name-to-function table of contract operations.

The ledger runtime dispatches an invocation by name; this module only keeps
the table and binds arguments, it never opens or commits a transaction.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from home_transfer.contract.result import Failure, Result
from home_transfer.exceptions import InvalidArgumentError, UnknownOperationError
from home_transfer.ledger.base import TransactionContext

logger = logging.getLogger(__name__)

OperationFunc = Callable[..., Result]


@dataclass(frozen=True)
class Operation:
    """A registered contract operation."""

    name: str
    func: OperationFunc
    submit: bool  # False for read-only evaluations that are never committed

    def __call__(self, ctx: TransactionContext, *args: Any) -> Result:
        return self.func(ctx, *args)


class OperationRegistry:
    """Contract operations keyed by their invocation name."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._operations: dict[str, Operation] = {}

    def transaction(self, name: str, submit: bool = True) -> Callable[[OperationFunc], OperationFunc]:
        """Register the decorated function as operation ``name``."""

        def decorator(func: OperationFunc) -> OperationFunc:
            if name in self._operations:
                raise ValueError(f"Operation {name} is already registered on {self.name}")
            self._operations[name] = Operation(name=name, func=func, submit=submit)
            return func

        return decorator

    def get(self, name: str) -> Operation | None:
        return self._operations.get(name)

    def names(self) -> list[str]:
        return list(self._operations)

    def is_submit(self, name: str) -> bool:
        operation = self._operations.get(name)
        if operation is None:
            raise UnknownOperationError(name)
        return operation.submit

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)

    def invoke(self, ctx: TransactionContext, name: str, *args: Any) -> Result:
        """Run operation ``name`` with ``args`` inside ``ctx``.

        Unknown names and argument lists that do not fit the operation come
        back as a :class:`Failure`. Errors raised by the transaction context
        itself propagate unchanged.
        """
        operation = self._operations.get(name)
        if operation is None:
            logger.warning("%s: unknown operation %s", self.name, name)
            return Failure(UnknownOperationError(name))

        try:
            inspect.signature(operation.func).bind(ctx, *args)
        except TypeError as exc:
            logger.warning("%s.%s: bad arguments (%s)", self.name, name, exc)
            return Failure(InvalidArgumentError("arguments", f"do not match {name}: {exc}"))

        return operation(ctx, *args)
