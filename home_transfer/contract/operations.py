"""HomeTransfer contract: create, read and transfer home ownership records.

Every operation runs inside a transaction context handed in by the ledger
runtime, touches a single key, and performs at most one read and one write.
Rejections come back as :class:`Failure` values and never write anything;
errors raised by the context itself are left to propagate.
"""

from __future__ import annotations

import logging

from home_transfer.contract.registry import OperationRegistry
from home_transfer.contract.result import Failure, Result, Success
from home_transfer.exceptions import (
    HomeTransferError,
    InvalidArgumentError,
    MalformedRecordError,
    RecordAlreadyExistsError,
    RecordNotFoundError,
)
from home_transfer.ledger.base import TransactionContext
from home_transfer.models import Event, HomeRecord

logger = logging.getLogger(__name__)

CONTRACT_NAME = "HomeTransfer"

# Seeded by Initialize under key "1"
DEFAULT_RECORD = HomeRecord(id="1", name="FirstHome", area="2000", owner="Mark", value="6756")

contract = OperationRegistry(CONTRACT_NAME)


def _reject(ctx: TransactionContext, error: HomeTransferError) -> Failure:
    logger.warning(
        "tx %s rejected: %s",
        ctx.tx_id,
        error,
        extra={"extra": {"tx_id": ctx.tx_id, "error_code": error.code}},
    )
    return Failure(error)


def _invalid(field: str, value: object) -> InvalidArgumentError | None:
    if not isinstance(value, str) or not value:
        return InvalidArgumentError(field)
    return None


def _load(ctx: TransactionContext, record_id: str) -> Result[HomeRecord]:
    data = ctx.get(record_id)
    if data is None:
        return Failure(RecordNotFoundError(record_id))
    try:
        return Success(HomeRecord.decode(data, key=record_id))
    except MalformedRecordError as exc:
        return Failure(exc)


def _store(ctx: TransactionContext, record: HomeRecord, event_type: str, **metadata: str) -> None:
    ctx.put(record.id, record.encode())
    ctx.set_event(
        Event(
            event_id=ctx.tx_id,
            event_type=event_type,
            event_time=ctx.timestamp,
            source=CONTRACT_NAME,
            subject=record.id,
            data=record.to_dict(),
            metadata=dict(metadata),
        )
    )
    logger.info(
        "tx %s wrote home %s (%s)",
        ctx.tx_id,
        record.id,
        event_type,
        extra={"extra": {"tx_id": ctx.tx_id, "record_id": record.id}},
    )


@contract.transaction("Initialize")
def init_ledger(ctx: TransactionContext) -> Result[None]:
    """Seed key "1" with the default record, overwriting whatever is there."""
    _store(ctx, DEFAULT_RECORD, "home.initialized")
    return Success(None)


@contract.transaction("AddNewRecord")
def add_new_record(
    ctx: TransactionContext,
    record_id: str,
    name: str,
    area: str,
    owner: str,
    value: str,
) -> Result[HomeRecord]:
    """Create a new home record under ``record_id``.

    Fails with :class:`RecordAlreadyExistsError` if the key already holds a
    value; there is no overwrite path.
    """
    error = _invalid("id", record_id)
    if error:
        return _reject(ctx, error)

    if ctx.get(record_id) is not None:
        return _reject(ctx, RecordAlreadyExistsError(record_id))

    try:
        record = HomeRecord(id=record_id, name=name, area=area, owner=owner, value=value)
    except InvalidArgumentError as exc:
        return _reject(ctx, exc)

    _store(ctx, record, "home.created")
    return Success(record)


@contract.transaction("QueryById", submit=False)
def query_by_id(ctx: TransactionContext, record_id: str) -> Result[HomeRecord]:
    """Read the record stored under ``record_id``."""
    error = _invalid("id", record_id)
    if error:
        return _reject(ctx, error)

    result = _load(ctx, record_id)
    if not result.ok:
        return _reject(ctx, result.error)
    return result


@contract.transaction("ChangeOwner")
def change_owner(ctx: TransactionContext, record_id: str, new_owner: str) -> Result[HomeRecord]:
    """Transfer the home under ``record_id`` to ``new_owner``.

    Only ``owner`` changes. The record is rewritten even when ``new_owner``
    is already the owner, so every committed call leaves a new version.
    """
    error = _invalid("id", record_id) or _invalid("new_owner", new_owner)
    if error:
        return _reject(ctx, error)

    result = _load(ctx, record_id)
    if not result.ok:
        return _reject(ctx, result.error)

    current = result.value
    try:
        updated = current.with_owner(new_owner)
    except InvalidArgumentError as exc:
        return _reject(ctx, exc)
    _store(ctx, updated, "home.owner_changed", previous_owner=current.owner)
    return Success(updated)


@contract.transaction("GetRecordHistory", submit=False)
def get_record_history(ctx: TransactionContext, record_id: str) -> Result[list[HomeRecord]]:
    """Every committed version of the record, oldest first."""
    error = _invalid("id", record_id)
    if error:
        return _reject(ctx, error)

    versions = ctx.history(record_id)
    if not versions:
        return _reject(ctx, RecordNotFoundError(record_id))

    try:
        records = [HomeRecord.decode(data, key=record_id) for data in versions]
    except MalformedRecordError as exc:
        return _reject(ctx, exc)
    return Success(records)
