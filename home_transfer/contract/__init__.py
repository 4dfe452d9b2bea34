"""HomeTransfer contract operations and their registry."""

from home_transfer.contract.operations import (
    CONTRACT_NAME,
    DEFAULT_RECORD,
    add_new_record,
    change_owner,
    contract,
    get_record_history,
    init_ledger,
    query_by_id,
)
from home_transfer.contract.registry import Operation, OperationRegistry
from home_transfer.contract.result import Failure, Result, Success

__all__ = [
    "CONTRACT_NAME",
    "DEFAULT_RECORD",
    "Failure",
    "Operation",
    "OperationRegistry",
    "Result",
    "Success",
    "add_new_record",
    "change_owner",
    "contract",
    "get_record_history",
    "init_ledger",
    "query_by_id",
]
