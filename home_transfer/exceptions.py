"""Custom exception hierarchy for home-transfer."""


class HomeTransferError(Exception):
    """Base exception for all home-transfer errors."""

    code = "HOME_TRANSFER_ERROR"


class RecordNotFoundError(HomeTransferError):
    """Raised when a read or update targets a key with no stored value."""

    code = "HOME_NOT_FOUND"

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Home {record_id} does not exist")
        self.record_id = record_id


class RecordAlreadyExistsError(HomeTransferError):
    """Raised when a create targets a key that already holds a value."""

    code = "HOME_ALREADY_EXISTS"

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Home {record_id} already exists")
        self.record_id = record_id


class MalformedRecordError(HomeTransferError):
    """Raised when stored bytes cannot be decoded into a home record."""

    code = "HOME_MALFORMED"

    def __init__(self, record_id: str | None, cause: str) -> None:
        super().__init__(f"Home {record_id} is malformed: {cause}")
        self.record_id = record_id
        self.cause = cause


class InvalidArgumentError(HomeTransferError):
    """Raised when a required input is missing, empty or of the wrong type."""

    code = "INVALID_ARGUMENT"

    def __init__(self, field: str, reason: str = "must be a non-empty string") -> None:
        super().__init__(f"Argument '{field}' {reason}")
        self.field = field
        self.reason = reason


class UnknownOperationError(HomeTransferError):
    """Raised when an operation name is not registered on the contract."""

    code = "UNKNOWN_OPERATION"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown operation: {name}")
        self.name = name


class LedgerError(HomeTransferError):
    """Raised when the ledger backend fails to read, write or commit."""

    code = "LEDGER_ERROR"


class TransactionConflictError(LedgerError):
    """Raised when a key read by a transaction changed before it committed."""

    code = "MVCC_READ_CONFLICT"

    def __init__(self, key: str) -> None:
        super().__init__(f"Key {key} was modified by a concurrent transaction")
        self.key = key


class TransactionClosedError(LedgerError):
    """Raised when a committed or rolled-back transaction is used again."""

    code = "TRANSACTION_CLOSED"


class ConfigurationError(HomeTransferError):
    """Raised when configuration is invalid or missing."""

    code = "CONFIGURATION_ERROR"


class SinkError(HomeTransferError):
    """Raised when a sink operation fails."""

    code = "SINK_ERROR"
