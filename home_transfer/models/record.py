"""Home ownership record and its canonical ledger encoding."""

import json
from dataclasses import asdict, dataclass, fields

from home_transfer.exceptions import InvalidArgumentError, MalformedRecordError

# Field order of the record; the encoded form sorts keys by name instead.
FIELD_NAMES = ("id", "name", "area", "owner", "value")


@dataclass(frozen=True)
class HomeRecord:
    """Ownership of one identified home.

    All fields are opaque strings stored exactly as supplied. ``value`` is an
    appraisal value kept as text and never parsed as a number. Records are
    immutable; changing the owner means building a new record with
    :meth:`with_owner` and writing it under the same key.
    """

    id: str
    name: str
    area: str
    owner: str
    value: str

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str):
                raise InvalidArgumentError(f.name, "must be a string")
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise InvalidArgumentError(f.name, "must be valid UTF-8 text") from exc

    def with_owner(self, owner: str) -> "HomeRecord":
        """Return a copy of this record owned by ``owner``."""
        return HomeRecord(
            id=self.id,
            name=self.name,
            area=self.area,
            owner=owner,
            value=self.value,
        )

    def to_dict(self) -> dict[str, str]:
        """Field name to value mapping."""
        return asdict(self)

    def encode(self) -> bytes:
        """Serialize to the bytes stored as the ledger value.

        Compact JSON with keys sorted by name, so equal records always
        produce identical bytes.
        """
        return json.dumps(
            self.to_dict(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        ).encode("utf-8")

    @classmethod
    def decode(cls, data: bytes, key: str | None = None) -> "HomeRecord":
        """Parse ledger bytes back into a record.

        Parameters
        ----------
        data : bytes
            Value read from the ledger.
        key : str | None
            Ledger key the value was read from, reported in errors.

        Returns
        -------
        HomeRecord
            Decoded record.

        Raises
        ------
        MalformedRecordError
            If the bytes are not a JSON object carrying all five fields as
            strings. Unknown extra keys are ignored.
        """
        try:
            payload = json.loads(data.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise MalformedRecordError(key, f"not valid UTF-8 ({exc.reason})") from exc
        except json.JSONDecodeError as exc:
            raise MalformedRecordError(key, f"not valid JSON ({exc.msg})") from exc

        if not isinstance(payload, dict):
            raise MalformedRecordError(key, f"expected an object, got {type(payload).__name__}")

        missing = [name for name in FIELD_NAMES if name not in payload]
        if missing:
            raise MalformedRecordError(key, f"missing fields: {', '.join(missing)}")

        try:
            return cls(**{name: payload[name] for name in FIELD_NAMES})
        except InvalidArgumentError as exc:
            raise MalformedRecordError(key, f"field '{exc.field}' {exc.reason}") from exc
