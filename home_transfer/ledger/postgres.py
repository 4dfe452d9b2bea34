"""PostgreSQL-backed ledger: current state table plus append-only history."""

from __future__ import annotations

import logging
from datetime import datetime

import psycopg
from psycopg import errors as pg_errors

from home_transfer.config import PostgresConfig
from home_transfer.exceptions import LedgerError, TransactionConflictError
from home_transfer.ledger.base import BaseLedger, BaseTransaction

logger = logging.getLogger(__name__)

SCHEMA_SQL = (
    """
    CREATE TABLE IF NOT EXISTS ledger_state (
        key TEXT PRIMARY KEY,
        value BYTEA NOT NULL,
        version INTEGER NOT NULL,
        tx_id TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ledger_history (
        key TEXT NOT NULL,
        version INTEGER NOT NULL,
        value BYTEA NOT NULL,
        tx_id TEXT NOT NULL,
        committed_at TIMESTAMPTZ NOT NULL,
        PRIMARY KEY (key, version)
    )
    """,
)

SELECT_STATE_SQL = "SELECT value FROM ledger_state WHERE key = %s"
SELECT_HISTORY_SQL = "SELECT value FROM ledger_history WHERE key = %s ORDER BY version"
UPSERT_STATE_SQL = """
    INSERT INTO ledger_state (key, value, version, tx_id)
    VALUES (%s, %s, 1, %s)
    ON CONFLICT (key) DO UPDATE
    SET value = EXCLUDED.value,
        version = ledger_state.version + 1,
        tx_id = EXCLUDED.tx_id
    RETURNING version
"""
INSERT_HISTORY_SQL = """
    INSERT INTO ledger_history (key, version, value, tx_id, committed_at)
    VALUES (%s, %s, %s, %s, clock_timestamp())
"""


class PostgresLedger(BaseLedger):
    """Ledger stored in PostgreSQL.

    Each transaction runs on its own connection at SERIALIZABLE isolation, so
    the database provides snapshot reads and rejects conflicting commits.
    """

    def __init__(self, config: PostgresConfig | str) -> None:
        super().__init__()
        self.conninfo = config.connection_string if isinstance(config, PostgresConfig) else config

    def connect(self) -> psycopg.Connection:
        try:
            return psycopg.connect(self.conninfo)
        except psycopg.Error as exc:
            raise LedgerError(f"Cannot connect to PostgreSQL: {exc}") from exc

    def ensure_schema(self) -> None:
        """Create the ledger tables if they do not exist."""
        conn = self.connect()
        try:
            with conn.cursor() as cur:
                for statement in SCHEMA_SQL:
                    cur.execute(statement)
            conn.commit()
            logger.info("Ledger schema ready")
        except psycopg.Error as exc:
            conn.rollback()
            raise LedgerError(f"Cannot create ledger schema: {exc}") from exc
        finally:
            conn.close()

    def begin(
        self,
        tx_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> PostgresTransaction:
        conn = self.connect()
        conn.isolation_level = psycopg.IsolationLevel.SERIALIZABLE
        return PostgresTransaction(self, conn, tx_id=tx_id, timestamp=timestamp)


class PostgresTransaction(BaseTransaction):
    """Transaction bound to one PostgreSQL connection."""

    def __init__(
        self,
        ledger: PostgresLedger,
        conn: psycopg.Connection,
        tx_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        super().__init__(ledger, tx_id=tx_id, timestamp=timestamp)
        self.conn = conn

    def _read(self, key: str) -> bytes | None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(SELECT_STATE_SQL, (key,))
                row = cur.fetchone()
        except psycopg.Error as exc:
            raise LedgerError(f"Cannot read key {key}: {exc}") from exc
        return bytes(row[0]) if row else None

    def _read_history(self, key: str) -> list[bytes]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(SELECT_HISTORY_SQL, (key,))
                rows = cur.fetchall()
        except psycopg.Error as exc:
            raise LedgerError(f"Cannot read history of key {key}: {exc}") from exc
        return [bytes(row[0]) for row in rows]

    def _apply(self) -> None:
        try:
            with self.conn.cursor() as cur:
                for key, value in self._writes.items():
                    cur.execute(UPSERT_STATE_SQL, (key, value, self.tx_id))
                    version = cur.fetchone()[0]
                    cur.execute(
                        INSERT_HISTORY_SQL,
                        (key, version, value, self.tx_id),
                    )
            self.conn.commit()
        except pg_errors.SerializationFailure as exc:
            self.conn.rollback()
            raise TransactionConflictError(", ".join(self._writes) or "*") from exc
        except psycopg.Error as exc:
            self.conn.rollback()
            raise LedgerError(f"Commit of tx {self.tx_id} failed: {exc}") from exc
        finally:
            self.conn.close()

    def _discard(self) -> None:
        try:
            self.conn.rollback()
        finally:
            self.conn.close()
