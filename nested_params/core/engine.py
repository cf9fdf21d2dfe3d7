"""Statement execution engine.

The Engine executes SQL through the adapter, converts rows to dicts and
offers the single-record write primitives (insert, update, delete) the
repository builds on. Inside an open transaction every statement runs on the
transaction's connection and nothing is committed until the transaction
ends; outside one, each write commits on its own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from nested_params.core.connection import ConnectionConfig, ConnectionManager
from nested_params.core.exceptions import ExecutionError
from nested_params.core.transaction import TransactionManager

log = logging.getLogger(__name__)


def _rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and mapping rows from different adapters.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    first_row = rows[0]
    if isinstance(first_row, dict):
        return [dict(row) for row in rows]

    return [dict(zip(columns, row, strict=True)) for row in rows]


def quote(identifier: str) -> str:
    """Quote a (pre-validated) table or column name."""
    return '"' + identifier.replace('"', '""') + '"'


class Engine:
    """Synchronous statement execution engine."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._echo = connection_manager.config.echo
        self._current: TransactionManager | None = None

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Engine:
        """Create an Engine from a ConnectionConfig."""
        return cls(ConnectionManager(config))

    @property
    def adapter(self) -> Any:
        return self._connection_manager.adapter

    @property
    def in_transaction(self) -> bool:
        return self._current is not None

    def transaction(self) -> TransactionManager:
        """Create a transaction context manager.

        Joins the currently open transaction if there is one.
        """
        if self._current is not None:
            return TransactionManager(self, self._current.connection, outer=self._current)
        connection = self._connection_manager.acquire()
        return TransactionManager(self, connection)

    def _begin(self, tx: TransactionManager) -> None:
        self._current = tx

    def _end(self, tx: TransactionManager) -> None:
        if self._current is tx:
            self._current = None
            self._connection_manager.release(tx.connection)

    @contextmanager
    def _cursor(self, sql: str, params: dict[str, Any] | None) -> Iterator[Any]:
        """Execute *sql* and yield the cursor, committing when outside a transaction."""
        if self._echo:
            log.debug("%s %r", sql, params or {})
        if self._current is not None:
            self._current.check_active()
            try:
                cursor = self.adapter.execute(self._current.connection, sql, params)
            except Exception as e:
                raise ExecutionError(sql, str(e)) from e
            yield cursor
            return

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = self.adapter.execute(conn, sql, params)
            except Exception as e:
                conn.rollback()
                raise ExecutionError(sql, str(e)) from e
            yield cursor
            conn.commit()

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> int:
        """Execute a write statement. Returns affected row count."""
        with self._cursor(sql, params) as cursor:
            return int(cursor.rowcount)

    def fetch_one(self, sql: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """Fetch the first row, or None if nothing matches."""
        with self._cursor(sql, params) as cursor:
            rows = _rows_to_dicts(cursor)
        if not rows:
            return None
        return rows[0]

    def fetch_all(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Fetch all matching rows."""
        with self._cursor(sql, params) as cursor:
            return _rows_to_dicts(cursor)

    def fetch_scalar(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        """Fetch a single scalar value (first column of first row)."""
        with self._cursor(sql, params) as cursor:
            row = cursor.fetchone()
        if row is None:
            return None
        if isinstance(row, dict):
            return next(iter(row.values()))
        return row[0]

    def insert(self, table: str, values: dict[str, Any]) -> int:
        """Insert one row and return its generated identity."""
        if values:
            columns = ", ".join(quote(name) for name in values)
            placeholders = ", ".join(f":{name}" for name in values)
            sql = f"INSERT INTO {quote(table)} ({columns}) VALUES ({placeholders})"
        else:
            sql = f"INSERT INTO {quote(table)} DEFAULT VALUES"
        with self._cursor(sql, values) as cursor:
            return self.adapter.last_insert_id(cursor)

    def update(self, table: str, key: str, identity: Any, values: dict[str, Any]) -> int:
        """Overwrite *values* on the row whose *key* column equals *identity*."""
        if not values:
            return 0
        assignments = ", ".join(f"{quote(name)} = :{name}" for name in values)
        sql = f"UPDATE {quote(table)} SET {assignments} WHERE {quote(key)} = :__identity"
        return self.execute(sql, {**values, "__identity": identity})

    def delete(self, table: str, key: str, identity: Any) -> int:
        """Delete the row whose *key* column equals *identity*."""
        sql = f"DELETE FROM {quote(table)} WHERE {quote(key)} = :__identity"
        return self.execute(sql, {"__identity": identity})

    def close(self) -> None:
        self._connection_manager.close_pool()
