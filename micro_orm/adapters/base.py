"""Shared driver machinery.

BaseDriver owns one DB-API connection. Outside an explicit transaction every
statement is committed as soon as it runs; inside one, commit and rollback
are left to the caller.
"""

from __future__ import annotations

import logging
from typing import Any

from micro_orm.core.connection import ConnectionConfig
from micro_orm.core.exceptions import InvalidArgumentError, TransactionStateError
from micro_orm.core.params import normalize_params

logger = logging.getLogger(__name__)

_FOR_UPDATE = " FOR UPDATE"


def rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and dict-like rows from different drivers.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    # Check if rows are already dict-like (e.g., psycopg dict_row, MySQL dict cursor)
    first_row = rows[0]
    if isinstance(first_row, dict):
        return [dict(row) for row in rows]

    # Tuple-like rows, zip with columns
    return [dict(zip(columns, row, strict=True)) for row in rows]


def row_count(start: int, end: int) -> int:
    """Number of rows covered by the inclusive range start..end."""
    if start < 0 or end < start:
        raise InvalidArgumentError(f"Invalid row range {start}..{end}")
    return end - start + 1


def before_lock(sql: str, clause: str) -> str:
    """Append *clause*, keeping a trailing FOR UPDATE last."""
    if sql.endswith(_FOR_UPDATE):
        return f"{sql[: -len(_FOR_UPDATE)]} {clause}{_FOR_UPDATE}"
    return f"{sql} {clause}"


class BaseDriver:
    """Common DB-API driver. Subclasses provide ``_connect`` and ``dialect``."""

    paramstyle = "named"

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._connection: Any = None
        self._in_transaction = False
        self._last_insert_id: Any = None

    @property
    def uri(self) -> str:
        return self.config.uri

    @property
    def dialect(self) -> Any:
        raise NotImplementedError

    @property
    def connection(self) -> Any:
        """The DB-API connection, opened on first use."""
        if self._connection is None:
            self._connection = self._connect()
        return self._connection

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def _connect(self) -> Any:
        raise NotImplementedError

    def _cursor(self) -> Any:
        return self.connection.cursor()

    def _run(self, sql: str, params: dict[str, Any] | None) -> Any:
        sql = normalize_params(sql, self.paramstyle)
        logger.debug("Executing on %s: %s (params: %s)", self.uri, sql, sorted(params or {}))
        cursor = self._cursor()
        cursor.execute(sql, params or {})
        return cursor

    def _autocommit(self) -> None:
        if not self._in_transaction:
            self.connection.commit()

    def fetch_all(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        cursor = self._run(sql, params)
        rows = rows_to_dicts(cursor)
        self._autocommit()
        return rows

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> int:
        cursor = self._run(sql, params)
        self._last_insert_id = getattr(cursor, "lastrowid", None)
        self._autocommit()
        return int(cursor.rowcount)

    def last_insert_id(self) -> Any:
        return self._last_insert_id

    def begin_transaction(self) -> None:
        if self._in_transaction:
            raise TransactionStateError("active", "begin")
        # DB-API connections open a transaction implicitly on the next statement
        self._in_transaction = True

    def commit_transaction(self) -> None:
        if not self._in_transaction:
            raise TransactionStateError("idle", "commit")
        self._in_transaction = False
        self.connection.commit()

    def rollback_transaction(self) -> None:
        if not self._in_transaction:
            raise TransactionStateError("idle", "rollback")
        self._in_transaction = False
        self.connection.rollback()

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            self._in_transaction = False
