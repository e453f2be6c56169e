"""SQLite adapter - driver (sqlite3 stdlib) and dialect."""

from __future__ import annotations

import logging
import sqlite3

from micro_orm.adapters.base import BaseDriver, before_lock, row_count

logger = logging.getLogger(__name__)


class SqliteDialect:
    """SQLite clause syntax. SQLite has no row locks, so FOR UPDATE is dropped."""

    def for_update(self, sql: str) -> str:
        logger.debug("SQLite does not support FOR UPDATE; clause ignored")
        return sql

    def top(self, sql: str, count: int) -> str:
        return before_lock(sql, f"LIMIT {int(count)}")

    def limit(self, sql: str, start: int, end: int) -> str:
        return before_lock(sql, f"LIMIT {row_count(start, end)} OFFSET {int(start)}")


class SqliteDriver(BaseDriver):
    """Synchronous SQLite driver using stdlib sqlite3."""

    paramstyle = "named"

    @property
    def dialect(self) -> SqliteDialect:
        return SqliteDialect()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.config.database, **self.config.extra)
