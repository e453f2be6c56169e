"""MySQL adapter - driver (mysql-connector-python) and dialect."""

from __future__ import annotations

from typing import Any

from micro_orm.adapters.base import BaseDriver, before_lock, row_count


class MysqlDialect:
    """MySQL clause syntax."""

    def for_update(self, sql: str) -> str:
        return f"{sql} FOR UPDATE"

    def top(self, sql: str, count: int) -> str:
        return before_lock(sql, f"LIMIT {int(count)}")

    def limit(self, sql: str, start: int, end: int) -> str:
        return before_lock(sql, f"LIMIT {int(start)}, {row_count(start, end)}")


class MysqlDriver(BaseDriver):
    """Synchronous MySQL driver using mysql-connector-python."""

    paramstyle = "pyformat"

    @property
    def dialect(self) -> MysqlDialect:
        return MysqlDialect()

    def _connect(self) -> Any:
        import mysql.connector

        return mysql.connector.connect(
            host=self.config.host,
            port=self.config.port,
            user=self.config.user,
            password=self.config.password,
            database=self.config.database,
            **self.config.extra,
        )

    def _cursor(self) -> Any:
        return self.connection.cursor(dictionary=True)
