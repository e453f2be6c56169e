"""Oracle adapter - driver (oracledb) and dialect."""

from __future__ import annotations

from typing import Any

from micro_orm.adapters.base import BaseDriver, before_lock, row_count
from micro_orm.core.connection import ConnectionConfig
from micro_orm.core.exceptions import AdapterError


def _build_dsn(config: ConnectionConfig) -> str:
    """Build an Oracle DSN string from config fields (host:port/database)."""
    return f"{config.host}:{config.port}/{config.database}"


def _make_row_factory(cursor: Any) -> Any:
    """Create a row factory that converts tuples to dicts using column names."""
    columns = [col[0].lower() for col in cursor.description]

    def factory(*args: Any) -> dict[str, Any]:
        return dict(zip(columns, args, strict=True))

    return factory


class OracleDialect:
    """Oracle 12c+ clause syntax (row limiting clause)."""

    def for_update(self, sql: str) -> str:
        return f"{sql} FOR UPDATE"

    def top(self, sql: str, count: int) -> str:
        return before_lock(sql, f"FETCH FIRST {int(count)} ROWS ONLY")

    def limit(self, sql: str, start: int, end: int) -> str:
        count = row_count(start, end)
        return before_lock(sql, f"OFFSET {int(start)} ROWS FETCH NEXT {count} ROWS ONLY")


class OracleDriver(BaseDriver):
    """Synchronous Oracle driver using oracledb."""

    paramstyle = "named"

    @property
    def dialect(self) -> OracleDialect:
        return OracleDialect()

    def _connect(self) -> Any:
        import oracledb

        return oracledb.connect(
            user=self.config.user, password=self.config.password, dsn=_build_dsn(self.config)
        )

    def _run(self, sql: str, params: dict[str, Any] | None) -> Any:
        cursor = super()._run(sql, params)
        if cursor.description is not None:
            cursor.rowfactory = _make_row_factory(cursor)
        return cursor

    def last_insert_id(self) -> Any:
        raise AdapterError(
            "Oracle has no session-wide last insert id; "
            "configure a primary key seed function on the mapper"
        )
