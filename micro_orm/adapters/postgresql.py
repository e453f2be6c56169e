"""PostgreSQL adapter - driver (psycopg v3+) and dialect."""

from __future__ import annotations

from typing import Any

from micro_orm.adapters.base import BaseDriver, before_lock, row_count
from micro_orm.core.connection import ConnectionConfig


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlDialect:
    """PostgreSQL clause syntax. LIMIT/OFFSET must precede FOR UPDATE."""

    def for_update(self, sql: str) -> str:
        return f"{sql} FOR UPDATE"

    def top(self, sql: str, count: int) -> str:
        return before_lock(sql, f"LIMIT {int(count)}")

    def limit(self, sql: str, start: int, end: int) -> str:
        return before_lock(sql, f"LIMIT {row_count(start, end)} OFFSET {int(start)}")


class PostgresqlDriver(BaseDriver):
    """Synchronous PostgreSQL driver using psycopg (v3+)."""

    paramstyle = "pyformat"

    @property
    def dialect(self) -> PostgresqlDialect:
        return PostgresqlDialect()

    def _connect(self) -> Any:
        import psycopg
        import psycopg.rows

        return psycopg.connect(_build_conninfo(self.config), row_factory=psycopg.rows.dict_row)

    def last_insert_id(self) -> Any:
        rows = self.fetch_all("SELECT lastval() AS id")
        return rows[0]["id"] if rows else None
