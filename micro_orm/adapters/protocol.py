"""Driver and dialect-helper protocols.

Every adapter module MUST implement these protocols. The repository and the
transaction manager only talk to a backend through them.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DialectHelper(Protocol):
    """Translates logical row-limiting and locking clauses into a dialect."""

    def for_update(self, sql: str) -> str:
        """Mark *sql* for row locking."""
        ...

    def top(self, sql: str, count: int) -> str:
        """Restrict *sql* to its first *count* rows."""
        ...

    def limit(self, sql: str, start: int, end: int) -> str:
        """Restrict *sql* to rows *start* through *end* (inclusive, zero-based)."""
        ...


@runtime_checkable
class Driver(Protocol):
    """Synchronous database driver protocol."""

    @property
    def uri(self) -> str:
        """Normalized connection key identifying this driver."""
        ...

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    @property
    def dialect(self) -> DialectHelper:
        """Dialect helper for this backend."""
        ...

    def fetch_all(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Execute a query and return all rows as dicts."""
        ...

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> int:
        """Execute a write statement and return the affected row count."""
        ...

    def last_insert_id(self) -> Any:
        """Return the key generated by the last INSERT."""
        ...

    def begin_transaction(self) -> None:
        ...

    def commit_transaction(self) -> None:
        ...

    def rollback_transaction(self) -> None:
        ...

    def close(self) -> None:
        """Close the underlying connection."""
        ...
