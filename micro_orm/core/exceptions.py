"""micro-orm exception hierarchy.

Errors raised by the database driver itself (connectivity, SQL syntax,
integrity violations) are never wrapped: they reach the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class MicroOrmError(Exception):
    """Base exception for all micro-orm errors."""


# --- Query composition ---


class QueryError(MicroOrmError):
    """Base for query building errors."""


class InvalidArgumentError(QueryError):
    """Raised on malformed query composition."""


class MissingAliasError(InvalidArgumentError):
    """Raised when a sub-query is used as a field or join source without an alias."""

    def __init__(self, usage: str) -> None:
        self.usage = usage
        super().__init__(f"A sub-query used as {usage} requires an alias")


class UnsupportedSubQueryFilterError(InvalidArgumentError):
    """Raised when a joined sub-query carries bound parameters."""

    def __init__(self, alias: str, param_names: list[str]) -> None:
        self.alias = alias
        self.param_names = param_names
        super().__init__(
            f"Joined sub-query '{alias}' cannot carry parameters: {param_names}"
        )


class ConflictingClauseError(InvalidArgumentError):
    """Raised when two mutually exclusive clauses are combined."""

    def __init__(self, clause: str, existing: str) -> None:
        self.clause = clause
        self.existing = existing
        super().__init__(f"Cannot use {clause} on a query that already has {existing}")


class MissingDialectHelperError(InvalidArgumentError):
    """Raised when a dialect-specific clause is built without a dialect helper."""

    def __init__(self, clause: str) -> None:
        self.clause = clause
        super().__init__(f"{clause} requires a dialect helper to build")


# --- Execution ---


class ExecutionError(MicroOrmError):
    """Base for errors raised while interpreting driver results."""


class AmbiguousResultError(ExecutionError):
    """Raised when a result set does not reduce to the expected shape."""


class MultipleRowsError(AmbiguousResultError):
    """Raised when a single-row lookup matches more than one row."""

    def __init__(self, table: str, row_count: int) -> None:
        self.table = table
        self.row_count = row_count
        super().__init__(
            f"Lookup on '{table}' returned {row_count} rows (expected 0 or 1)"
        )


# --- Mapping ---


class MappingError(MicroOrmError):
    """Base for mapping errors."""


class ColumnMismatchError(MappingError):
    """Raised when an entity cannot be constructed from row columns."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: {missing_fields}")


# --- Repository ---


class RepositoryError(MicroOrmError):
    """Base for repository persistence errors."""


class RepositoryReadOnlyError(RepositoryError):
    """Raised when a write is attempted on a read-only repository."""

    def __init__(self, table: str, action: str) -> None:
        self.table = table
        self.action = action
        super().__init__(f"Repository for '{table}' is read-only: cannot {action}")


class UpdateConstraintViolation(RepositoryError):
    """Raised when a save does not satisfy its update constraint."""

    def __init__(self, message: str, field_name: str | None = None) -> None:
        self.field_name = field_name
        super().__init__(message)


# --- Transaction ---


class TransactionError(MicroOrmError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(
        self, current_state: str, attempted_action: str, detail: str | None = None
    ) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(
            detail or f"Cannot {attempted_action} transaction in state '{current_state}'"
        )


class ConflictingConnectionError(TransactionStateError):
    """Raised when a connection key is registered twice with different drivers."""

    def __init__(self, uri: str, existing: Any) -> None:
        self.uri = uri
        self.existing = existing
        super().__init__(
            "registered",
            "add connection",
            f"Connection '{uri}' is already registered with a different driver",
        )


# --- Adapter ---


class AdapterError(MicroOrmError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""
