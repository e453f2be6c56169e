"""micro-orm - fluent SQL builders, entity mapping and repositories."""

from __future__ import annotations

from micro_orm.core.connection import ConnectionConfig, load_driver
from micro_orm.core.enums import DatabaseBackend, JoinType, ObserverEvent
from micro_orm.core.exceptions import (
    AdapterError,
    AmbiguousResultError,
    ColumnMismatchError,
    ConflictingClauseError,
    ConflictingConnectionError,
    ConnectionError,  # noqa: A004
    ExecutionError,
    InvalidArgumentError,
    MappingError,
    MicroOrmError,
    MissingAliasError,
    MissingDialectHelperError,
    MultipleRowsError,
    QueryError,
    RepositoryError,
    RepositoryReadOnlyError,
    TransactionError,
    TransactionStateError,
    UnsupportedSubQueryFilterError,
    UpdateConstraintViolation,
)
from micro_orm.core.literal import Literal
from micro_orm.core.observer import ObserverData, ObserverProcessor, ORMSubject
from micro_orm.core.transaction import TransactionManager
from micro_orm.mapping import FieldMapping, Mapper, NoTransform, Transform, WriteNever
from micro_orm.query import (
    DeleteBuilder,
    InsertBuilder,
    Query,
    QueryBasic,
    Recursive,
    SqlStatement,
    Union,
    UpdateBuilder,
)
from micro_orm.repository import Repository, UpdateConstraint

__all__ = [
    # Connection
    "ConnectionConfig",
    "load_driver",
    # Query
    "Literal",
    "SqlStatement",
    "QueryBasic",
    "Query",
    "Union",
    "Recursive",
    "InsertBuilder",
    "UpdateBuilder",
    "DeleteBuilder",
    # Mapping
    "Mapper",
    "FieldMapping",
    "NoTransform",
    "Transform",
    "WriteNever",
    # Repository
    "Repository",
    "UpdateConstraint",
    # Observers
    "ORMSubject",
    "ObserverData",
    "ObserverProcessor",
    # Transaction
    "TransactionManager",
    # Enums
    "DatabaseBackend",
    "JoinType",
    "ObserverEvent",
    # Exceptions
    "MicroOrmError",
    "QueryError",
    "InvalidArgumentError",
    "MissingAliasError",
    "UnsupportedSubQueryFilterError",
    "ConflictingClauseError",
    "MissingDialectHelperError",
    "ExecutionError",
    "AmbiguousResultError",
    "MultipleRowsError",
    "MappingError",
    "ColumnMismatchError",
    "RepositoryError",
    "RepositoryReadOnlyError",
    "UpdateConstraintViolation",
    "TransactionError",
    "TransactionStateError",
    "ConflictingConnectionError",
    "AdapterError",
    "ConnectionError",
]
