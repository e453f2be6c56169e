"""Enumerations shared across the query, repository and adapter layers."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"


class JoinType(Enum):
    """SQL join kinds."""

    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    CROSS = "CROSS"


class ObserverEvent(Enum):
    """Write events dispatched to observers."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
