"""Shared test fixtures.

The users / info tables and their seed rows are used by the repository and
integration tests.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import pytest

from micro_orm.adapters.sqlite import SqliteDialect, SqliteDriver
from micro_orm.core.connection import ConnectionConfig
from micro_orm.core.observer import ORMSubject
from micro_orm.mapping.field import FieldMapping
from micro_orm.mapping.mapper import Mapper

# --- Test entities ---


@dataclass
class Users:
    id: int | None = None
    name: Any = None
    createdate: str | None = None


@dataclass
class UsersMap:
    id: int | None = None
    name: Any = None
    createdate: str | None = None
    year: Any = None


@dataclass
class Info:
    id: int | None = None
    iduser: int | None = None
    value: Any = None


_SCHEMA = [
    "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name VARCHAR(45), "
    "createdate DATETIME)",
    "INSERT INTO users (name, createdate) VALUES ('John Doe', '2017-01-02')",
    "INSERT INTO users (name, createdate) VALUES ('Jane Doe', '2017-01-04')",
    "INSERT INTO users (name, createdate) VALUES ('JG', '1974-01-26')",
    "CREATE TABLE info (id INTEGER PRIMARY KEY AUTOINCREMENT, iduser INTEGER, "
    "property NUMBER(10,2))",
    "INSERT INTO info (iduser, property) VALUES (1, 30.4)",
    "INSERT INTO info (iduser, property) VALUES (1, 1250.96)",
    "INSERT INTO info (iduser, property) VALUES (3, '3.5')",
]


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:")


@pytest.fixture
def sqlite_driver(sqlite_config: ConnectionConfig) -> Iterator[SqliteDriver]:
    driver = SqliteDriver(sqlite_config)
    yield driver
    driver.close()


@pytest.fixture
def seeded_driver(sqlite_driver: SqliteDriver) -> SqliteDriver:
    """SQLite driver with the users and info tables created and seeded."""
    for statement in _SCHEMA:
        sqlite_driver.execute(statement)
    return sqlite_driver


@pytest.fixture
def dialect() -> SqliteDialect:
    return SqliteDialect()


@pytest.fixture
def subject() -> ORMSubject:
    return ORMSubject()


@pytest.fixture
def user_mapper() -> Mapper[Users]:
    return Mapper(Users, "users", "id")


@pytest.fixture
def info_mapper() -> Mapper[Info]:
    mapper = Mapper(Info, "info", "id")
    mapper.add_field_mapping(FieldMapping.create("value").with_column("property"))
    return mapper
