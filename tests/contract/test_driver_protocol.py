"""Contract tests for driver and dialect protocol compliance."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from micro_orm.adapters.mysql import MysqlDialect, MysqlDriver
from micro_orm.adapters.oracle import OracleDialect, OracleDriver
from micro_orm.adapters.postgresql import PostgresqlDialect, PostgresqlDriver
from micro_orm.adapters.protocol import DialectHelper, Driver
from micro_orm.adapters.sqlite import SqliteDialect, SqliteDriver
from micro_orm.core.connection import ConnectionConfig
from micro_orm.core.exceptions import TransactionStateError

SERVER_CONFIG = ConnectionConfig(
    driver="postgresql", host="localhost", port=5432, user="app", database="test"
)


@pytest.mark.parametrize(
    "dialect", [SqliteDialect(), PostgresqlDialect(), MysqlDialect(), OracleDialect()]
)
def test_dialect_implements_protocol(dialect: object) -> None:
    assert isinstance(dialect, DialectHelper)


@pytest.mark.parametrize(
    ("driver_cls", "paramstyle"),
    [
        (PostgresqlDriver, "pyformat"),
        (MysqlDriver, "pyformat"),
        (OracleDriver, "named"),
    ],
)
def test_server_driver_implements_protocol(driver_cls: type, paramstyle: str) -> None:
    driver = driver_cls(SERVER_CONFIG)
    assert isinstance(driver, Driver)
    assert driver.paramstyle == paramstyle
    assert isinstance(driver.dialect, DialectHelper)


class TestSqliteDriverProtocol:
    def test_implements_protocol(self, sqlite_driver: SqliteDriver) -> None:
        assert isinstance(sqlite_driver, Driver)
        assert sqlite_driver.paramstyle == "named"
        assert isinstance(sqlite_driver.dialect, SqliteDialect)

    def test_lifecycle(self, sqlite_driver: SqliteDriver) -> None:
        sqlite_driver.execute("CREATE TABLE t (id INTEGER PRIMARY KEY AUTOINCREMENT, v TEXT)")

        assert sqlite_driver.execute("INSERT INTO t (v) VALUES (:v)", {"v": "a"}) == 1
        assert sqlite_driver.last_insert_id() == 1
        assert sqlite_driver.fetch_all("SELECT id, v FROM t") == [{"id": 1, "v": "a"}]

        sqlite_driver.close()
        assert not sqlite_driver.in_transaction

    def test_rollback(self, sqlite_driver: SqliteDriver) -> None:
        sqlite_driver.execute("CREATE TABLE t (v TEXT)")

        sqlite_driver.begin_transaction()
        sqlite_driver.execute("INSERT INTO t (v) VALUES ('a')")
        sqlite_driver.rollback_transaction()

        assert sqlite_driver.fetch_all("SELECT * FROM t") == []

    def test_commit(self, sqlite_driver: SqliteDriver) -> None:
        sqlite_driver.execute("CREATE TABLE t (v TEXT)")

        sqlite_driver.begin_transaction()
        assert sqlite_driver.in_transaction
        sqlite_driver.execute("INSERT INTO t (v) VALUES ('a')")
        sqlite_driver.commit_transaction()

        assert sqlite_driver.fetch_all("SELECT v FROM t") == [{"v": "a"}]

    def test_state_errors(self, sqlite_driver: SqliteDriver) -> None:
        with pytest.raises(TransactionStateError):
            sqlite_driver.commit_transaction()

        sqlite_driver.begin_transaction()
        with pytest.raises(TransactionStateError):
            sqlite_driver.begin_transaction()


@pytest.mark.parametrize("driver_cls", [PostgresqlDriver, MysqlDriver])
def test_pyformat_driver_escapes_percent_signs(driver_cls: type) -> None:
    driver = driver_cls(SERVER_CONFIG)
    driver._connection = MagicMock()
    cursor = driver._connection.cursor.return_value
    cursor.rowcount = 2

    count = driver.execute("DELETE FROM users WHERE name LIKE 'J%' AND id > :id", {"id": 1})

    assert count == 2
    cursor.execute.assert_called_once_with(
        "DELETE FROM users WHERE name LIKE 'J%%' AND id > %(id)s", {"id": 1}
    )
    driver._connection.commit.assert_called_once_with()
