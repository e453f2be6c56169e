"""INSERT, UPDATE and DELETE builders.

INSERT values are bound as ``:column`` parameters and UPDATE assignments as
``:_set_column``, so an UPDATE filter may reuse a column name freely. Literal
values are written into the SQL text instead.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from micro_orm.core.exceptions import InvalidArgumentError
from micro_orm.core.params import merge_params
from micro_orm.query.select import Query
from micro_orm.query.statement import (
    SqlStatement,
    WhereClause,
    finalize,
    make_where,
    render_where,
)

if TYPE_CHECKING:
    from micro_orm.adapters.protocol import DialectHelper, Driver

_NON_WORD = re.compile(r"\W")


def _param_name(column: str) -> str:
    name = _NON_WORD.sub("_", column)
    return f"_{name}" if name[:1].isdigit() else name


class _WriteBuilder:
    def __init__(self) -> None:
        self._table: str | None = None

    def table(self, table: str) -> Self:
        self._table = table
        return self

    @property
    def table_name(self) -> str:
        if not self._table:
            raise InvalidArgumentError(f"{type(self).__name__} requires a table")
        return self._table

    def build(self, dialect: DialectHelper | None = None) -> SqlStatement:
        raise NotImplementedError

    def build_and_execute(self, driver: Driver, params: Mapping[str, Any] | None = None) -> int:
        """Build with *driver*'s dialect, execute, and return the affected row count."""
        statement = self.build(driver.dialect)
        return driver.execute(statement.sql, merge_params(statement.params, params or {}))


class _FilteredWriteBuilder(_WriteBuilder):
    def __init__(self) -> None:
        super().__init__()
        self._where: list[WhereClause] = []

    def where(self, filter: str, params: Mapping[str, Any] | None = None) -> Self:
        self._where.append(make_where(filter, params))
        return self

    @property
    def where_params(self) -> dict[str, Any]:
        return render_where(self._where)[1]

    def convert(self) -> Query:
        """A SELECT over the same table and filters, e.g. to preview affected rows."""
        query = Query().table(self.table_name)
        query._where = list(self._where)
        return query


class InsertBuilder(_WriteBuilder):
    """``INSERT INTO table (a, b) VALUES (:a, :b)``."""

    def __init__(self) -> None:
        super().__init__()
        self._values: dict[str, Any] = {}

    def field(self, column: str, value: Any) -> Self:
        self._values[column] = value
        return self

    def fields(self, values: Mapping[str, Any]) -> Self:
        self._values.update(values)
        return self

    def build(self, dialect: DialectHelper | None = None) -> SqlStatement:
        if not self._values:
            raise InvalidArgumentError(f"Nothing to insert into '{self.table_name}'")
        names = {column: _param_name(column) for column in self._values}
        columns = ", ".join(self._values)
        placeholders = ", ".join(f":{names[column]}" for column in self._values)
        params = {names[column]: value for column, value in self._values.items()}
        sql = f"INSERT INTO {self.table_name} ({columns}) VALUES ({placeholders})"
        return finalize(sql, params)


class UpdateBuilder(_FilteredWriteBuilder):
    """``UPDATE table SET a = :_set_a WHERE ...``.

    Example:
        UpdateBuilder().table("users").set("name", "Jane").where("id = :id", {"id": 2})
    """

    def __init__(self) -> None:
        super().__init__()
        self._values: dict[str, Any] = {}

    def set(self, column: str, value: Any) -> Self:
        self._values[column] = value
        return self

    def set_values(self, values: Mapping[str, Any]) -> Self:
        self._values.update(values)
        return self

    def build(self, dialect: DialectHelper | None = None) -> SqlStatement:
        if not self._values:
            raise InvalidArgumentError(f"Nothing to update in '{self.table_name}'")

        assignments: list[str] = []
        params: dict[str, Any] = {}
        for column, value in self._values.items():
            name = f"_set_{_param_name(column)}"
            assignments.append(f"{column} = :{name}")
            params[name] = value

        where_sql, where_params = render_where(self._where)

        sql = f"UPDATE {self.table_name} SET {', '.join(assignments)}{where_sql}"
        return finalize(sql, merge_params(params, where_params))


class DeleteBuilder(_FilteredWriteBuilder):
    """``DELETE FROM table WHERE ...``.

    Without any WHERE clause every row of the table is deleted.
    """

    @classmethod
    def from_builder(cls, builder: _FilteredWriteBuilder) -> DeleteBuilder:
        """A DELETE over the same table and filters as *builder*."""
        if isinstance(builder, DeleteBuilder):
            return builder
        delete = cls().table(builder.table_name)
        delete._where = list(builder._where)
        return delete

    def build(self, dialect: DialectHelper | None = None) -> SqlStatement:
        where_sql, params = render_where(self._where)
        return finalize(f"DELETE FROM {self.table_name}{where_sql}", params)
