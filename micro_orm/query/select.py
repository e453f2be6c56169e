"""SELECT builders.

QueryBasic covers projections, tables, joins, WHERE and an optional
recursive CTE. Query adds GROUP BY, ORDER BY and the dialect-specific
clauses (TOP, LIMIT, FOR UPDATE).

A query may embed another builder as a field, as its table, or as a joined
table. Embedded builders are built first; parameters are merged in
encounter order: recursive CTE, fields, tables and joins, then WHERE.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

from micro_orm.core.enums import JoinType
from micro_orm.core.exceptions import (
    ConflictingClauseError,
    InvalidArgumentError,
    MissingAliasError,
    MissingDialectHelperError,
    UnsupportedSubQueryFilterError,
)
from micro_orm.core.params import merge_params
from micro_orm.mapping.mapper import Mapper
from micro_orm.query.statement import (
    Buildable,
    SqlStatement,
    WhereClause,
    finalize,
    make_where,
    render_where,
)

if TYPE_CHECKING:
    from micro_orm.adapters.protocol import DialectHelper
    from micro_orm.query.recursive import Recursive


@dataclass(frozen=True)
class _Expression:
    """A raw SQL fragment: column, expression or table name."""

    sql: str
    alias: str | None = None


@dataclass(frozen=True)
class _SubQuery:
    """A nested builder; always aliased."""

    query: Buildable
    alias: str


_Source = _Expression | _SubQuery


@dataclass(frozen=True)
class _Join:
    source: _Source
    filter: str
    type: JoinType


def _source(item: str | Buildable, alias: str | None, usage: str) -> _Source:
    if isinstance(item, Buildable):
        if not alias:
            raise MissingAliasError(usage)
        return _SubQuery(query=item, alias=alias)
    return _Expression(sql=item, alias=alias or None)


def _render_table(
    source: _Source, dialect: DialectHelper | None, allow_params: bool
) -> tuple[str, dict[str, Any]]:
    if isinstance(source, _Expression):
        if source.alias and source.alias != source.sql:
            return f"{source.sql} as {source.alias}", {}
        return source.sql, {}

    sub = source.query.build(dialect)
    if sub.params and not allow_params:
        raise UnsupportedSubQueryFilterError(source.alias, list(sub.params))
    return f"({sub.sql}) as {source.alias}", sub.params


class QueryBasic:
    """SELECT with fields, table, joins and WHERE.

    Example:
        QueryBasic().table("info").where("iduser = :id", {"id": 3}).build()
    """

    def __init__(self) -> None:
        self._fields: list[_Source] = []
        self._table: _Source | None = None
        self._joins: list[_Join] = []
        self._where: list[WhereClause] = []
        self._recursive: Recursive | None = None

    # --- projection ---

    def field(self, field: str | Buildable | Mapper[Any], alias: str | None = None) -> Self:
        """Add a column, raw expression, sub-query (alias required) or mapper's fields."""
        if isinstance(field, Mapper):
            return self.fields_from_mapper(field)
        self._fields.append(_source(field, alias, "a field"))
        return self

    def fields(self, fields: Iterable[str | Buildable | Mapper[Any]]) -> Self:
        for item in fields:
            self.field(item)
        return self

    def fields_from_mapper(self, mapper: Mapper[Any]) -> Self:
        """Project every mapped column as ``table.column [as alias]``."""
        for mapping in mapper:
            self.field(f"{mapper.table}.{mapping.column_name}", mapping.field_alias)
        return self

    # --- sources ---

    def table(self, table: str | Buildable, alias: str | None = None) -> Self:
        self._table = _source(table, alias, "a table")
        return self

    def join(self, table: str | Buildable, filter: str, alias: str | None = None) -> Self:
        return self._add_join(table, filter, alias, JoinType.INNER)

    def left_join(self, table: str | Buildable, filter: str, alias: str | None = None) -> Self:
        return self._add_join(table, filter, alias, JoinType.LEFT)

    def right_join(self, table: str | Buildable, filter: str, alias: str | None = None) -> Self:
        return self._add_join(table, filter, alias, JoinType.RIGHT)

    def cross_join(self, table: str | Buildable, alias: str | None = None) -> Self:
        return self._add_join(table, "", alias, JoinType.CROSS)

    def _add_join(
        self, table: str | Buildable, filter: str, alias: str | None, join_type: JoinType
    ) -> Self:
        source = _source(table, alias, "a joined table")
        self._joins.append(_Join(source=source, filter=filter, type=join_type))
        return self

    def with_recursive(self, recursive: Recursive) -> Self:
        """Prefix the query with a recursive CTE; the table defaults to the CTE name."""
        self._recursive = recursive
        if self._table is None:
            self.table(recursive.name)
        return self

    # --- filtering ---

    def where(self, filter: str, params: Mapping[str, Any] | None = None) -> Self:
        """Add a filter; filters are joined with AND.

        Placeholders may be written as ``:name`` or ``[[name]]``.
        """
        self._where.append(make_where(filter, params))
        return self

    # --- rendering ---

    def _render_fields(self, dialect: DialectHelper | None) -> tuple[str, dict[str, Any]]:
        if not self._fields:
            return "*", {}

        parts: list[str] = []
        params: dict[str, Any] = {}
        for item in self._fields:
            if isinstance(item, _SubQuery):
                sub = item.query.build(dialect)
                parts.append(f"({sub.sql}) as {item.alias}")
                params = merge_params(params, sub.params)
            elif item.alias:
                parts.append(f"{item.sql} as {item.alias}")
            else:
                parts.append(item.sql)
        return ", ".join(parts), params

    def _render_tables(self, dialect: DialectHelper | None) -> tuple[str, dict[str, Any]]:
        if self._table is None:
            raise InvalidArgumentError("A table is required to build a SELECT")

        sql, params = _render_table(self._table, dialect, allow_params=True)
        for join in self._joins:
            table_sql, join_params = _render_table(join.source, dialect, allow_params=False)
            sql += f" {join.type.value} JOIN {table_sql}"
            if join.filter:
                sql += f" ON {join.filter}"
            params = merge_params(params, join_params)
        return sql, params

    def _render(self, dialect: DialectHelper | None) -> tuple[str, dict[str, Any]]:
        prefix = ""
        cte_params: dict[str, Any] = {}
        if self._recursive is not None:
            cte = self._recursive.build(dialect)
            prefix = cte.sql + " "
            cte_params = cte.params

        fields_sql, field_params = self._render_fields(dialect)
        tables_sql, table_params = self._render_tables(dialect)
        where_sql, where_params = render_where(self._where)

        sql = f"{prefix}SELECT {fields_sql} FROM {tables_sql}{where_sql}"
        return sql, merge_params(cte_params, field_params, table_params, where_params)

    def build(self, dialect: DialectHelper | None = None) -> SqlStatement:
        """Render the query; *dialect* is needed only for dialect-specific clauses."""
        sql, params = self._render(dialect)
        return finalize(sql, params)


class _Pagination:
    """ORDER BY, TOP and LIMIT shared by Query and Union."""

    def __init__(self) -> None:
        super().__init__()
        self._order_by: list[str] = []
        self._limit: tuple[int, int] | None = None
        self._top: int | None = None

    def order_by(self, fields: Iterable[str] | str) -> Self:
        self._order_by.extend([fields] if isinstance(fields, str) else fields)
        return self

    def limit(self, start: int, end: int) -> Self:
        """Keep rows *start* through *end* (zero-based, inclusive)."""
        if self._top is not None:
            raise ConflictingClauseError("LIMIT", "TOP")
        if start < 0 or end < start:
            raise InvalidArgumentError(f"Invalid LIMIT range {start}..{end}")
        self._limit = (start, end)
        return self

    def top(self, count: int) -> Self:
        """Keep the first *count* rows; ``top(0)`` renders a zero-row clause."""
        if self._limit is not None:
            raise ConflictingClauseError("TOP", "LIMIT")
        if count < 0:
            raise InvalidArgumentError(f"Invalid TOP count {count}")
        self._top = count
        return self

    @property
    def has_trailing_clauses(self) -> bool:
        return bool(self._order_by) or self._limit is not None or self._top is not None

    def _render_order_by(self) -> str:
        if not self._order_by:
            return ""
        return " ORDER BY " + ", ".join(self._order_by)

    def _apply_top_and_limit(self, sql: str, dialect: DialectHelper | None) -> str:
        if self._top is not None:
            if dialect is None:
                raise MissingDialectHelperError("TOP")
            sql = dialect.top(sql, self._top)
        if self._limit is not None:
            if dialect is None:
                raise MissingDialectHelperError("LIMIT")
            sql = dialect.limit(sql, *self._limit)
        return sql


class Query(_Pagination, QueryBasic):
    """Full SELECT builder.

    Example:
        Query().table("users").where("name like :n", {"n": "J%"}).order_by("id").top(10)
    """

    def __init__(self) -> None:
        super().__init__()
        self._group_by: list[str] = []
        self._for_update = False

    def group_by(self, fields: Iterable[str] | str) -> Self:
        self._group_by.extend([fields] if isinstance(fields, str) else fields)
        return self

    def for_update(self) -> Self:
        self._for_update = True
        return self

    @property
    def has_trailing_clauses(self) -> bool:
        return super().has_trailing_clauses or self._for_update

    def _render(self, dialect: DialectHelper | None) -> tuple[str, dict[str, Any]]:
        sql, params = super()._render(dialect)

        if self._group_by:
            sql += " GROUP BY " + ", ".join(self._group_by)
        sql += self._render_order_by()

        if self._for_update:
            if dialect is None:
                raise MissingDialectHelperError("FOR UPDATE")
            sql = dialect.for_update(sql)

        return self._apply_top_and_limit(sql, dialect), params
