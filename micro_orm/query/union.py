"""UNION of several SELECTs with one outer ORDER BY / TOP / LIMIT."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from micro_orm.core.exceptions import InvalidArgumentError
from micro_orm.core.params import merge_params
from micro_orm.query.select import QueryBasic, _Pagination
from micro_orm.query.statement import SqlStatement, finalize

if TYPE_CHECKING:
    from micro_orm.adapters.protocol import DialectHelper


class Union(_Pagination):
    """Concatenate SELECT branches with UNION (or UNION ALL).

    Each branch must build on its own and may not carry ORDER BY, TOP,
    LIMIT or FOR UPDATE; those apply to the union as a whole.

    Example:
        Union().add_query(first).add_query(second).order_by("iduser")
    """

    def __init__(self, union_all: bool = False) -> None:
        super().__init__()
        self._queries: list[QueryBasic] = []
        self._union_all = union_all

    def add_query(self, query: QueryBasic) -> Self:
        if not isinstance(query, QueryBasic):
            raise InvalidArgumentError(
                f"Union branches must be queries, got {type(query).__name__}"
            )
        if isinstance(query, _Pagination) and query.has_trailing_clauses:
            raise InvalidArgumentError(
                "Union branches cannot use ORDER BY, TOP, LIMIT or FOR UPDATE"
            )
        self._queries.append(query)
        return self

    def build(self, dialect: DialectHelper | None = None) -> SqlStatement:
        if not self._queries:
            raise InvalidArgumentError("Union requires at least one query")

        branches = [query.build(dialect) for query in self._queries]
        keyword = " UNION ALL " if self._union_all else " UNION "
        sql = keyword.join(branch.sql for branch in branches)
        params = merge_params(*(branch.params for branch in branches))

        sql += self._render_order_by()
        sql = self._apply_top_and_limit(sql, dialect)
        return finalize(sql, params)
