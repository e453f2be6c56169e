"""Recursive common table expressions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from micro_orm.core.exceptions import InvalidArgumentError
from micro_orm.core.params import merge_params
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


class Recursive:
    """``WITH RECURSIVE`` prefix for a Query.

    Either give explicit anchor and step queries:

        Recursive("tree").base(anchor).step(step)

    or describe the CTE column by column:

        Recursive("counter").field("n", "1", "n + 1").where("n < :max", {"max": 10})

    which renders ``WITH RECURSIVE counter(n) AS (SELECT 1 as n UNION
    SELECT n + 1 FROM counter WHERE n < :max)``.
    """

    def __init__(self, name: str, union_all: bool = False) -> None:
        self._name = name
        self._union_all = union_all
        self._base: Buildable | None = None
        self._step: Buildable | None = None
        self._fields: list[tuple[str, str, str]] = []
        self._where: list[WhereClause] = []

    @property
    def name(self) -> str:
        return self._name

    def base(self, query: Buildable) -> Self:
        self._base = query
        return self

    def step(self, query: Buildable) -> Self:
        self._step = query
        return self

    def field(self, name: str, base: str, step: str) -> Self:
        self._fields.append((name, base, step))
        return self

    def where(self, filter: str, params: Mapping[str, Any] | None = None) -> Self:
        """Filter for the recursive step in column-by-column form."""
        self._where.append(make_where(filter, params))
        return self

    @property
    def _union(self) -> str:
        return " UNION ALL " if self._union_all else " UNION "

    def build(self, dialect: DialectHelper | None = None) -> SqlStatement:
        explicit = self._base is not None or self._step is not None
        if explicit and self._fields:
            raise InvalidArgumentError(
                f"Recursive '{self._name}': use either base/step queries or fields, not both"
            )
        if explicit:
            return self._build_from_queries(dialect)
        if self._fields:
            return self._build_from_fields()
        raise InvalidArgumentError(f"Recursive '{self._name}' has no anchor or step")

    def _build_from_queries(self, dialect: DialectHelper | None) -> SqlStatement:
        if self._base is None or self._step is None:
            raise InvalidArgumentError(
                f"Recursive '{self._name}' needs both a base and a step query"
            )
        if self._where:
            raise InvalidArgumentError(
                f"Recursive '{self._name}': put step filters on the step query"
            )
        anchor = self._base.build(dialect)
        step = self._step.build(dialect)
        sql = f"WITH RECURSIVE {self._name} AS ({anchor.sql}{self._union}{step.sql})"
        return finalize(sql, merge_params(anchor.params, step.params))

    def _build_from_fields(self) -> SqlStatement:
        columns = ", ".join(name for name, _, _ in self._fields)
        anchor = ", ".join(f"{base} as {name}" for name, base, _ in self._fields)
        step = ", ".join(step for _, _, step in self._fields)
        where_sql, params = render_where(self._where)
        sql = (
            f"WITH RECURSIVE {self._name}({columns}) AS "
            f"(SELECT {anchor}{self._union}SELECT {step} FROM {self._name}{where_sql})"
        )
        return finalize(sql, params)
