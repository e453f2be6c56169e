"""Built SQL statements and the clause pieces shared by every builder."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from micro_orm.core.params import fold_placeholders, inline_literals, merge_params

if TYPE_CHECKING:
    from micro_orm.adapters.protocol import DialectHelper


@dataclass(frozen=True)
class SqlStatement:
    """SQL text plus its bindable named parameters.

    Unpacks as ``sql, params = query.build(dialect)``.
    """

    sql: str
    params: dict[str, Any] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield self.params


@runtime_checkable
class Buildable(Protocol):
    """Anything that renders to a SqlStatement."""

    def build(self, dialect: DialectHelper | None = None) -> SqlStatement:
        ...


@dataclass(frozen=True)
class WhereClause:
    filter: str
    params: dict[str, Any] = field(default_factory=dict)


def make_where(filter: str, params: Mapping[str, Any] | None) -> WhereClause:
    return WhereClause(filter=fold_placeholders(filter), params=dict(params or {}))


def render_where(clauses: Sequence[WhereClause]) -> tuple[str, dict[str, Any]]:
    """Render ``" WHERE a AND b"``, or an empty string without clauses."""
    if not clauses:
        return "", {}
    sql = " WHERE " + " AND ".join(clause.filter for clause in clauses)
    return sql, merge_params(*(clause.params for clause in clauses))


def finalize(sql: str, params: Mapping[str, Any]) -> SqlStatement:
    """Inline Literal parameters and freeze the result."""
    sql, remaining = inline_literals(sql, params)
    return SqlStatement(sql=sql, params=remaining)
