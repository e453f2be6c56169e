"""Query model - fluent SELECT, UNION, recursive CTE and write builders."""

from __future__ import annotations

from micro_orm.query.recursive import Recursive
from micro_orm.query.select import Query, QueryBasic
from micro_orm.query.statement import Buildable, SqlStatement
from micro_orm.query.union import Union
from micro_orm.query.write import DeleteBuilder, InsertBuilder, UpdateBuilder

__all__ = [
    "SqlStatement",
    "Buildable",
    "QueryBasic",
    "Query",
    "Union",
    "Recursive",
    "InsertBuilder",
    "UpdateBuilder",
    "DeleteBuilder",
]
