"""Unit tests for Union."""

from __future__ import annotations

import pytest

from micro_orm.adapters.sqlite import SqliteDialect
from micro_orm.core.exceptions import InvalidArgumentError
from micro_orm.query.select import Query, QueryBasic
from micro_orm.query.union import Union


def _info_by_id(param: str, value: int) -> QueryBasic:
    return QueryBasic().table("info").where(f"id = :{param}", {param: value})


class TestUnion:
    def test_union_with_outer_order_by(self) -> None:
        sql, params = (
            Union()
            .add_query(_info_by_id("id1", 3))
            .add_query(_info_by_id("id2", 1))
            .order_by(["iduser"])
            .build()
        )
        assert sql == (
            "SELECT * FROM info WHERE id = :id1 UNION SELECT * FROM info WHERE id = :id2 "
            "ORDER BY iduser"
        )
        assert params == {"id1": 3, "id2": 1}

    def test_union_all(self) -> None:
        sql, _ = (
            Union(union_all=True)
            .add_query(QueryBasic().table("users").field("name"))
            .add_query(QueryBasic().table("info").field("property"))
            .build()
        )
        assert sql == "SELECT name FROM users UNION ALL SELECT property FROM info"

    def test_top_applies_to_whole_union(self, dialect: SqliteDialect) -> None:
        sql, _ = (
            Union()
            .add_query(QueryBasic().table("users"))
            .add_query(QueryBasic().table("users"))
            .top(2)
            .build(dialect)
        )
        assert sql == "SELECT * FROM users UNION SELECT * FROM users LIMIT 2"

    def test_plain_query_branch_is_accepted(self) -> None:
        sql, _ = Union().add_query(Query().table("users")).build()
        assert sql == "SELECT * FROM users"

    def test_branch_with_order_by_is_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Union().add_query(Query().table("users").order_by("id"))

    def test_branch_must_be_a_query(self) -> None:
        with pytest.raises(InvalidArgumentError, match="str"):
            Union().add_query("SELECT 1")  # type: ignore[arg-type]

    def test_empty_union(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Union().build()
