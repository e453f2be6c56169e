"""
Example 01: Query Builder

This example renders SQL with the fluent builders, without touching a database.
"""

from micro_orm import (
    DeleteBuilder,
    Literal,
    Query,
    QueryBasic,
    Recursive,
    Union,
    UpdateBuilder,
)
from micro_orm.adapters.mysql import MysqlDialect
from micro_orm.adapters.postgresql import PostgresqlDialect


def show(title, statement):
    sql, params = statement
    print(f"{title}:\n  {sql}\n  params={params}\n")


def main():
    print("=== Query Builder ===\n")

    query = (
        Query()
        .table("users", "u")
        .fields(["u.id", "u.name"])
        .left_join("info", "info.iduser = u.id", "i")
        .where("u.name like [[name]]", {"name": "J%"})
        .order_by("u.id")
        .limit(10, 19)
    )
    show("SELECT on PostgreSQL", query.build(PostgresqlDialect()))
    show("Same SELECT on MySQL", query.build(MysqlDialect()))

    # Literal values are written into the SQL text
    show(
        "Literal key",
        QueryBasic().table("users").where("id = :id", {"id": Literal(1)}).build(),
    )

    union = (
        Union()
        .add_query(QueryBasic().table("info").where("id = :id1", {"id1": 3}))
        .add_query(QueryBasic().table("info").where("id = :id2", {"id2": 1}))
        .order_by("iduser")
    )
    show("UNION", union.build())

    counter = Recursive("counter").field("n", "1", "n + 1").where("n < :max", {"max": 10})
    show("Recursive CTE", Query().with_recursive(counter).field("n").build())

    update = (
        UpdateBuilder()
        .table("users")
        .set("name", "Jane")
        .where("id = :id", {"id": 2})
    )
    show("UPDATE", update.build())
    show("Rows the UPDATE would touch", update.convert().build())
    show("DELETE from the same filter", DeleteBuilder.from_builder(update).build())


if __name__ == "__main__":
    main()
