"""
Example 02: Repository

This example maps a dataclass to a table and reads and writes it through a Repository.
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from micro_orm import (
    ConnectionConfig,
    FieldMapping,
    Mapper,
    Query,
    Repository,
    UpdateConstraint,
    UpdateConstraintViolation,
    load_driver,
)


@dataclass
class User:
    """User entity"""

    id: Optional[int] = None
    name: Optional[str] = None
    createdate: Optional[str] = None
    year: Optional[int] = None


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    driver = load_driver(ConnectionConfig(driver="sqlite", database=db_path))
    driver.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name VARCHAR(45),
            createdate DATETIME
        )
    """)

    # "year" is derived from createdate and never written back
    mapper = Mapper(User, "users", "id")
    mapper.add_field_mapping(
        FieldMapping.create("year")
        .write_never()
        .with_select_function(lambda value, instance: int(instance.createdate[:4]))
    )
    users = Repository(driver, mapper)
    users.set_before_insert(lambda row: {**row, "name": row["name"].strip()})

    print("=== Repository ===\n")

    for name, created in [("  John Doe ", "2017-01-02"), ("Jane Doe", "2017-01-04")]:
        user = users.save(User(name=name, createdate=created))
        print(f"Inserted: {user}")

    john = users.get(1)
    print(f"\nget(1): {john}")

    john.name = "John Smith"
    users.save(john)
    print(f"After update: {users.get(1)}")

    # Refuse updates that leave the name unchanged
    constraint = UpdateConstraint().with_allow_only_new_values_for_fields("name")
    try:
        users.save(john, constraint)
    except UpdateConstraintViolation as e:
        print(f"Rejected: {e}")

    recent = users.get_by_query(
        Query().table("users").where("createdate > :since", {"since": "2017-01-03"})
    )
    print(f"\nCreated after 2017-01-03: {[u.name for u in recent]}")
    print(f"filter_in([1, 2, 99]): {[u.id for u in users.filter_in([1, 2, 99])]}")
    print(f"Count: {users.get_scalar(Query().table('users').field('count(*)'))}")

    users.delete(2)
    print(f"After delete(2): {users.get(2)}")

    driver.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
