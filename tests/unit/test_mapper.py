"""Unit tests for Mapper."""

from __future__ import annotations

from typing import Any

import pytest
from conftest import Info, Users, UsersMap
from pydantic import BaseModel

from micro_orm.core.exceptions import ColumnMismatchError
from micro_orm.mapping.field import FieldMapping
from micro_orm.mapping.mapper import Mapper


class UserModel(BaseModel):
    id: int | None = None
    name: str | None = None


class Account:
    def __init__(self, id: int | None = None, owner: str | None = None) -> None:
        self.id = id
        self.owner = owner
        self.balance: Any = None


@pytest.fixture
def users_map_mapper() -> Mapper[UsersMap]:
    mapper = Mapper(UsersMap, "users", "id")
    mapper.add_field_mapping(
        FieldMapping.create("name").with_select_function(
            lambda value, instance: f"[{value.upper()}] - {instance.createdate}"
        )
    )
    mapper.add_field_mapping(
        FieldMapping.create("year")
        .write_never()
        .with_select_function(lambda value, instance: int(instance.createdate[:4]))
    )
    return mapper


class TestMapperSetup:
    def test_identity_mappings(self, user_mapper: Mapper[Users]) -> None:
        assert user_mapper.table == "users"
        assert user_mapper.primary_key == "id"
        assert user_mapper.primary_key_column == "id"
        assert [m.field_name for m in user_mapper] == ["id", "name", "createdate"]
        assert all(m.column_name == m.field_name for m in user_mapper)

    def test_add_field_mapping_replaces(self, info_mapper: Mapper[Info]) -> None:
        mapping = info_mapper.get_field_mapping("value")
        assert mapping is not None
        assert mapping.column_name == "property"
        assert [m.field_name for m in info_mapper.field_mappings] == ["id", "iduser", "value"]

    def test_unknown_field_mapping(self, user_mapper: Mapper[Users]) -> None:
        assert user_mapper.get_field_mapping("missing") is None

    def test_mapped_primary_key_column(self) -> None:
        mapper = Mapper(Users, "users", "id")
        mapper.add_field_mapping(FieldMapping.create("id").with_column("user_id"))
        assert mapper.primary_key_column == "user_id"

    def test_plain_class_fields(self) -> None:
        mapper = Mapper(Account, "accounts", "id")
        assert [m.field_name for m in mapper] == ["id", "owner"]


class TestKeyGeneration:
    def test_no_generator(self, user_mapper: Mapper[Users]) -> None:
        assert not user_mapper.has_key_generator
        assert user_mapper.generate_key(Users()) is None

    def test_mapper_generator(self) -> None:
        mapper = Mapper(Users, "users", "id", primary_key_seed_function=lambda instance: 50)
        assert mapper.has_key_generator
        assert mapper.generate_key(Users()) == 50

    def test_with_primary_key_seed_function(self) -> None:
        mapper = Mapper(Users, "users", "id").with_primary_key_seed_function(
            lambda instance: f"{instance.name}-1"
        )
        assert mapper.generate_key(Users(name="jg")) == "jg-1"

    def test_field_mapping_generator(self) -> None:
        mapper = Mapper(Users, "users", "id").add_field_mapping(
            FieldMapping.create("id").with_primary_key_seed_function(lambda instance: 7)
        )
        assert mapper.has_key_generator
        assert mapper.generate_key(Users()) == 7

    def test_get_and_set_key(self, user_mapper: Mapper[Users]) -> None:
        user = Users(name="JG")
        assert user_mapper.get_key(user) is None
        user_mapper.set_key(user, 3)
        assert user.id == 3


class TestInstanceToRow:
    def test_renamed_column(self, info_mapper: Mapper[Info]) -> None:
        row = info_mapper.instance_to_row(Info(id=1, iduser=3, value=3.5))
        assert row == {"id": 1, "iduser": 3, "property": 3.5}

    def test_update_function_sees_instance(self) -> None:
        mapper = Mapper(UsersMap, "users", "id")
        mapper.add_field_mapping(
            FieldMapping.create("name").with_update_function(
                lambda value, instance: f"Sr. {value} - {instance.createdate}"
            )
        )
        mapper.add_field_mapping(FieldMapping.create("year").write_never())

        row = mapper.instance_to_row(
            UsersMap(name="John Doe", createdate="2015-08-09", year="NOT USED!")
        )

        assert row == {
            "id": None,
            "name": "Sr. John Doe - 2015-08-09",
            "createdate": "2015-08-09",
        }


class TestRowToInstance:
    def test_plain_row(self, user_mapper: Mapper[Users]) -> None:
        row = {"id": 1, "name": "John Doe", "createdate": "2017-01-02"}
        assert user_mapper.row_to_instance(row) == Users(**row)

    def test_missing_columns_are_none(self, user_mapper: Mapper[Users]) -> None:
        user = user_mapper.row_to_instance({"name": "Jane Doe", "days": 1271.0})
        assert user == Users(id=None, name="Jane Doe", createdate=None)

    def test_renamed_column(self, info_mapper: Mapper[Info]) -> None:
        info = info_mapper.row_to_instance({"id": 3, "iduser": 3, "property": 3.5})
        assert info.value == 3.5

    def test_select_functions_run_after_plain_columns(
        self, users_map_mapper: Mapper[UsersMap]
    ) -> None:
        user = users_map_mapper.row_to_instance(
            {"id": 1, "name": "John Doe", "createdate": "2017-01-02"}
        )
        assert user.name == "[JOHN DOE] - 2017-01-02"
        assert user.createdate == "2017-01-02"
        assert user.year == 2017

    def test_rows_to_instances(self, user_mapper: Mapper[Users]) -> None:
        users = user_mapper.rows_to_instances([{"id": 1}, {"id": 2}])
        assert [u.id for u in users] == [1, 2]

    def test_plain_class_with_extra_attribute(self) -> None:
        mapper = Mapper(Account, "accounts", "id").add_field_mapping(
            FieldMapping.create("balance")
        )
        account = mapper.row_to_instance({"id": 1, "owner": "JG", "balance": 10})
        assert (account.id, account.owner, account.balance) == (1, "JG", 10)

    def test_pydantic_entity(self) -> None:
        mapper = Mapper(UserModel, "users", "id")
        user = mapper.row_to_instance({"id": 2, "name": "Jane Doe"})
        assert user == UserModel(id=2, name="Jane Doe")

        mapper.set_key(user, 5)
        assert user.id == 5

    def test_pydantic_validation_failure(self) -> None:
        mapper = Mapper(UserModel, "users", "id")
        with pytest.raises(ColumnMismatchError):
            mapper.row_to_instance({"id": "not a number"})

    def test_dict_entity(self) -> None:
        mapper = Mapper(dict, "users", "id").add_field_mapping(FieldMapping.create("name"))
        user = mapper.row_to_instance({"id": 1, "name": "JG"})
        assert user == {"id": 1, "name": "JG"}
