"""Unit tests for FieldMapping and its transforms."""

from __future__ import annotations

import dataclasses

import pytest

from micro_orm.core.exceptions import MappingError
from micro_orm.mapping.field import FieldMapping, NoTransform, Transform, WriteNever


class TestFieldMapping:
    def test_column_defaults_to_field_name(self) -> None:
        mapping = FieldMapping.create("name")
        assert mapping.column_name == "name"
        assert mapping.row_key == "name"
        assert isinstance(mapping.update, NoTransform)
        assert isinstance(mapping.select, NoTransform)

    def test_with_column(self) -> None:
        mapping = FieldMapping.create("value").with_column("property")
        assert mapping.field_name == "value"
        assert mapping.column_name == "property"

    def test_alias_is_the_row_key(self) -> None:
        mapping = FieldMapping.create("value").with_column("property").with_alias("val")
        assert mapping.row_key == "val"

    def test_builders_return_copies(self) -> None:
        original = FieldMapping.create("name")
        changed = original.with_column("username")
        assert original.column_name == "name"
        assert changed is not original

    def test_immutable(self) -> None:
        mapping = FieldMapping.create("name")
        with pytest.raises(dataclasses.FrozenInstanceError):
            mapping.column_name = "other"  # type: ignore[misc]

    def test_functions_are_wrapped_in_transform(self) -> None:
        mapping = FieldMapping.create("name").with_update_function(
            lambda value, instance: f"Sr. {value}"
        )
        assert isinstance(mapping.update, Transform)
        assert mapping.update.apply("John", None) == "Sr. John"

    def test_select_function_receives_instance(self) -> None:
        mapping = FieldMapping.create("name").with_select_function(
            lambda value, instance: f"{value}/{instance['createdate']}"
        )
        assert mapping.select.apply("JG", {"createdate": "1974-01-26"}) == "JG/1974-01-26"

    def test_write_never(self) -> None:
        mapping = FieldMapping.create("year").write_never()
        assert isinstance(mapping.update, WriteNever)
        assert not mapping.is_written

    def test_write_never_as_update_function(self) -> None:
        mapping = FieldMapping.create("year").with_update_function(WriteNever())
        assert not mapping.is_written

    def test_write_never_is_not_a_select_transform(self) -> None:
        with pytest.raises(MappingError, match="year"):
            FieldMapping.create("year").with_select_function(WriteNever())

    def test_primary_key_seed_function(self) -> None:
        mapping = FieldMapping.create("id").with_primary_key_seed_function(lambda instance: 50)
        assert mapping.primary_key_seed_function is not None
        assert mapping.primary_key_seed_function(None) == 50
