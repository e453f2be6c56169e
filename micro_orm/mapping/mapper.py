"""Entity-to-table mapper.

A Mapper describes how one entity class is stored in one table: which field
is the primary key, how each field maps to a column, and how new keys are
generated. Fields without an explicit FieldMapping map to a column of the
same name.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

from micro_orm.mapping.accessor import entity_fields, get_field, new_instance, set_field
from micro_orm.mapping.field import FieldMapping, Transform

T = TypeVar("T")


class Mapper(Generic[T]):
    """Field mappings, primary key and key generation for one entity type.

    Args:
        entity: The entity class rows are mapped to.
        table: Table name.
        primary_key: Entity field holding the primary key.
        primary_key_seed_function: Optional ``(instance) -> key`` used on insert
            instead of the driver's last insert id.
    """

    def __init__(
        self,
        entity: type[T],
        table: str,
        primary_key: str,
        primary_key_seed_function: Callable[[Any], Any] | None = None,
    ) -> None:
        self._entity = entity
        self._table = table
        self._primary_key = primary_key
        self._key_gen = primary_key_seed_function
        self._constructor_fields = set(entity_fields(entity))
        self._field_mappings: dict[str, FieldMapping] = {
            name: FieldMapping.create(name) for name in entity_fields(entity)
        }
        if primary_key not in self._field_mappings:
            self._field_mappings[primary_key] = FieldMapping.create(primary_key)

    @property
    def entity(self) -> type[T]:
        return self._entity

    @property
    def table(self) -> str:
        return self._table

    @property
    def primary_key(self) -> str:
        return self._primary_key

    @property
    def primary_key_column(self) -> str:
        return self._field_mappings[self._primary_key].column_name

    @property
    def field_mappings(self) -> list[FieldMapping]:
        return list(self._field_mappings.values())

    def __iter__(self) -> Iterator[FieldMapping]:
        return iter(self._field_mappings.values())

    def add_field_mapping(self, mapping: FieldMapping) -> Mapper[T]:
        """Register *mapping*, replacing any mapping for the same field."""
        self._field_mappings[mapping.field_name] = mapping
        return self

    def get_field_mapping(self, field_name: str) -> FieldMapping | None:
        return self._field_mappings.get(field_name)

    def with_primary_key_seed_function(self, function: Callable[[Any], Any]) -> Mapper[T]:
        self._key_gen = function
        return self

    @property
    def has_key_generator(self) -> bool:
        return self._key_gen is not None or (
            self._field_mappings[self._primary_key].primary_key_seed_function is not None
        )

    def generate_key(self, instance: Any) -> Any:
        """Return a new primary key for *instance*, or None without a generator."""
        seed = self._key_gen or self._field_mappings[self._primary_key].primary_key_seed_function
        if seed is None:
            return None
        return seed(instance)

    def get_key(self, instance: Any) -> Any:
        return get_field(instance, self._primary_key)

    def set_key(self, instance: Any, value: Any) -> None:
        set_field(instance, self._primary_key, value)

    def instance_to_row(self, instance: Any) -> dict[str, Any]:
        """Map *instance* to ``{column: value}`` for writing.

        Update functions receive the current field value and the whole
        instance. WriteNever fields are left out.
        """
        row: dict[str, Any] = {}
        for mapping in self._field_mappings.values():
            if not mapping.is_written:
                continue
            value = get_field(instance, mapping.field_name)
            row[mapping.column_name] = mapping.update.apply(value, instance)
        return row

    def row_to_instance(self, row: dict[str, Any]) -> T:
        """Build an entity from a result row.

        Plain columns are applied first; select functions then run in mapping
        registration order against the partially built instance.
        """
        values = {
            mapping.field_name: _read_column(row, mapping)
            for mapping in self._field_mappings.values()
        }
        is_dict = issubclass(self._entity, dict)
        instance = new_instance(
            self._entity,
            {
                name: value
                for name, value in values.items()
                if is_dict or name in self._constructor_fields
            },
        )
        for mapping in self._field_mappings.values():
            if not is_dict and mapping.field_name not in self._constructor_fields:
                set_field(instance, mapping.field_name, values[mapping.field_name])

        for mapping in self._field_mappings.values():
            if isinstance(mapping.select, Transform):
                value = mapping.select.apply(values[mapping.field_name], instance)
                set_field(instance, mapping.field_name, value)
        return instance

    def rows_to_instances(self, rows: list[dict[str, Any]]) -> list[T]:
        return [self.row_to_instance(row) for row in rows]


def _read_column(row: dict[str, Any], mapping: FieldMapping) -> Any:
    for key in (mapping.row_key, mapping.column_name, mapping.field_name):
        if key in row:
            return row[key]
    return None
