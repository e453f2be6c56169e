"""Field mappings.

A FieldMapping ties one entity field to one column. Each direction carries a
transform: NoTransform passes the value through, Transform calls a function
with ``(value, instance)``, and WriteNever (update direction only) keeps the
column out of INSERT and UPDATE statements.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from micro_orm.core.exceptions import MappingError

TransformFunction = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class NoTransform:
    def apply(self, value: Any, instance: Any) -> Any:
        return value


@dataclass(frozen=True)
class Transform:
    function: TransformFunction

    def apply(self, value: Any, instance: Any) -> Any:
        return self.function(value, instance)


@dataclass(frozen=True)
class WriteNever:
    """The field is read from the database but never written to it."""

    def apply(self, value: Any, instance: Any) -> Any:
        return value


FieldTransform = NoTransform | Transform | WriteNever


def _as_transform(function: TransformFunction | FieldTransform | None) -> FieldTransform:
    if function is None:
        return NoTransform()
    if isinstance(function, (NoTransform, Transform, WriteNever)):
        return function
    return Transform(function)


@dataclass(frozen=True)
class FieldMapping:
    """Correspondence between an entity field and a table column.

    Example:
        FieldMapping.create("value").with_column("property")
        FieldMapping.create("year").write_never().with_select_function(
            lambda value, instance: int(instance.createdate[:4])
        )
    """

    field_name: str
    column_name: str = ""
    field_alias: str | None = None
    update: FieldTransform = field(default_factory=NoTransform)
    select: FieldTransform = field(default_factory=NoTransform)
    primary_key_seed_function: Callable[[Any], Any] | None = None

    def __post_init__(self) -> None:
        if not self.column_name:
            object.__setattr__(self, "column_name", self.field_name)

    @classmethod
    def create(cls, field_name: str) -> FieldMapping:
        return cls(field_name=field_name)

    def with_column(self, column_name: str) -> FieldMapping:
        return dataclasses.replace(self, column_name=column_name)

    def with_alias(self, alias: str) -> FieldMapping:
        return dataclasses.replace(self, field_alias=alias)

    def with_update_function(self, function: TransformFunction | FieldTransform) -> FieldMapping:
        return dataclasses.replace(self, update=_as_transform(function))

    def with_select_function(self, function: TransformFunction | FieldTransform) -> FieldMapping:
        transform = _as_transform(function)
        if isinstance(transform, WriteNever):
            raise MappingError(
                f"{self.field_name}: WriteNever only applies to the update direction"
            )
        return dataclasses.replace(self, select=transform)

    def with_primary_key_seed_function(self, function: Callable[[Any], Any]) -> FieldMapping:
        return dataclasses.replace(self, primary_key_seed_function=function)

    def write_never(self) -> FieldMapping:
        return dataclasses.replace(self, update=WriteNever())

    @property
    def is_written(self) -> bool:
        return not isinstance(self.update, WriteNever)

    @property
    def row_key(self) -> str:
        """Key this field is read from in a result row."""
        return self.field_alias or self.column_name
