"""Mapping layer - entity fields to table columns and back."""

from __future__ import annotations

from micro_orm.mapping.field import (
    FieldMapping,
    FieldTransform,
    NoTransform,
    Transform,
    WriteNever,
)
from micro_orm.mapping.mapper import Mapper

__all__ = [
    "Mapper",
    "FieldMapping",
    "FieldTransform",
    "NoTransform",
    "Transform",
    "WriteNever",
]
