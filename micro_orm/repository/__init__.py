"""Repository layer - entity persistence with hooks, observers and constraints."""

from __future__ import annotations

from micro_orm.repository.base import Repository
from micro_orm.repository.constraint import UpdateConstraint

__all__ = [
    "Repository",
    "UpdateConstraint",
]
