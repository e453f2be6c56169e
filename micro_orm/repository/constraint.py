"""Update constraints checked by Repository.save before an UPDATE runs."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from micro_orm.core.exceptions import UpdateConstraintViolation
from micro_orm.mapping.accessor import get_field

ConstraintFunction = Callable[[Any, Any], bool]


class UpdateConstraint:
    """Rules an update must satisfy, given the stored and the new entity.

    Example:
        constraint = UpdateConstraint().with_allow_only_new_values_for_fields("value")
        repository.save(info, constraint)
    """

    def __init__(self) -> None:
        self._new_value_fields: list[str] = []
        self._closures: list[ConstraintFunction] = []

    def with_allow_only_new_values_for_fields(self, *fields: str) -> UpdateConstraint:
        """Require each of *fields* to differ from the stored value."""
        self._new_value_fields.extend(fields)
        return self

    def with_closure(self, function: ConstraintFunction) -> UpdateConstraint:
        """Add a ``(old, new) -> bool`` check; returning False rejects the update."""
        self._closures.append(function)
        return self

    @property
    def fields(self) -> list[str]:
        return list(self._new_value_fields)

    def check(self, old: Any, new: Any) -> None:
        """Raise UpdateConstraintViolation if *new* may not replace *old*.

        Nothing is checked when there is no stored row.
        """
        if old is None:
            return

        for name in self._new_value_fields:
            if get_field(old, name) == get_field(new, name):
                raise UpdateConstraintViolation(
                    f"You are not updating the property '{name}'", field_name=name
                )

        for function in self._closures:
            if not function(old, new):
                raise UpdateConstraintViolation("The update was rejected by a constraint check")
