"""Entity field access by name.

This module is the only place that inspects entity classes. Supports
dataclasses, Pydantic models, plain classes and dict entities.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import MutableMapping
from typing import Any

from micro_orm.core.exceptions import ColumnMismatchError


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    try:
        from pydantic import BaseModel

        return isinstance(cls, type) and issubclass(cls, BaseModel)
    except ImportError:
        return False


def entity_fields(cls: type) -> list[str]:
    """Extract field names from a class (dataclass, Pydantic, or plain)."""
    # Pydantic model
    if _is_pydantic_model(cls):
        return list(cls.model_fields.keys())  # type: ignore[attr-defined]

    # Dataclass
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]

    # Plain class - use __init__ parameters
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
    except (ValueError, TypeError):
        return []
    return [
        name
        for name, param in sig.parameters.items()
        if name != "self"
        and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]


def get_field(instance: Any, name: str) -> Any:
    if isinstance(instance, MutableMapping):
        return instance.get(name)
    return getattr(instance, name, None)


def set_field(instance: Any, name: str, value: Any) -> None:
    if isinstance(instance, MutableMapping):
        instance[name] = value
    else:
        setattr(instance, name, value)


def new_instance(cls: type, values: dict[str, Any]) -> Any:
    """Construct *cls* from *values*.

    Detection order:
    1. dict subclasses -> cls(values)
    2. Pydantic BaseModel -> model_validate(values)
    3. dataclass / plain class -> cls(**values)
    """
    if issubclass(cls, dict):
        return cls(values)

    if _is_pydantic_model(cls):
        try:
            return cls.model_validate(values)  # type: ignore[attr-defined]
        except Exception as e:
            raise ColumnMismatchError(cls.__name__, [str(e)]) from e

    try:
        return cls(**values)
    except TypeError as e:
        raise ColumnMismatchError(cls.__name__, [str(e)]) from e
