"""Raw SQL values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Literal:
    """A value emitted into SQL verbatim instead of being bound as a parameter.

    Example:
        repository.get(Literal("1"))
        user.created_at = Literal("CURRENT_TIMESTAMP")
    """

    value: Any

    def __str__(self) -> str:
        return str(self.value)
