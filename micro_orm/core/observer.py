"""Change observers.

An ORMSubject is a registry of observer processors, each interested in one
table. Repositories notify it after every successful write. Dispatch is
synchronous, in registration order, and a processor failure propagates to
the caller of the write.

One subject is typically created by the application and shared by every
repository that should see the same observers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from micro_orm.core.enums import ObserverEvent

if TYPE_CHECKING:
    from micro_orm.repository.base import Repository


@dataclass(frozen=True)
class ObserverData:
    """One write event.

    ``old_data`` is None for inserts; ``data`` is None for deletes.
    """

    table: str
    event: ObserverEvent
    data: Any
    old_data: Any
    repository: Repository[Any]


@runtime_checkable
class ObserverProcessor(Protocol):
    """Receives write events for ``observed_table``."""

    @property
    def observed_table(self) -> str:
        ...

    def process(self, observer_data: ObserverData) -> None:
        ...


class ORMSubject:
    """Observer registry and dispatcher."""

    def __init__(self) -> None:
        self._observers: list[ObserverProcessor] = []

    def add_observer(self, processor: ObserverProcessor) -> None:
        self._observers.append(processor)

    def clear_observers(self) -> None:
        self._observers.clear()

    def has_observers(self, table: str) -> bool:
        return any(p.observed_table == table for p in self._observers)

    def notify(self, observer_data: ObserverData) -> None:
        """Dispatch *observer_data* to every processor watching its table."""
        for processor in list(self._observers):
            if processor.observed_table == observer_data.table:
                processor.process(observer_data)

    def __len__(self) -> int:
        return len(self._observers)
