"""Unit tests for ORMSubject dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from unittest.mock import MagicMock

import pytest

from micro_orm.core.enums import ObserverEvent
from micro_orm.core.observer import ObserverData, ObserverProcessor, ORMSubject


@dataclass
class RecordingProcessor:
    observed_table: str
    calls: list[ObserverData] = field(default_factory=list)
    log: list[str] | None = None

    def process(self, observer_data: ObserverData) -> None:
        self.calls.append(observer_data)
        if self.log is not None:
            self.log.append(self.observed_table)


class FailingProcessor:
    observed_table = "info"

    def process(self, observer_data: ObserverData) -> None:
        raise RuntimeError("observer failed")


def _event(table: str) -> ObserverData:
    return ObserverData(
        table=table,
        event=ObserverEvent.INSERT,
        data={"id": 1},
        old_data=None,
        repository=MagicMock(),
    )


class TestORMSubject:
    def test_processor_satisfies_protocol(self) -> None:
        assert isinstance(RecordingProcessor("info"), ObserverProcessor)

    def test_notifies_only_matching_table(self, subject: ORMSubject) -> None:
        info = RecordingProcessor("info")
        users = RecordingProcessor("users")
        subject.add_observer(info)
        subject.add_observer(users)

        event = _event("info")
        subject.notify(event)

        assert info.calls == [event]
        assert users.calls == []

    def test_registration_order(self, subject: ORMSubject) -> None:
        log: list[str] = []
        first = RecordingProcessor("info", log=log)
        second = RecordingProcessor("info", log=log)
        subject.add_observer(first)
        subject.add_observer(second)

        subject.notify(_event("info"))

        assert len(log) == 2
        assert len(first.calls) == 1
        assert len(second.calls) == 1

    def test_processor_errors_propagate(self, subject: ORMSubject) -> None:
        after = RecordingProcessor("info")
        subject.add_observer(FailingProcessor())
        subject.add_observer(after)

        with pytest.raises(RuntimeError, match="observer failed"):
            subject.notify(_event("info"))
        assert after.calls == []

    def test_has_observers(self, subject: ORMSubject) -> None:
        subject.add_observer(RecordingProcessor("info"))
        assert subject.has_observers("info")
        assert not subject.has_observers("users")

    def test_clear_observers(self, subject: ORMSubject) -> None:
        subject.add_observer(RecordingProcessor("info"))
        assert len(subject) == 1

        subject.clear_observers()

        assert len(subject) == 0
        assert not subject.has_observers("info")

    def test_subjects_are_independent(self) -> None:
        first, second = ORMSubject(), ORMSubject()
        first.add_observer(RecordingProcessor("info"))
        assert len(second) == 0
