"""Cross-connection transaction coordination.

A TransactionManager tracks several drivers and begins, commits or rolls
back all of them as one logical unit. This is not a two-phase commit: the
per-connection calls are issued one after another, so a failure halfway
through a commit leaves the connections in different states.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from micro_orm.core.connection import ConnectionConfig, load_driver
from micro_orm.core.exceptions import ConflictingConnectionError, TransactionStateError

if TYPE_CHECKING:
    from micro_orm.adapters.protocol import Driver
    from micro_orm.repository.base import Repository

logger = logging.getLogger(__name__)


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


class TransactionManager:
    """Begins, commits and rolls back a set of drivers together.

    Usable as a context manager: the transaction begins on enter, commits on
    a clean exit and rolls back when the block raises.
    """

    def __init__(self) -> None:
        self._connections: dict[str, Driver] = {}
        self._state = _TxState.IDLE

    @property
    def active(self) -> bool:
        return self._state == _TxState.ACTIVE

    def add_connection(self, config: ConnectionConfig) -> Driver:
        """Add or reuse the driver for *config*'s connection key."""
        existing = self._connections.get(config.uri)
        if existing is not None:
            return existing
        driver: Driver = load_driver(config)
        self.add_driver(driver)
        return driver

    def add_driver(self, driver: Driver) -> None:
        """Register *driver*; it joins the transaction at once if one is active."""
        uri = driver.uri
        existing = self._connections.get(uri)
        if existing is None:
            self._connections[uri] = driver
            if self.active:
                driver.begin_transaction()
        elif existing is not driver:
            raise ConflictingConnectionError(uri, existing)

    def add_repository(self, repository: Repository[Any]) -> None:
        self.add_driver(repository.driver)

    def count(self) -> int:
        return len(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    def begin_transaction(self) -> None:
        if self.active:
            raise TransactionStateError(self._state.value, "begin")
        self._state = _TxState.ACTIVE
        logger.info("Beginning transaction on %d connection(s)", len(self._connections))
        for driver in self._connections.values():
            driver.begin_transaction()

    def commit_transaction(self) -> None:
        if not self.active:
            raise TransactionStateError(self._state.value, "commit")
        self._state = _TxState.IDLE
        logger.info("Committing transaction on %d connection(s)", len(self._connections))
        for driver in self._connections.values():
            driver.commit_transaction()

    def rollback_transaction(self) -> None:
        if not self.active:
            raise TransactionStateError(self._state.value, "rollback")
        self._state = _TxState.IDLE
        logger.info("Rolling back transaction on %d connection(s)", len(self._connections))
        for driver in self._connections.values():
            driver.rollback_transaction()

    def destroy(self) -> None:
        """Commit any active transaction and forget every connection."""
        if self.active:
            logger.warning("Destroying transaction manager with an active transaction; committing")
            self.commit_transaction()
        self._connections = {}

    def __enter__(self) -> TransactionManager:
        self.begin_transaction()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if not self.active:
            return
        if exc_type is not None:
            self.rollback_transaction()
        else:
            self.commit_transaction()
