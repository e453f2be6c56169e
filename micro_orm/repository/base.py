"""Repository - entity persistence over one Mapper and one Driver.

Each call is independent: it builds its SQL, runs it through the driver,
maps the rows and, for writes, notifies the ORMSubject. The repository keeps
no entity cache; every read hits the database.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from micro_orm.core.enums import ObserverEvent
from micro_orm.core.exceptions import (
    AmbiguousResultError,
    MultipleRowsError,
    RepositoryReadOnlyError,
)
from micro_orm.core.observer import ObserverData, ObserverProcessor, ORMSubject
from micro_orm.mapping.mapper import Mapper
from micro_orm.query.select import Query
from micro_orm.query.statement import Buildable, SqlStatement
from micro_orm.query.write import DeleteBuilder, InsertBuilder, UpdateBuilder

if TYPE_CHECKING:
    from micro_orm.adapters.protocol import Driver
    from micro_orm.repository.constraint import UpdateConstraint

logger = logging.getLogger(__name__)

T = TypeVar("T")

RowHook = Callable[[dict[str, Any]], dict[str, Any]]

_KEY_PARAM = "_pk_value"


class Repository(Generic[T]):
    """Reads and writes the entities described by *mapper*.

    Args:
        driver: Driver used for every statement.
        mapper: Mapper for the repository's entity type.
        subject: Observer registry notified after writes. Repositories that
            share a subject see each other's observers; a private one is
            created when omitted.

    Example:
        users = Repository(driver, Mapper(User, "users", "id"))
        user = users.get(1)
        user.name = "Jane"
        users.save(user)
    """

    def __init__(
        self,
        driver: Driver,
        mapper: Mapper[T],
        subject: ORMSubject | None = None,
    ) -> None:
        self._driver = driver
        self._mapper = mapper
        self._subject = subject if subject is not None else ORMSubject()
        self._read_only = False
        self._before_insert: RowHook | None = None
        self._before_update: RowHook | None = None

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def mapper(self) -> Mapper[T]:
        return self._mapper

    @property
    def subject(self) -> ORMSubject:
        return self._subject

    @property
    def is_read_only(self) -> bool:
        return self._read_only

    # --- configuration ---

    def set_repository_read_only(self) -> None:
        """Reject every later save and delete on this repository."""
        logger.info("Repository for '%s' switched to read-only", self._mapper.table)
        self._read_only = True

    def set_before_insert(self, hook: RowHook) -> None:
        """Run *hook* on the ``{column: value}`` row before each INSERT."""
        self._before_insert = hook

    def set_before_update(self, hook: RowHook) -> None:
        """Run *hook* on the ``{column: value}`` row before each UPDATE."""
        self._before_update = hook

    def add_observer(self, processor: ObserverProcessor) -> None:
        self._subject.add_observer(processor)

    # --- reads ---

    def build(self, query: Buildable) -> SqlStatement:
        """Render *query* with this repository's dialect."""
        return query.build(self._driver.dialect)

    def get(self, key: Any) -> T | None:
        """Fetch the entity whose primary key equals *key*.

        Returns None if no row matches. A Literal key is written into the SQL.
        """
        query = Query().table(self._mapper.table).where(
            f"{self._mapper.primary_key_column} = :{_KEY_PARAM}", {_KEY_PARAM: key}
        )
        rows = self.get_by_query_raw(query)
        if not rows:
            return None
        if len(rows) > 1:
            raise MultipleRowsError(self._mapper.table, len(rows))
        return self._mapper.row_to_instance(rows[0])

    def get_by_filter(self, filter: str, params: dict[str, Any] | None = None) -> list[T]:
        """Entities of the mapper's table matching one WHERE *filter*."""
        return self.get_by_query(Query().table(self._mapper.table).where(filter, params))

    def get_by_query(
        self,
        query: Buildable,
        extra_mappers: Iterable[Mapper[Any]] | None = None,
    ) -> list[Any]:
        """Run *query* and map its rows.

        Without extra mappers each row becomes one entity. With extra mappers
        each row becomes a tuple holding one entity per mapper, this
        repository's first; every mapper reads the columns it owns.
        """
        rows = self.get_by_query_raw(query)
        mappers = list(extra_mappers or [])
        if not mappers:
            return self._mapper.rows_to_instances(rows)

        mappers.insert(0, self._mapper)
        return [tuple(mapper.row_to_instance(row) for mapper in mappers) for row in rows]

    def get_by_query_raw(self, query: Buildable) -> list[dict[str, Any]]:
        """Run *query* and return its rows as plain dicts."""
        sql, params = self.build(query)
        return self._driver.fetch_all(sql, params)

    def get_scalar(self, query: Buildable) -> Any:
        """Return the single value of a one-row, one-column result.

        Returns None when the query yields no rows.
        """
        rows = self.get_by_query_raw(query)
        if not rows:
            return None
        if len(rows) > 1 or len(rows[0]) != 1:
            raise AmbiguousResultError(
                f"Scalar query returned {len(rows)} row(s) of {len(rows[0])} column(s)"
            )
        return next(iter(rows[0].values()))

    def filter_in(self, keys: Any) -> list[T]:
        """Entities whose primary key is one of *keys* (a single key or an iterable)."""
        if isinstance(keys, (str, bytes)) or not isinstance(keys, Iterable):
            keys = [keys]
        keys = list(keys)
        if not keys:
            return []

        params = {f"_pk{index}": key for index, key in enumerate(keys)}
        placeholders = ", ".join(f":{name}" for name in params)
        query = Query().table(self._mapper.table).where(
            f"{self._mapper.primary_key_column} IN ({placeholders})", params
        )
        return self.get_by_query(query)

    # --- writes ---

    def save(self, instance: T, constraint: UpdateConstraint | None = None) -> T:
        """Insert *instance* if its primary key is unset, otherwise update it.

        On insert the generated key is written back to *instance*. The
        constraint, if given, only applies to updates.
        """
        self._check_writable("save")
        if self._mapper.get_key(instance) is None:
            self._insert(instance)
        else:
            self._update(instance, constraint)
        return instance

    def _insert(self, instance: T) -> None:
        mapper = self._mapper
        row = mapper.instance_to_row(instance)
        pk_column = mapper.primary_key_column

        if mapper.has_key_generator:
            row[pk_column] = mapper.generate_key(instance)
        else:
            row.pop(pk_column, None)

        if self._before_insert is not None:
            row = self._before_insert(row)

        InsertBuilder().table(mapper.table).fields(row).build_and_execute(self._driver)

        if mapper.has_key_generator:
            key = row.get(pk_column)
        else:
            key = self._driver.last_insert_id()
        mapper.set_key(instance, key)

        self._notify(ObserverEvent.INSERT, instance, None)

    def _update(self, instance: T, constraint: UpdateConstraint | None) -> None:
        mapper = self._mapper
        key = mapper.get_key(instance)

        old = None
        if constraint is not None or self._subject.has_observers(mapper.table):
            old = self.get(key)

        row = mapper.instance_to_row(instance)
        row.pop(mapper.primary_key_column, None)

        if self._before_update is not None:
            row = self._before_update(row)

        if constraint is not None:
            constraint.check(old, instance)

        # Only the key is mapped for writing: no UPDATE, observers still run
        if row:
            (
                UpdateBuilder()
                .table(mapper.table)
                .set_values(row)
                .where(f"{mapper.primary_key_column} = :{_KEY_PARAM}", {_KEY_PARAM: key})
                .build_and_execute(self._driver)
            )

        self._notify(ObserverEvent.UPDATE, instance, old)

    def delete(self, key: Any) -> int:
        """Delete the row whose primary key equals *key*; returns the affected count."""
        self._check_writable("delete")
        builder = (
            DeleteBuilder()
            .table(self._mapper.table)
            .where(f"{self._mapper.primary_key_column} = :{_KEY_PARAM}", {_KEY_PARAM: key})
        )
        count = builder.build_and_execute(self._driver)
        self._notify(ObserverEvent.DELETE, None, {self._mapper.primary_key: key})
        return count

    def delete_by_query(self, builder: DeleteBuilder | UpdateBuilder) -> int:
        """Delete the rows matched by *builder*'s table and WHERE clauses.

        An UpdateBuilder is accepted for its filters; its assignments are
        ignored. Observers receive the WHERE parameters as ``old_data``.
        """
        self._check_writable("delete")
        delete = DeleteBuilder.from_builder(builder)
        count = delete.build_and_execute(self._driver)
        self._notify(ObserverEvent.DELETE, None, delete.where_params)
        return count

    def _check_writable(self, action: str) -> None:
        if self._read_only:
            raise RepositoryReadOnlyError(self._mapper.table, action)

    def _notify(self, event: ObserverEvent, data: Any, old_data: Any) -> None:
        self._subject.notify(
            ObserverData(
                table=self._mapper.table,
                event=event,
                data=data,
                old_data=old_data,
                repository=self,
            )
        )
