"""SQLAlchemy-backed EntityStore adapter.

Maps rows of one table to instances of one entity dataclass, field by column.
Integrity and data errors raised by the database are mapped to
:class:`ConstraintViolationError`; everything else propagates.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import DataError, IntegrityError

from comments_microservice.interfaces.entity_store import (
    ConstraintViolationError,
    EntityStore,
)

if TYPE_CHECKING:
    from sqlalchemy import RowMapping, Table
    from sqlalchemy.engine import Connection

E = TypeVar("E")


class SqlAlchemyEntityStore(EntityStore[E], Generic[E]):
    """EntityStore for ``entity_type`` backed by ``table``.

    Args:
        connection: Connection owned by the enclosing unit of work.
        entity_type: Entity dataclass; its fields must match the table columns.
        table: Backing table; its single-column primary key is the identifier.
    """

    def __init__(self, connection: Connection, entity_type: type[E], table: Table):
        self.connection = connection
        self.entity_type = entity_type
        self.table = table
        (self._id_column,) = table.primary_key.columns

    def add(self, values: Mapping[str, Any]) -> E:
        row = self._execute_one(insert(self.table).values(**values).returning(self.table))
        assert row is not None  # INSERT .. RETURNING always yields the row
        return self._to_entity(row)

    def get(self, identifier: int) -> E | None:
        row = (
            self.connection.execute(
                select(self.table).where(self._id_column == identifier)
            )
            .mappings()
            .one_or_none()
        )
        return None if row is None else self._to_entity(row)

    def list(self) -> list[E]:
        rows = self.connection.execute(
            select(self.table).order_by(self._id_column.asc())
        ).mappings()
        return [self._to_entity(row) for row in rows]

    def update(self, identifier: int, values: Mapping[str, Any]) -> E | None:
        row = self._execute_one(
            update(self.table)
            .where(self._id_column == identifier)
            .values(**values)
            .returning(self.table)
        )
        return None if row is None else self._to_entity(row)

    def delete(self, identifier: int) -> bool:
        result = self.connection.execute(
            delete(self.table).where(self._id_column == identifier)
        )
        return result.rowcount == 1

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _execute_one(self, stmt) -> RowMapping | None:
        try:
            return self.connection.execute(stmt).mappings().one_or_none()
        except (IntegrityError, DataError) as e:
            raise ConstraintViolationError(str(e.orig or e)) from e

    def _to_entity(self, row: RowMapping) -> E:
        return self.entity_type(**row)
