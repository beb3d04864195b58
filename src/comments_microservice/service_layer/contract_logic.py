"""Contract logic over a unit of work.

:class:`MappedContractLogic` is the one CRUD implementation shared by every
bound entity. Each operation opens its own unit of work, commits on success,
and rolls back on any failure. Atomicity for concurrent operations on the same
identifier is left to the store's transactions; no locks are taken here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar

from comments_microservice.interfaces.contract_logic import (
    ContractLogic,
    NotFoundError,
    ValidationError,
)
from comments_microservice.interfaces.entity_store import (
    ConstraintViolationError,
    EntityStore,
)
from comments_microservice.interfaces.unit_of_work import AbstractUnitOfWork

from .mapping import ContractMapping

logger = logging.getLogger(__name__)

E = TypeVar("E")
A = TypeVar("A")
U = TypeVar("U")
R = TypeVar("R")


class MappedContractLogic(ContractLogic[A, U, R], Generic[E, A, U, R]):
    """ContractLogic driven by a :class:`ContractMapping`.

    Args:
        mapping: Binding of the entity to its contracts.
        uow_factory: Returns a fresh unit of work for each operation.
    """

    def __init__(
        self,
        mapping: ContractMapping[E, A, U, R],
        uow_factory: Callable[[], AbstractUnitOfWork],
    ) -> None:
        self.mapping = mapping
        self._uow_factory = uow_factory

    def add(self, contract: A) -> R:
        values = self.mapping.values_for_add(contract)
        with self._uow_factory() as uow, self._constraints(self.mapping.add_type):
            entity = self._store(uow).add(values)
            uow.commit()
        logger.debug("Added %s %s", self.mapping.kind, self._id_of(entity))
        return self.mapping.to_read(entity)

    def update(self, contract: U) -> R:
        identifier = self.mapping.identifier_for_update(contract)
        with self._uow_factory() as uow, self._constraints(self.mapping.update_type):
            store = self._store(uow)
            # an unknown identifier is reported before the contract fields
            if store.get(identifier) is None:
                raise NotFoundError(self.mapping.kind, identifier)
            _, values = self.mapping.values_for_update(contract)
            entity = store.update(identifier, values)
            if entity is None:
                raise NotFoundError(self.mapping.kind, identifier)
            uow.commit()
        logger.debug(
            "Updated %s %s (%s)", self.mapping.kind, identifier, ", ".join(values)
        )
        return self.mapping.to_read(entity)

    def get(self, identifier: int) -> R:
        with self._uow_factory() as uow:
            entity = self._store(uow).get(identifier)
        if entity is None:
            raise NotFoundError(self.mapping.kind, identifier)
        return self.mapping.to_read(entity)

    def get_all(self) -> list[R]:
        with self._uow_factory() as uow:
            entities = self._store(uow).list()
        return [self.mapping.to_read(entity) for entity in entities]

    def delete(self, identifier: int) -> None:
        with self._uow_factory() as uow:
            if not self._store(uow).delete(identifier):
                raise NotFoundError(self.mapping.kind, identifier)
            uow.commit()
        logger.debug("Deleted %s %s", self.mapping.kind, identifier)

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _store(self, uow: AbstractUnitOfWork) -> EntityStore[E]:
        return uow.entities(self.mapping.entity_type)

    def _id_of(self, entity: E) -> object:
        return getattr(entity, self.mapping.id_field)

    @staticmethod
    @contextmanager
    def _constraints(contract_type: type) -> Iterator[None]:
        try:
            yield
        except ConstraintViolationError as e:
            raise ValidationError(contract_type.__name__, str(e)) from e
