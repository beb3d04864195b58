"""Type-keyed registry of contract bindings.

Bindings are registered once, by type, at configuration time::

    resolver = ContractLogicResolver(context.unit_of_work)
    resolver.bind(CommentEntity, AddCommentContract, UpdateCommentContract,
                  CommentContract, created_field="creation_date_time")
    comments = resolver.resolve(CommentEntity, AddCommentContract,
                                UpdateCommentContract, CommentContract)

``resolve`` is typed on its arguments, so ``comments`` above is a
``ContractLogic[AddCommentContract, UpdateCommentContract, CommentContract]``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from comments_microservice.interfaces.contract_logic import (
    ContractBindingError,
    ContractLogic,
)
from comments_microservice.interfaces.unit_of_work import AbstractUnitOfWork

from .contract_logic import MappedContractLogic
from .mapping import ContractMapping

logger = logging.getLogger(__name__)

E = TypeVar("E")
A = TypeVar("A")
U = TypeVar("U")
R = TypeVar("R")


class ContractLogicResolver:
    """Resolves contract logics for registered entity/contract triples.

    Args:
        uow_factory: Returns a fresh unit of work; handed to every resolved logic.
    """

    def __init__(self, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self._uow_factory = uow_factory
        self._mappings: dict[tuple[type, type, type, type], ContractMapping] = {}

    def register(self, mapping: ContractMapping) -> None:
        """Register ``mapping``.

        Raises:
            ContractBindingError: If the same triple is already registered.
        """
        if mapping.key in self._mappings:
            raise ContractBindingError(
                f"{self._describe(mapping.key)} is already registered"
            )
        self._mappings[mapping.key] = mapping
        logger.debug("Bound %s", self._describe(mapping.key))

    def bind(  # pylint: disable=too-many-arguments
        self,
        entity_type: type[E],
        add_type: type[A],
        update_type: type[U],
        read_type: type[R],
        **options: Any,
    ) -> ContractMapping[E, A, U, R]:
        """Build a :class:`ContractMapping` from the types and register it."""
        mapping = ContractMapping(entity_type, add_type, update_type, read_type, **options)
        self.register(mapping)
        return mapping

    def resolve(
        self,
        entity_type: type[E],
        add_type: type[A],
        update_type: type[U],
        read_type: type[R],
    ) -> ContractLogic[A, U, R]:
        """Return the contract logic bound to the given types.

        Raises:
            ContractBindingError: If no binding exists for the triple.
        """
        key = (entity_type, add_type, update_type, read_type)
        if (mapping := self._mappings.get(key)) is None:
            raise ContractBindingError(f"No binding for {self._describe(key)}")
        return MappedContractLogic(mapping, self._uow_factory)

    @staticmethod
    def _describe(key: tuple[type, ...]) -> str:
        entity, *contracts = key
        return f"{entity.__name__}<{', '.join(c.__name__ for c in contracts)}>"
