"""Unit of Work interface.

Defines the AbstractUnitOfWork contract: a context-managed unit of work that
hands out entity stores and has abstract commit/rollback methods.
"""

from __future__ import annotations

import abc
from typing import TypeVar

from .entity_store import EntityStore

E = TypeVar("E")


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work."""

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit; committed work is unaffected.
        """
        self.rollback()

    @abc.abstractmethod
    def entities(self, entity_type: type[E]) -> EntityStore[E]:
        """Return the store for ``entity_type`` bound to this unit of work."""

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
