"""Entity store port.

An :class:`EntityStore` persists one entity type inside a unit of work. Values
passed to ``add``/``update`` are keyed by entity field name; the store assigns
identifiers and returns fully-populated entity instances.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

E = TypeVar("E")  # Entity type


class EntityStoreError(Exception):
    """Base class for entity store errors."""


class ConstraintViolationError(EntityStoreError):
    """Raised when the store rejects values (integrity or data errors)."""


class EntityStore(abc.ABC, Generic[E]):
    """Persistence for a single entity type."""

    @abc.abstractmethod
    def add(self, values: Mapping[str, Any]) -> E:
        """Insert a new entity and return it with its assigned identifier."""

    @abc.abstractmethod
    def get(self, identifier: int) -> E | None:
        """Return the entity with ``identifier``, or None."""

    @abc.abstractmethod
    def list(self) -> list[E]:
        """Return all entities ordered by identifier."""

    @abc.abstractmethod
    def update(self, identifier: int, values: Mapping[str, Any]) -> E | None:
        """Write ``values`` onto the entity; return it, or None if absent."""

    @abc.abstractmethod
    def delete(self, identifier: int) -> bool:
        """Delete the entity; return False if it did not exist."""
