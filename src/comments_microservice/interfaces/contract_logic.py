"""Contract logic port.

A :class:`ContractLogic` performs CRUD translation between one persisted
entity type and its three contract shapes:

- ``A``: the add contract (fields a caller may set on creation),
- ``U``: the update contract (identifier plus tri-state mutable fields),
- ``R``: the read contract (projection returned to callers).

Error semantics
---------------
- ``add`` raises :class:`ValidationError` if a required field is absent.
- ``update`` raises :class:`NotFoundError` for an unknown identifier, whatever
  else the contract carries, and :class:`ValidationError` for an update of an
  existing entity that clears a required field or sets nothing.
- ``get`` and ``delete`` raise :class:`NotFoundError` for an unknown identifier.
  Deleting an already deleted identifier raises :class:`NotFoundError` too.
- Binding a contract triple that does not fit its entity raises
  :class:`ContractBindingError` at configuration time.
"""

from __future__ import annotations

import abc
from typing import Generic, TypeVar

A = TypeVar("A")  # Add contract type
U = TypeVar("U")  # Update contract type
R = TypeVar("R")  # Read contract type


class ContractLogicError(Exception):
    """Base class for errors surfaced to callers of a contract logic."""


class ValidationError(ContractLogicError):
    """Raised when a contract is malformed or incomplete."""

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(f"Invalid {kind} contract: {reason}")
        self.kind = kind
        self.reason = reason


class NotFoundError(ContractLogicError):
    """Raised when an identifier does not resolve to a stored entity."""

    def __init__(self, kind: str, identifier: object) -> None:
        super().__init__(f"{kind} ({identifier}) not found")
        self.kind = kind
        self.identifier = identifier


class ContractBindingError(TypeError):
    """Raised when an entity/contract triple cannot be bound or resolved."""


class ContractLogic(abc.ABC, Generic[A, U, R]):
    """CRUD contract logic bound to one entity type."""

    @abc.abstractmethod
    def add(self, contract: A) -> R:
        """Persist a new entity built from ``contract`` and return its projection."""

    @abc.abstractmethod
    def update(self, contract: U) -> R:
        """Apply the fields set on ``contract`` and return the updated projection."""

    @abc.abstractmethod
    def get(self, identifier: int) -> R:
        """Return the projection of the entity with ``identifier``."""

    @abc.abstractmethod
    def get_all(self) -> list[R]:
        """Return the projections of all stored entities, ordered by identifier."""

    @abc.abstractmethod
    def delete(self, identifier: int) -> None:
        """Delete the entity with ``identifier``."""
