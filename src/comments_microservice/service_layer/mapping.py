"""Binding of an entity type to its add/update/read contract types.

A :class:`ContractMapping` is built once, at configuration time, from four
dataclass types. Building it checks that the contracts fit the entity:

- every add, update and read field is an entity field,
- the add contract cannot set the identifier or audit fields,
- the update contract carries the identifier,
- every *required* entity field can be supplied by the add contract.

A field is required when its annotation does not admit ``None`` and it has no
default, excluding the identifier and audit fields. Mismatches raise
:class:`ContractBindingError` here rather than on the first request.

At request time the mapping turns contracts into the values an entity store
writes, and entities into read contracts.
"""

from __future__ import annotations

import types
from collections.abc import Callable
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar, Union, get_args, get_origin, get_type_hints

from comments_microservice.contracts.unsettable import is_set
from comments_microservice.interfaces.contract_logic import (
    ContractBindingError,
    ValidationError,
)

E = TypeVar("E")  # Entity type
A = TypeVar("A")  # Add contract type
U = TypeVar("U")  # Update contract type
R = TypeVar("R")  # Read contract type


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _admits_none(hint: Any) -> bool:
    if hint is type(None) or hint is Any:
        return True
    if get_origin(hint) in (Union, types.UnionType):
        return type(None) in get_args(hint)
    return False


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _field_names(cls: type) -> list[str]:
    return [f.name for f in fields(cls) if f.init]


@dataclass(frozen=True)
class ContractMapping(Generic[E, A, U, R]):  # pylint: disable=too-many-instance-attributes
    """Mapping rules between one entity and its three contract shapes.

    Args:
        entity_type: Entity dataclass.
        add_type: Add contract dataclass.
        update_type: Update contract dataclass; unset fields hold ``UNSET``.
        read_type: Read contract dataclass.
        id_field: Entity field holding the identifier.
        created_field: Entity field stamped with ``clock()`` on add, if any.
        modified_field: Entity field stamped with ``clock()`` on update, if any.
        clock: Source of audit timestamps.

    Raises:
        ContractBindingError: If the contract types do not fit the entity.
    """

    entity_type: type[E]
    add_type: type[A]
    update_type: type[U]
    read_type: type[R]
    id_field: str = "id"
    created_field: str | None = None
    modified_field: str | None = None
    clock: Callable[[], datetime] = utcnow
    required_fields: frozenset[str] = field(init=False)
    non_nullable_fields: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        for cls in (self.entity_type, self.add_type, self.update_type, self.read_type):
            if not (isinstance(cls, type) and is_dataclass(cls)):
                raise ContractBindingError(f"{cls!r} is not a dataclass type")

        entity_fields = {f.name: f for f in fields(self.entity_type)}
        try:
            hints = get_type_hints(self.entity_type)
        except (NameError, TypeError) as e:
            raise self._binding_error(
                self.entity_type, f"has unresolvable annotations: {e}"
            ) from e
        audit = {name for name in (self.created_field, self.modified_field) if name}

        for name in {self.id_field} | audit:
            if name not in entity_fields:
                raise self._binding_error(self.entity_type, f"has no field {name!r}")

        add_fields = set(_field_names(self.add_type))
        update_fields = set(_field_names(self.update_type))
        for cls, names in (
            (self.add_type, add_fields),
            (self.update_type, update_fields),
            (self.read_type, set(_field_names(self.read_type))),
        ):
            if extra := sorted(names - entity_fields.keys()):
                raise self._binding_error(cls, f"fields not on entity: {extra}")

        if forbidden := sorted(add_fields & ({self.id_field} | audit)):
            raise self._binding_error(self.add_type, f"must not set {forbidden}")
        if self.id_field not in update_fields:
            raise self._binding_error(self.update_type, f"must carry {self.id_field!r}")
        if audit & update_fields:
            raise self._binding_error(self.update_type, f"must not set {sorted(audit)}")

        non_nullable = {
            name for name in entity_fields if not _admits_none(hints.get(name, Any))
        }
        required = {
            name
            for name in non_nullable - {self.id_field} - audit
            if entity_fields[name].default is MISSING
            and entity_fields[name].default_factory is MISSING
        }
        if unsupplied := sorted(required - add_fields):
            raise self._binding_error(
                self.add_type, f"cannot supply required fields {unsupplied}"
            )

        object.__setattr__(self, "required_fields", frozenset(required))
        object.__setattr__(self, "non_nullable_fields", frozenset(non_nullable))

    # --------------------------------------------------------------------- #
    # Binding metadata
    # --------------------------------------------------------------------- #

    @property
    def key(self) -> tuple[type, type, type, type]:
        """Registry key of this binding."""
        return (self.entity_type, self.add_type, self.update_type, self.read_type)

    @property
    def kind(self) -> str:
        """Human-readable entity name, e.g. ``"Comment"`` for ``CommentEntity``."""
        return self.entity_type.__name__.removesuffix("Entity")

    # --------------------------------------------------------------------- #
    # Request-time translation
    # --------------------------------------------------------------------- #

    def values_for_add(self, contract: A) -> dict[str, Any]:
        """Entity values for creating an entity from ``contract``.

        Raises:
            ValidationError: If a required field is missing or blank.
        """
        self._check_instance(contract, self.add_type)
        values = {name: getattr(contract, name) for name in _field_names(self.add_type)}
        if missing := sorted(n for n in self.required_fields if _is_blank(values[n])):
            raise ValidationError(
                self.add_type.__name__, f"missing required field(s): {', '.join(missing)}"
            )
        if self.created_field:
            values[self.created_field] = self.clock()
        return values

    def identifier_for_update(self, contract: U) -> Any:
        """Identifier carried by the update ``contract``.

        Raises:
            ValidationError: If the identifier is missing.
        """
        self._check_instance(contract, self.update_type)
        identifier = getattr(contract, self.id_field)
        if identifier is None:
            raise ValidationError(
                self.update_type.__name__, f"{self.id_field} is required"
            )
        return identifier

    def values_for_update(self, contract: U) -> tuple[Any, dict[str, Any]]:
        """Identifier and changed entity values for ``contract``.

        Only fields that are not ``UNSET`` are returned.

        Raises:
            ValidationError: If the identifier is missing, nothing is set, or a
                required field would be cleared or blanked.
        """
        kind = self.update_type.__name__
        identifier = self.identifier_for_update(contract)

        values = {
            name: value
            for name in _field_names(self.update_type)
            if name != self.id_field and is_set(value := getattr(contract, name))
        }
        if not values:
            raise ValidationError(kind, "no fields to update")
        for name, value in values.items():
            if value is None and name in self.non_nullable_fields:
                raise ValidationError(kind, f"{name} cannot be cleared")
            if name in self.required_fields and _is_blank(value):
                raise ValidationError(kind, f"{name} cannot be blank")

        if self.modified_field:
            values[self.modified_field] = self.clock()
        return identifier, values

    def to_read(self, entity: E) -> R:
        """Project ``entity`` onto the read contract."""
        return self.read_type(
            **{name: getattr(entity, name) for name in _field_names(self.read_type)}
        )

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    @staticmethod
    def _binding_error(cls: type, reason: str) -> ContractBindingError:
        return ContractBindingError(f"{cls.__name__} {reason}")

    @staticmethod
    def _check_instance(contract: Any, expected: type) -> None:
        if not isinstance(contract, expected):
            raise TypeError(
                f"Expected {expected.__name__}, got {type(contract).__name__}"
            )
