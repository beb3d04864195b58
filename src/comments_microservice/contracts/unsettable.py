"""Tri-state handling for update-contract fields.

This module defines the ``UNSET`` sentinel and the `Unsettable` type alias
used to give update contracts explicit partial-update semantics.

A field of type ``Unsettable[T]`` can take three states:

* ``UNSET``: the field is left unchanged by the update.
* ``None``: the field is explicitly cleared (only if the entity allows it).
* concrete ``T``: the field is explicitly set to a new value.
"""

from dataclasses import dataclass
from typing import Any


def _get_unset() -> "_UnsetType":
    # Factory used by pickle to retrieve the one true instance.
    return UNSET


@dataclass(frozen=True)
class _UnsetType:
    """Sentinel to mark fields intentionally left unset in updates.

    This is distinct from `None`, which indicates an explicit clearing of a value.
    """

    def __bool__(self) -> bool:  # falsy to simplify conditionals
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __reduce__(self):  # keep singleton on pickle
        return (_get_unset, ())


# Singleton instance
UNSET = _UnsetType()

type Unsettable[T] = T | _UnsetType | None


def is_set(value: Any) -> bool:
    """Return True unless ``value`` is the ``UNSET`` sentinel."""
    return not isinstance(value, _UnsetType)
