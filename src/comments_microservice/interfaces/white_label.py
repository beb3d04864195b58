"""White-label directory port.

Registration announces a running service instance to the central directory.
The directory upserts by ``(service_name, context_type_identifier)``, so
repeating a registration after a restart never creates a duplicate entry.
"""

from __future__ import annotations

import abc
from dataclasses import asdict, dataclass
from typing import Any

# pylint: disable=too-few-public-methods


class RegistrationError(Exception):
    """Registration with the directory failed. Never fatal to startup."""


@dataclass(frozen=True, slots=True)
class RegistrationDescriptor:
    """What the directory learns about this instance. Not persisted locally."""

    service_name: str
    directory_address: str
    context_type_identifier: str

    @property
    def key(self) -> tuple[str, str]:
        """Directory upsert key."""
        return (self.service_name, self.context_type_identifier)

    def as_payload(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return asdict(self)


class WhiteLabelDirectory(abc.ABC):
    """Contract for a white-label directory client."""

    @abc.abstractmethod
    def register(self, descriptor: RegistrationDescriptor) -> None:
        """Send ``descriptor`` to the directory.

        Raises:
            RegistrationError: If the directory is unreachable, times out, or
                rejects the registration.
        """
