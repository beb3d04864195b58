"""In-memory white-label directory.

Behaves like the real directory: entries are upserted by
``(service_name, context_type_identifier)``. Useful for tests and for running
the service without a directory.
"""

from __future__ import annotations

import threading

from comments_microservice.interfaces.white_label import (
    RegistrationDescriptor,
    WhiteLabelDirectory,
)


class InMemoryWhiteLabelDirectory(WhiteLabelDirectory):
    """Thread-safe in-memory directory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[tuple[str, str], RegistrationDescriptor] = {}
        self.calls = 0

    def register(self, descriptor: RegistrationDescriptor) -> None:
        with self._lock:
            self.calls += 1
            self._entries[descriptor.key] = descriptor

    @property
    def entries(self) -> list[RegistrationDescriptor]:
        """Current directory entries."""
        with self._lock:
            return list(self._entries.values())
