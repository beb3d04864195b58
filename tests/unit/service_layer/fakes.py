"""In-memory fakes for service-layer tests."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from comments_microservice.interfaces.entity_store import (
    ConstraintViolationError,
    EntityStore,
)
from comments_microservice.interfaces.unit_of_work import AbstractUnitOfWork


class FakeEntityStore(EntityStore):
    """Dict-backed store; changes are staged until the unit of work commits."""

    def __init__(self, entity_type: type, rows: dict[int, Any], staged: dict[int, Any]):
        self.entity_type = entity_type
        self.rows = rows
        self.staged = staged
        self.reject_text: str | None = None

    def _view(self) -> dict[int, Any]:
        view = {**self.rows, **self.staged}
        return {k: v for k, v in view.items() if v is not None}

    def add(self, values: Mapping[str, Any]) -> Any:
        if self.reject_text is not None and values.get("text") == self.reject_text:
            raise ConstraintViolationError("text rejected by store")
        identifier = max([0, *self.rows, *self.staged]) + 1
        entity = self.entity_type(id=identifier, **values)
        self.staged[identifier] = entity
        return entity

    def get(self, identifier: int) -> Any:
        return self._view().get(identifier)

    def list(self) -> list[Any]:
        view = self._view()
        return [view[k] for k in sorted(view)]

    def update(self, identifier: int, values: Mapping[str, Any]) -> Any:
        if (current := self.get(identifier)) is None:
            return None
        entity = dataclasses.replace(current, **values)
        self.staged[identifier] = entity
        return entity

    def delete(self, identifier: int) -> bool:
        if self.get(identifier) is None:
            return False
        self.staged[identifier] = None
        return True


class FakeUnitOfWork(AbstractUnitOfWork):
    """A unit of work over a shared dict, counting commits and rollbacks."""

    def __init__(self) -> None:
        self.rows: dict[int, Any] = {}
        self.staged: dict[int, Any] = {}
        self.commits = 0
        self.rollbacks = 0
        self.stores: list[FakeEntityStore] = []
        self.reject_text: str | None = None

    def entities(self, entity_type: type) -> FakeEntityStore:
        store = FakeEntityStore(entity_type, self.rows, self.staged)
        store.reject_text = self.reject_text
        self.stores.append(store)
        return store

    def commit(self):
        self.commits += 1
        for key, value in self.staged.items():
            if value is None:
                self.rows.pop(key, None)
            else:
                self.rows[key] = value
        self.staged.clear()

    def rollback(self):
        self.rollbacks += 1
        self.staged.clear()
