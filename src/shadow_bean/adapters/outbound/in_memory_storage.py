from __future__ import annotations

from dataclasses import dataclass, field

from returns.result import Failure, Result, Success

from shadow_bean.core.domain.model.errors import CommerceError, PersistenceError
from shadow_bean.core.ports.outbound.storage import KeyValueStorage


@dataclass
class InMemoryKeyValueStorage(KeyValueStorage):
    _store: dict[str, str] = field(default_factory=dict)
    fail_writes: bool = False

    def get(self, key: str) -> Result[str | None, CommerceError]:
        return Success(self._store.get(key))

    def set(self, key: str, value: str) -> Result[None, CommerceError]:
        if self.fail_writes:
            return Failure(PersistenceError(message="storage is read-only"))
        self._store[key] = value
        return Success(None)

    def remove(self, key: str) -> Result[None, CommerceError]:
        self._store.pop(key, None)
        return Success(None)
