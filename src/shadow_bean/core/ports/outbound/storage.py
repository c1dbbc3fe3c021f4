from __future__ import annotations

from typing import Protocol

from returns.result import Result

from shadow_bean.core.domain.model.errors import CommerceError


class KeyValueStorage(Protocol):
    """Durable string storage that survives process restarts."""

    def get(self, key: str) -> Result[str | None, CommerceError]: ...

    def set(self, key: str, value: str) -> Result[None, CommerceError]: ...

    def remove(self, key: str) -> Result[None, CommerceError]: ...
