from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Identity:
    user_id: str
    display_name: str
    phone: str | None = None


class IdentityProvider(Protocol):
    def current(self) -> Identity | None:
        """The signed-in user, or None when browsing as a guest."""
        ...
