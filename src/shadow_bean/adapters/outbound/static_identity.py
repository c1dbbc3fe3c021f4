from __future__ import annotations

from dataclasses import dataclass

from shadow_bean.core.ports.outbound.identity import Identity, IdentityProvider


@dataclass
class StaticIdentityProvider(IdentityProvider):
    identity: Identity | None = None

    def current(self) -> Identity | None:
        return self.identity

    def sign_in(self, identity: Identity) -> None:
        self.identity = identity

    def sign_out(self) -> None:
        self.identity = None
