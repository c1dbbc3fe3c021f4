from __future__ import annotations

from typing import Protocol

from returns.result import Result

from shadow_bean.core.domain.model.cart import Cart
from shadow_bean.core.domain.model.errors import CommerceError


class CartRepository(Protocol):
    def load(self) -> Result[Cart | None, CommerceError]: ...

    def save(self, cart: Cart) -> Result[None, CommerceError]: ...
