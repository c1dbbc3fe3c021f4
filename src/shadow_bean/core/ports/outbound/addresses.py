from __future__ import annotations

from typing import Protocol

from shadow_bean.core.domain.model.order import ShippingAddress


class AddressBook(Protocol):
    def default_address(self, user_id: str) -> ShippingAddress | None: ...
