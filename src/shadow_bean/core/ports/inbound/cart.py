from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from shadow_bean.core.domain.model.cart import Cart
from shadow_bean.core.domain.model.money import Money
from shadow_bean.core.domain.model.taste_profile import TasteProfile


class CartUseCase(Protocol):
    @property
    def cart(self) -> Cart: ...

    def exclusive(self) -> AbstractContextManager[Cart]: ...

    def add_item(self, profile: TasteProfile, quantity: int = 1) -> Cart: ...

    def remove_item(self, line_id: str) -> Cart: ...

    def update_quantity(self, line_id: str, quantity: int) -> Cart: ...

    def clear_cart(self) -> Cart: ...

    def set_terms_accepted(self, accepted: bool) -> Cart: ...

    def get_total_items(self) -> int: ...

    def get_total_price(self) -> Money: ...
