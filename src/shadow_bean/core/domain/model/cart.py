from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Tuple

from shadow_bean.core.domain.model.money import DEFAULT_CURRENCY, Money
from shadow_bean.core.domain.model.taste_profile import TasteProfile


@dataclass(frozen=True)
class CartLineItem:
    id: str
    sku: str
    taste_profile: TasteProfile
    quantity: int
    unit_price: Money

    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class NewLine:
    """Identifiers and price stamped onto a line when it is first created."""

    line_id: str
    sku: str
    unit_price: Money


@dataclass(frozen=True)
class Cart:
    items: Tuple[CartLineItem, ...] = ()
    terms_accepted: bool = False
    currency: str = DEFAULT_CURRENCY

    def total_items(self) -> int:
        return sum(it.quantity for it in self.items)

    def total_price(self) -> Money:
        return Money.total((it.subtotal() for it in self.items), self.currency)

    def find_line(self, line_id: str) -> CartLineItem | None:
        return next((it for it in self.items if it.id == line_id), None)

    def find_equivalent(self, profile: TasteProfile) -> CartLineItem | None:
        return next(
            (it for it in self.items if it.taste_profile.is_equivalent(profile)), None
        )

    def is_empty(self) -> bool:
        return not self.items


# ---- pure transitions ------------------------------------------------------


def add_item(
    cart: Cart, profile: TasteProfile, quantity: int, make_line: Callable[[], NewLine]
) -> Cart:
    """Merge into the equivalent line, or append a line from ``make_line``.

    ``make_line`` is only called when no equivalent line exists, so the sku
    and unit price of a merged line stay those of its first insertion.
    """
    if quantity <= 0:
        return cart

    existing = cart.find_equivalent(profile)
    if existing is not None:
        merged = replace(existing, quantity=existing.quantity + quantity)
        return replace(
            cart,
            items=tuple(merged if it.id == existing.id else it for it in cart.items),
        )

    new_line = make_line()
    line = CartLineItem(
        id=new_line.line_id,
        sku=new_line.sku,
        taste_profile=profile,
        quantity=quantity,
        unit_price=new_line.unit_price,
    )
    return replace(cart, items=cart.items + (line,))


def remove_item(cart: Cart, line_id: str) -> Cart:
    return replace(cart, items=tuple(it for it in cart.items if it.id != line_id))


def update_quantity(cart: Cart, line_id: str, quantity: int) -> Cart:
    if quantity <= 0:
        return remove_item(cart, line_id)
    return replace(
        cart,
        items=tuple(
            replace(it, quantity=quantity) if it.id == line_id else it
            for it in cart.items
        ),
    )


def clear(cart: Cart) -> Cart:
    return replace(cart, items=(), terms_accepted=False)


def set_terms_accepted(cart: Cart, accepted: bool) -> Cart:
    return replace(cart, terms_accepted=accepted)
