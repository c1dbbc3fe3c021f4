from __future__ import annotations

import itertools
import random
import string
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Iterator

from returns.result import Failure, Success

from shadow_bean.core.domain.model import cart as transitions
from shadow_bean.core.domain.model.cart import Cart, NewLine
from shadow_bean.core.domain.model.clock import epoch_millis
from shadow_bean.core.domain.model.money import DEFAULT_CURRENCY, Money
from shadow_bean.core.domain.model.taste_profile import TasteProfile
from shadow_bean.core.ports.inbound.cart import CartUseCase
from shadow_bean.core.ports.outbound.cart_repository import CartRepository
from shadow_bean.utils.logging import get_logger

logger = get_logger(__name__)

BASE_PRICE = Decimal("599")

_SKU_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class LineIdFactory:
    clock: Callable[[], int] = epoch_millis
    _counter: itertools.count = field(default_factory=lambda: itertools.count(1))

    def __call__(self) -> str:
        return f"cart-{self.clock()}-{next(self._counter)}"


@dataclass
class SkuFactory:
    clock: Callable[[], int] = epoch_millis
    rng: random.Random = field(default_factory=random.Random)

    def __call__(self) -> str:
        code = "".join(self.rng.choice(_SKU_ALPHABET) for _ in range(6))
        return f"CR_{code}_{str(self.clock())[-4:]}"


@dataclass(frozen=True)
class CartDeps:
    repository: CartRepository
    base_price: Decimal = BASE_PRICE
    currency: str = DEFAULT_CURRENCY
    new_line_id: Callable[[], str] = field(default_factory=LineIdFactory)
    new_sku: Callable[[], str] = field(default_factory=SkuFactory)


class CartService(CartUseCase):
    """The active cart: one line per equivalent taste profile."""

    def __init__(self, deps: CartDeps) -> None:
        self.deps = deps
        self._lock = threading.RLock()
        self._cart = self._load()

    @property
    def cart(self) -> Cart:
        return self._cart

    @contextmanager
    def exclusive(self) -> Iterator[Cart]:
        """Hold the cart still. Writers from other threads wait for the block."""
        with self._lock:
            yield self._cart

    # ---- commands ----------------------------------------------------------

    def add_item(self, profile: TasteProfile, quantity: int = 1) -> Cart:
        with self._lock:
            return self._apply(
                transitions.add_item(self._cart, profile, quantity, self._new_line)
            )

    def remove_item(self, line_id: str) -> Cart:
        with self._lock:
            return self._apply(transitions.remove_item(self._cart, line_id))

    def update_quantity(self, line_id: str, quantity: int) -> Cart:
        with self._lock:
            return self._apply(
                transitions.update_quantity(self._cart, line_id, quantity)
            )

    def clear_cart(self) -> Cart:
        with self._lock:
            return self._apply(transitions.clear(self._cart))

    def set_terms_accepted(self, accepted: bool) -> Cart:
        with self._lock:
            return self._apply(transitions.set_terms_accepted(self._cart, accepted))

    # ---- queries -----------------------------------------------------------

    def get_total_items(self) -> int:
        return self._cart.total_items()

    def get_total_price(self) -> Money:
        return self._cart.total_price()

    # ---- internals ---------------------------------------------------------

    def _new_line(self) -> NewLine:
        return NewLine(
            line_id=self.deps.new_line_id(),
            sku=self.deps.new_sku(),
            unit_price=Money.of(self.deps.base_price, currency=self.deps.currency),
        )

    def _apply(self, new_cart: Cart) -> Cart:
        if new_cart == self._cart:
            return self._cart
        self._cart = new_cart
        saved = self.deps.repository.save(new_cart)
        if isinstance(saved, Failure):
            logger.warning("cart_persist_failed", error=str(saved.failure()))
        return self._cart

    def _load(self) -> Cart:
        loaded = self.deps.repository.load()
        if isinstance(loaded, Success):
            stored = loaded.unwrap()
            if stored is not None:
                logger.info("cart_restored", lines=len(stored.items))
                return stored
            return Cart(currency=self.deps.currency)
        logger.warning("cart_restore_failed", error=str(loaded.failure()))
        return Cart(currency=self.deps.currency)
