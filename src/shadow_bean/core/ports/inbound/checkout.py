from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from shadow_bean.core.domain.model.errors import CommerceError
from shadow_bean.core.domain.model.order import Order, PaymentMethod, ShippingAddress


@dataclass(frozen=True)
class CheckoutCommand:
    payment_method: PaymentMethod | None
    shipping_address: ShippingAddress | None = None


@dataclass(frozen=True)
class CheckoutReceipt:
    order: Order


class CheckoutUseCase(Protocol):
    def checkout(
        self, command: CheckoutCommand
    ) -> Result[CheckoutReceipt, CommerceError]: ...
