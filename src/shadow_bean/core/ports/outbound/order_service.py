from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence

from returns.result import Result

from shadow_bean.core.domain.model.errors import CommerceError
from shadow_bean.core.domain.model.money import Money
from shadow_bean.core.domain.model.order import (
    OrderItemSnapshot,
    PaymentMethod,
    ShippingAddress,
)


@dataclass(frozen=True)
class CreateOrderRequest:
    user_id: str
    total_amount: Money
    shipping_address: ShippingAddress
    items: Sequence[OrderItemSnapshot]
    payment_method: PaymentMethod


@dataclass(frozen=True)
class CreatedOrder:
    id: str | None
    raw: Mapping[str, Any] = field(default_factory=dict)


class OrderService(Protocol):
    def create_order(
        self, request: CreateOrderRequest
    ) -> Result[CreatedOrder, CommerceError]: ...
