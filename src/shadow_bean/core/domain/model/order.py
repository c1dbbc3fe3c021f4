from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Tuple

from shadow_bean.core.domain.model.cart import Cart
from shadow_bean.core.domain.model.clock import epoch_millis
from shadow_bean.core.domain.model.money import Money

GUEST_USER_ID = "guest"
GUEST_DISPLAY_NAME = "Guest"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def can_transition_to(self, target: "OrderStatus") -> bool:
        if target == self:
            return True
        if self.is_terminal:
            return False
        if target == OrderStatus.CANCELLED:
            return True
        return _PROGRESSION.index(target) > _PROGRESSION.index(self)


_PROGRESSION = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)


class PaymentMethod(str, Enum):
    COD = "cod"
    RAZORPAY = "razorpay"
    ONLINE = "online"


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    phone: str
    street: str
    city: str
    state: str
    zip: str


@dataclass(frozen=True)
class OrderItemSnapshot:
    taste_profile_id: str
    taste_profile_name: str
    quantity: int
    unit_price: Money

    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Order:
    id: str
    user_id: str
    status: OrderStatus
    total_amount: Money
    payment_method: PaymentMethod
    shipping_address: ShippingAddress
    items: Tuple[OrderItemSnapshot, ...]
    created_at: datetime
    tracking_status: str | None = None
    payment_reference: str | None = None
    shipment_order_id: str | None = None
    shipment_id: str | None = None

    def with_status(
        self, status: OrderStatus, tracking_status: str | None = None
    ) -> "Order":
        return replace(
            self,
            status=OrderStatus(status),
            tracking_status=(
                tracking_status if tracking_status is not None else self.tracking_status
            ),
        )


def snapshot_items(cart: Cart) -> Tuple[OrderItemSnapshot, ...]:
    """Copy the cart lines into order items; nothing refers back to the cart."""
    return tuple(
        OrderItemSnapshot(
            taste_profile_id=it.taste_profile.id,
            taste_profile_name=it.taste_profile.name,
            quantity=it.quantity,
            unit_price=it.unit_price,
        )
        for it in cart.items
    )


def fallback_order_id(moment: datetime | None = None) -> str:
    return f"order-{epoch_millis(moment)}"
