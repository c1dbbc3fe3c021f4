from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Sequence

from returns.result import Failure, Result, Success

from shadow_bean.core.domain.model.errors import (
    CommerceError,
    InvalidStatusTransition,
    OrderNotFound,
    ValidationError,
)
from shadow_bean.core.domain.model.order import Order, OrderStatus
from shadow_bean.core.ports.inbound.order_history import OrderHistoryUseCase
from shadow_bean.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderHistoryDeps:
    # off: any status is written as given, the order service owns legality
    strict_transitions: bool = False


class OrderHistoryService(OrderHistoryUseCase):
    """Placed orders, most recent first, plus the order focused in a detail view."""

    def __init__(self, deps: OrderHistoryDeps | None = None) -> None:
        self.deps = deps or OrderHistoryDeps()
        self._lock = threading.RLock()
        self._orders: tuple[Order, ...] = ()
        self._current: Order | None = None
        self._loading = False

    @property
    def orders(self) -> Sequence[Order]:
        return self._orders

    @property
    def current_order(self) -> Order | None:
        return self._current

    @property
    def is_loading(self) -> bool:
        return self._loading

    def set_orders(self, orders: Sequence[Order]) -> None:
        with self._lock:
            self._orders = tuple(orders)

    def add_order(self, order: Order) -> None:
        with self._lock:
            self._orders = (order,) + self._orders

    def set_current_order(self, order: Order | None) -> None:
        with self._lock:
            self._current = order

    def set_loading(self, loading: bool) -> None:
        with self._lock:
            self._loading = loading

    def get_order(self, order_id: str) -> Result[Order, CommerceError]:
        found = next((o for o in self._orders if o.id == order_id), None)
        if found is None:
            return Failure(OrderNotFound(message="order not found", order_id=order_id))
        return Success(found)

    def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        tracking_status: str | None = None,
    ) -> Result[Order | None, CommerceError]:
        try:
            target = OrderStatus(status)
        except ValueError:
            return Failure(ValidationError(f"unknown order status: {status!r}"))
        with self._lock:
            current = next((o for o in self._orders if o.id == order_id), None)
            if current is None:
                return Success(None)

            if self.deps.strict_transitions and not current.status.can_transition_to(
                target
            ):
                return Failure(
                    InvalidStatusTransition(
                        message="status change not allowed",
                        order_id=order_id,
                        current=current.status.value,
                        target=target.value,
                    )
                )

            updated = current.with_status(target, tracking_status)
            self._orders = tuple(
                updated if o.id == order_id else o for o in self._orders
            )

        logger.info(
            "order_status_updated",
            order_id=order_id,
            status=target.value,
            tracking_status=updated.tracking_status,
        )
        return Success(updated)
