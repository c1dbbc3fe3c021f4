from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from shadow_bean.core.domain.model.errors import CommerceError
from shadow_bean.core.domain.model.order import Order, OrderStatus


class OrderHistoryUseCase(Protocol):
    @property
    def orders(self) -> Sequence[Order]: ...

    @property
    def current_order(self) -> Order | None: ...

    @property
    def is_loading(self) -> bool: ...

    def set_orders(self, orders: Sequence[Order]) -> None: ...

    def add_order(self, order: Order) -> None: ...

    def set_current_order(self, order: Order | None) -> None: ...

    def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        tracking_status: str | None = None,
    ) -> Result[Order | None, CommerceError]: ...

    def get_order(self, order_id: str) -> Result[Order, CommerceError]: ...

    def set_loading(self, loading: bool) -> None: ...
