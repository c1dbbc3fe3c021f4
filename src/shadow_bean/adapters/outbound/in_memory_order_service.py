from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from returns.result import Failure, Result, Success

from shadow_bean.core.domain.model.errors import (
    CommerceError,
    OrderRejected,
    OrderServiceUnavailable,
)
from shadow_bean.core.ports.outbound.order_service import (
    CreatedOrder,
    CreateOrderRequest,
    OrderService,
)


@dataclass
class InMemoryOrderService(OrderService):
    fail: bool = False
    reject: bool = False
    return_id: bool = True
    received: list[CreateOrderRequest] = field(default_factory=list)

    def create_order(
        self, request: CreateOrderRequest
    ) -> Result[CreatedOrder, CommerceError]:
        self.received.append(request)
        if self.fail:
            return Failure(OrderServiceUnavailable(message="order service is down"))
        if self.reject:
            return Failure(
                OrderRejected(message="order rejected", status_code=400)
            )
        order_id = str(uuid4()) if self.return_id else None
        return Success(CreatedOrder(id=order_id, raw={"status": "pending"}))
