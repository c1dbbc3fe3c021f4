from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests
from requests import RequestException
from returns.result import Failure, Result, Success

from shadow_bean.core.domain.model.errors import (
    CommerceError,
    OrderRejected,
    OrderServiceUnavailable,
)
from shadow_bean.core.domain.model.order import GUEST_USER_ID, PaymentMethod
from shadow_bean.core.ports.outbound.order_service import (
    CreatedOrder,
    CreateOrderRequest,
    OrderService,
)
from shadow_bean.utils.logging import get_logger

logger = get_logger(__name__)

# the orders table keys user_id as uuid
NIL_USER_UUID = "00000000-0000-0000-0000-000000000000"


@dataclass
class HttpOrderService(OrderService):
    """POST /orders against the shop API. One attempt, bounded by ``timeout``."""

    base_url: str
    timeout: float = 10.0
    session: requests.Session = field(default_factory=requests.Session)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    def create_order(
        self, request: CreateOrderRequest
    ) -> Result[CreatedOrder, CommerceError]:
        url = f"{self.base_url}/orders"
        logger.info("order_api_post", url=url, user_id=request.user_id)

        try:
            resp = self.session.post(
                url, json=_to_payload(request), timeout=self.timeout
            )
        except requests.Timeout:
            return Failure(OrderServiceUnavailable(message="order service timed out"))
        except RequestException as e:
            return Failure(
                OrderServiceUnavailable(message=f"order service unreachable: {e}")
            )

        if resp.status_code >= 500:
            return Failure(
                OrderServiceUnavailable(
                    message=f"order service error ({resp.status_code})"
                )
            )
        if resp.status_code >= 400:
            return Failure(
                OrderRejected(
                    message=_error_message(resp), status_code=resp.status_code
                )
            )

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        order_id = body.get("id")
        return Success(
            CreatedOrder(id=str(order_id) if order_id else None, raw=body)
        )


def _to_payload(request: CreateOrderRequest) -> dict[str, Any]:
    method = PaymentMethod(request.payment_method)
    addr = request.shipping_address
    user_id = NIL_USER_UUID if request.user_id == GUEST_USER_ID else request.user_id
    return {
        "user_id": user_id,
        "total_amount": float(request.total_amount.amount),
        "payment_method": method.value,
        "razorpay_payment_id": "cod" if method is PaymentMethod.COD else "",
        "shipping_address": {
            "name": addr.name,
            "phone": addr.phone,
            "street": addr.street,
            "city": addr.city,
            "state": addr.state,
            "zip": addr.zip,
        },
        "items": [
            {
                "taste_profile_id": it.taste_profile_id,
                "taste_profile_name": it.taste_profile_name,
                "quantity": it.quantity,
                "unit_price": float(it.unit_price.amount),
            }
            for it in request.items
        ],
    }


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"request rejected ({resp.status_code})"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"request rejected ({resp.status_code})"
