from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Success

from shadow_bean.core.domain.model.cart import Cart, CartLineItem
from shadow_bean.core.domain.model.errors import (
    CommerceError,
    InvalidStatusTransition,
    OrderNotFound,
    OrderRejected,
    OrderServiceUnavailable,
    PaymentMethodUnavailable,
    PersistenceError,
    ValidationError,
)
from shadow_bean.core.domain.model.order import (
    Order,
    OrderStatus,
    PaymentMethod,
    ShippingAddress,
)
from shadow_bean.core.domain.model.taste_profile import (
    SENSORY_MAX,
    SENSORY_MIN,
    GrindType,
    RoastLevel,
    TasteProfile,
)
from shadow_bean.core.domain.service.taste_profile_library import TasteProfileLibrary
from shadow_bean.core.ports.inbound.cart import CartUseCase
from shadow_bean.core.ports.inbound.checkout import CheckoutCommand, CheckoutUseCase
from shadow_bean.core.ports.inbound.order_history import OrderHistoryUseCase

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class TasteProfileIO(BaseModel):
    id: str = Field(min_length=1, examples=["tp-1"])
    name: str = Field(examples=["Morning Blend"])
    bitterness: int = Field(ge=SENSORY_MIN, le=SENSORY_MAX, examples=[3])
    acidity: int = Field(ge=SENSORY_MIN, le=SENSORY_MAX, examples=[2])
    body: int = Field(ge=SENSORY_MIN, le=SENSORY_MAX, examples=[4])
    flavour: int = Field(ge=SENSORY_MIN, le=SENSORY_MAX, examples=[3])
    roast_level: RoastLevel
    grind_type: GrindType


class AddItemRequest(BaseModel):
    taste_profile: TasteProfileIO
    quantity: int = Field(1, gt=0)


class UpdateQuantityRequest(BaseModel):
    quantity: int


class TermsRequest(BaseModel):
    accepted: bool


class CartLineOut(BaseModel):
    id: str
    sku: str
    taste_profile: TasteProfileIO
    quantity: int
    unit_price: str
    subtotal: str


class CartResponse(BaseModel):
    items: list[CartLineOut]
    terms_accepted: bool
    total_items: int
    total_price: str
    currency: str


class ShippingAddressIO(BaseModel):
    name: str = Field(min_length=1)
    phone: str
    street: str
    city: str = Field(min_length=1)
    state: str
    zip: str = Field(min_length=1)


class OrderItemOut(BaseModel):
    taste_profile_id: str
    taste_profile_name: str
    quantity: int
    unit_price: str


class OrderResponse(BaseModel):
    id: str
    user_id: str
    status: OrderStatus
    total_amount: str
    currency: str
    payment_method: PaymentMethod
    tracking_status: str | None
    shipping_address: ShippingAddressIO
    items: list[OrderItemOut]
    created_at: datetime


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    is_loading: bool


class StatusUpdateRequest(BaseModel):
    status: OrderStatus
    tracking_status: str | None = None


class CheckoutRequest(BaseModel):
    payment_method: PaymentMethod | None = None
    shipping_address: ShippingAddressIO | None = None


class CustomizationRequest(BaseModel):
    bitterness: int | None = Field(None, ge=SENSORY_MIN, le=SENSORY_MAX)
    acidity: int | None = Field(None, ge=SENSORY_MIN, le=SENSORY_MAX)
    body: int | None = Field(None, ge=SENSORY_MIN, le=SENSORY_MAX)
    flavour: int | None = Field(None, ge=SENSORY_MIN, le=SENSORY_MAX)
    roast_level: RoastLevel | None = None
    grind_type: GrindType | None = None


class ErrorResponse(BaseModel):
    type: str
    message: str
    retryable: bool = False
    details: list[dict[str, Any]] | None = None


# ---- mapping helpers -------------------------------------------------------


def _profile_out(p: TasteProfile) -> TasteProfileIO:
    return TasteProfileIO(
        id=p.id,
        name=p.name,
        bitterness=p.bitterness,
        acidity=p.acidity,
        body=p.body,
        flavour=p.flavour,
        roast_level=p.roast_level,
        grind_type=p.grind_type,
    )


def _line_out(it: CartLineItem) -> CartLineOut:
    return CartLineOut(
        id=it.id,
        sku=it.sku,
        taste_profile=_profile_out(it.taste_profile),
        quantity=it.quantity,
        unit_price=str(it.unit_price.amount),
        subtotal=str(it.subtotal().amount),
    )


def _cart_out(cart: Cart) -> CartResponse:
    total = cart.total_price()
    return CartResponse(
        items=[_line_out(it) for it in cart.items],
        terms_accepted=cart.terms_accepted,
        total_items=cart.total_items(),
        total_price=str(total.amount),
        currency=total.currency,
    )


def _address_in(a: ShippingAddressIO) -> ShippingAddress:
    return ShippingAddress(
        name=a.name,
        phone=a.phone,
        street=a.street,
        city=a.city,
        state=a.state,
        zip=a.zip,
    )


def _order_out(o: Order) -> OrderResponse:
    addr = o.shipping_address
    return OrderResponse(
        id=o.id,
        user_id=o.user_id,
        status=o.status,
        total_amount=str(o.total_amount.amount),
        currency=o.total_amount.currency,
        payment_method=o.payment_method,
        tracking_status=o.tracking_status,
        shipping_address=ShippingAddressIO(
            name=addr.name,
            phone=addr.phone,
            street=addr.street,
            city=addr.city,
            state=addr.state,
            zip=addr.zip,
        ),
        items=[
            OrderItemOut(
                taste_profile_id=it.taste_profile_id,
                taste_profile_name=it.taste_profile_name,
                quantity=it.quantity,
                unit_price=str(it.unit_price.amount),
            )
            for it in o.items
        ],
        created_at=o.created_at,
    )


def _map_error_to_http(err: CommerceError) -> tuple[int, ErrorResponse]:
    body = ErrorResponse(
        type=type(err).__name__,
        message=str(err),
        retryable=getattr(err, "retryable", False),
    )

    if isinstance(err, ValidationError):
        return 400, body

    if isinstance(err, OrderNotFound):
        return 404, body

    if isinstance(err, InvalidStatusTransition):
        return 409, body

    if isinstance(err, (PaymentMethodUnavailable, OrderRejected)):
        return 422, body

    if isinstance(err, OrderServiceUnavailable):
        return 503, body

    if isinstance(err, PersistenceError):
        return 500, body

    return 500, body


def create_app(
    cart_uc: CartUseCase,
    orders_uc: OrderHistoryUseCase,
    checkout_uc: CheckoutUseCase,
    profiles: TasteProfileLibrary,
) -> FastAPI:
    app = FastAPI(title="shadow_bean")

    # --- exception handlers --------------------------------------------------

    @app.exception_handler(CommerceError)
    async def handle_domain_error(_: Request, exc: CommerceError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()],
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # cart

    @app.get("/cart", response_model=CartResponse)
    def get_cart() -> Any:
        return _cart_out(cart_uc.cart)

    @app.post("/cart/items", response_model=CartResponse, status_code=201)
    def add_cart_item(req: AddItemRequest) -> Any:
        profile = TasteProfile(**req.taste_profile.model_dump())
        return _cart_out(cart_uc.add_item(profile, req.quantity))

    @app.patch("/cart/items/{line_id}", response_model=CartResponse)
    def update_cart_item(line_id: str, req: UpdateQuantityRequest) -> Any:
        return _cart_out(cart_uc.update_quantity(line_id, req.quantity))

    @app.delete("/cart/items/{line_id}", response_model=CartResponse)
    def remove_cart_item(line_id: str) -> Any:
        return _cart_out(cart_uc.remove_item(line_id))

    @app.delete("/cart", response_model=CartResponse)
    def clear_cart() -> Any:
        return _cart_out(cart_uc.clear_cart())

    @app.put("/cart/terms", response_model=CartResponse)
    def set_terms(req: TermsRequest) -> Any:
        return _cart_out(cart_uc.set_terms_accepted(req.accepted))

    # orders

    @app.get("/orders", response_model=OrderListResponse)
    def list_orders() -> Any:
        return OrderListResponse(
            items=[_order_out(o) for o in orders_uc.orders],
            is_loading=orders_uc.is_loading,
        )

    @app.get(
        "/orders/{order_id}",
        response_model=OrderResponse,
        responses={404: {"model": ErrorResponse}},
    )
    def get_order(order_id: str) -> Any:
        result = orders_uc.get_order(order_id)
        if isinstance(result, Success):
            return _order_out(result.unwrap())
        raise result.failure()

    @app.put(
        "/orders/{order_id}/status",
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    )
    def update_order_status(order_id: str, req: StatusUpdateRequest) -> Any:
        result = orders_uc.update_order_status(
            order_id, req.status, req.tracking_status
        )
        if isinstance(result, Success):
            updated = result.unwrap()
            # unknown ids are ignored, not reported
            return {"updated": updated is not None}
        raise result.failure()

    # checkout

    @app.post(
        "/checkout",
        response_model=OrderResponse,
        status_code=201,
        responses={
            400: {"model": ErrorResponse},
            422: {"model": ErrorResponse},
            503: {"model": ErrorResponse},
        },
    )
    def checkout(req: CheckoutRequest) -> Any:
        cmd = CheckoutCommand(
            payment_method=req.payment_method,
            shipping_address=(
                _address_in(req.shipping_address) if req.shipping_address else None
            ),
        )
        result = checkout_uc.checkout(cmd)
        if isinstance(result, Success):
            return _order_out(result.unwrap().order)
        raise result.failure()

    # taste profiles

    @app.get("/taste-profiles", response_model=list[TasteProfileIO])
    def list_profiles() -> Any:
        return [_profile_out(p) for p in profiles.profiles]

    @app.patch("/taste-profiles/customization")
    def customize(req: CustomizationRequest) -> Any:
        draft = profiles.set_customization(**req.model_dump(exclude_none=True))
        return {k: getattr(v, "value", v) for k, v in draft.items()}

    @app.post("/taste-profiles", status_code=201)
    def save_profile() -> Any:
        result = profiles.save_customization()
        if isinstance(result, Success):
            saved = result.unwrap()
            return {"saved": _profile_out(saved) if saved is not None else None}
        raise result.failure()

    @app.delete("/taste-profiles/{profile_id}", status_code=204)
    def delete_profile(profile_id: str) -> None:
        profiles.delete_profile(profile_id)

    return app
