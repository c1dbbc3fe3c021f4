from __future__ import annotations

from dataclasses import dataclass

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from shadow_bean.core.domain.model.cart import Cart
from shadow_bean.core.domain.model.errors import (
    CommerceError,
    EmptyCart,
    PaymentMethodUnavailable,
    TermsNotAccepted,
    ValidationError,
)
from shadow_bean.core.domain.model.clock import now_utc
from shadow_bean.core.domain.model.order import (
    GUEST_DISPLAY_NAME,
    GUEST_USER_ID,
    Order,
    OrderStatus,
    PaymentMethod,
    ShippingAddress,
    fallback_order_id,
    snapshot_items,
)
from shadow_bean.core.ports.inbound.cart import CartUseCase
from shadow_bean.core.ports.inbound.checkout import (
    CheckoutCommand,
    CheckoutReceipt,
    CheckoutUseCase,
)
from shadow_bean.core.ports.inbound.order_history import OrderHistoryUseCase
from shadow_bean.core.ports.outbound.addresses import AddressBook
from shadow_bean.core.ports.outbound.identity import Identity, IdentityProvider
from shadow_bean.core.ports.outbound.order_service import (
    CreatedOrder,
    CreateOrderRequest,
    OrderService,
)
from shadow_bean.utils.logging import get_logger

logger = get_logger(__name__)

ONLINE_PAYMENT_NOTICE = (
    "Online payment will be available soon. Please use Cash on Delivery for now."
)


@dataclass(frozen=True)
class CheckoutDeps:
    cart: CartUseCase
    orders: OrderHistoryUseCase
    order_service: OrderService
    identity: IdentityProvider
    addresses: AddressBook | None = None
    require_terms: bool = True


@dataclass(frozen=True)
class CheckoutContext:
    command: CheckoutCommand
    method: PaymentMethod
    cart: Cart
    identity: Identity


@dataclass(frozen=True)
class AddressedCheckout:
    context: CheckoutContext
    shipping_address: ShippingAddress


@dataclass(frozen=True)
class PlacedCheckout:
    checkout: AddressedCheckout
    created: CreatedOrder


@dataclass(frozen=True)
class CheckoutService(CheckoutUseCase):
    """Cart + identity -> order, then an empty cart.

    Nothing is mutated before the order service answers successfully, so a
    failed attempt can simply be repeated. The cart is held exclusively from
    snapshot to commit: a concurrent checkout waits and then finds the cart
    empty, and items added meanwhile land after the clear.
    """

    deps: CheckoutDeps

    def checkout(
        self, command: CheckoutCommand
    ) -> Result[CheckoutReceipt, CommerceError]:
        with self.deps.cart.exclusive():
            result = flow(
                command,
                _check_payment_method,
                bind(self._capture),
                bind(self._resolve_address),
                bind(self._create_remote),
                map_(self._commit),
            )

        if isinstance(result, Failure):
            err = result.failure()
            logger.warning(
                "checkout_failed",
                error_type=type(err).__name__,
                error=str(err),
                retryable=getattr(err, "retryable", False),
            )
        return result

    # ---- steps -------------------------------------------------------------

    def _capture(
        self, checked: tuple[CheckoutCommand, PaymentMethod]
    ) -> Result[CheckoutContext, CommerceError]:
        command, method = checked
        cart = self.deps.cart.cart
        if cart.is_empty():
            return Failure(EmptyCart("cart is empty"))
        if self.deps.require_terms and not cart.terms_accepted:
            return Failure(TermsNotAccepted("terms and conditions must be accepted"))

        identity = self.deps.identity.current() or Identity(
            user_id=GUEST_USER_ID, display_name=GUEST_DISPLAY_NAME
        )
        return Success(
            CheckoutContext(
                command=command, method=method, cart=cart, identity=identity
            )
        )

    def _resolve_address(
        self, ctx: CheckoutContext
    ) -> Result[AddressedCheckout, CommerceError]:
        address = ctx.command.shipping_address
        if address is None and self.deps.addresses is not None:
            address = self.deps.addresses.default_address(ctx.identity.user_id)
        if address is None:
            return Failure(ValidationError("shipping address is required"))
        return Success(AddressedCheckout(context=ctx, shipping_address=address))

    def _create_remote(
        self, addressed: AddressedCheckout
    ) -> Result[PlacedCheckout, CommerceError]:
        req = _to_request(addressed)
        return self.deps.order_service.create_order(req).map(
            lambda created: PlacedCheckout(checkout=addressed, created=created)
        )

    def _commit(self, placed: PlacedCheckout) -> CheckoutReceipt:
        order = _to_order(placed)
        self.deps.orders.add_order(order)
        self.deps.cart.clear_cart()
        logger.info(
            "checkout_completed",
            order_id=order.id,
            user_id=order.user_id,
            total=str(order.total_amount.amount),
            lines=len(order.items),
        )
        return CheckoutReceipt(order=order)


# ---- pure helpers ----------------------------------------------------------


def _check_payment_method(
    command: CheckoutCommand,
) -> Result[tuple[CheckoutCommand, PaymentMethod], CommerceError]:
    if command.payment_method is None:
        return Failure(ValidationError("select a payment method"))
    try:
        method = PaymentMethod(command.payment_method)
    except ValueError:
        return Failure(
            ValidationError(f"unknown payment method: {command.payment_method!r}")
        )
    if method is not PaymentMethod.COD:
        return Failure(
            PaymentMethodUnavailable(message=ONLINE_PAYMENT_NOTICE, method=method.value)
        )
    return Success((command, method))


def _to_request(addressed: AddressedCheckout) -> CreateOrderRequest:
    ctx = addressed.context
    return CreateOrderRequest(
        user_id=ctx.identity.user_id,
        total_amount=ctx.cart.total_price(),
        shipping_address=addressed.shipping_address,
        items=snapshot_items(ctx.cart),
        payment_method=ctx.method,
    )


def _to_order(placed: PlacedCheckout) -> Order:
    ctx = placed.checkout.context
    created_at = now_utc()
    return Order(
        id=placed.created.id or fallback_order_id(created_at),
        user_id=ctx.identity.user_id,
        status=OrderStatus.PENDING,
        total_amount=ctx.cart.total_price(),
        payment_method=ctx.method,
        shipping_address=placed.checkout.shipping_address,
        items=snapshot_items(ctx.cart),
        created_at=created_at,
    )
