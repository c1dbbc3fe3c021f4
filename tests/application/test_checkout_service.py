"""Tests for CheckoutService: atomicity, snapshots and preconditions."""

import threading

import pytest
from returns.result import Failure, Success

from shadow_bean.adapters.outbound.in_memory_order_service import InMemoryOrderService
from shadow_bean.core.domain.model.errors import (
    EmptyCart,
    OrderRejected,
    OrderServiceUnavailable,
    PaymentMethodUnavailable,
    TermsNotAccepted,
    ValidationError,
)
from shadow_bean.core.domain.model.money import Money
from shadow_bean.core.domain.model.order import (
    GUEST_USER_ID,
    OrderStatus,
    PaymentMethod,
)
from shadow_bean.core.domain.service.checkout_service import (
    CheckoutDeps,
    CheckoutService,
)
from shadow_bean.core.ports.inbound.checkout import CheckoutCommand

from conftest import make_profile


@pytest.fixture
def filled_cart(cart_service, profile_a, profile_b):
    cart_service.add_item(profile_a, 2)
    cart_service.add_item(profile_b, 1)
    cart_service.set_terms_accepted(True)
    return cart_service


def cod(address=None) -> CheckoutCommand:
    return CheckoutCommand(payment_method=PaymentMethod.COD, shipping_address=address)


class TestSuccessfulCheckout:
    def test_scenario_order_created_and_cart_cleared(
        self, filled_cart, checkout_service, order_history, address
    ):
        result = checkout_service.checkout(cod(address))

        order = result.unwrap().order
        assert order.total_amount == Money.of(1797)
        assert len(order.items) == 2
        assert order.status is OrderStatus.PENDING
        assert order.payment_method is PaymentMethod.COD
        assert order.user_id == "user-42"
        assert order.shipping_address == address
        assert filled_cart.cart.items == ()
        assert filled_cart.cart.terms_accepted is False
        assert order_history.orders == (order,)

    def test_uses_remote_order_id(self, filled_cart, checkout_service, address):
        order = checkout_service.checkout(cod(address)).unwrap().order
        assert not order.id.startswith("order-")

    def test_falls_back_to_local_id(
        self, filled_cart, checkout_service, order_service, address
    ):
        order_service.return_id = False
        order = checkout_service.checkout(cod(address)).unwrap().order
        assert order.id.startswith("order-")

    def test_request_snapshot_matches_cart(
        self, filled_cart, checkout_service, order_service, address
    ):
        lines = filled_cart.cart.items
        checkout_service.checkout(cod(address))

        (request,) = order_service.received
        assert request.total_amount == Money.of(1797)
        assert [(i.taste_profile_id, i.quantity) for i in request.items] == [
            (ln.taste_profile.id, ln.quantity) for ln in lines
        ]
        assert [i.taste_profile_name for i in request.items] == [
            ln.taste_profile.name for ln in lines
        ]
        assert all(i.unit_price == Money.of(599) for i in request.items)

    def test_order_unaffected_by_later_cart_changes(
        self, filled_cart, checkout_service, address
    ):
        order = checkout_service.checkout(cod(address)).unwrap().order
        items_before = order.items

        filled_cart.add_item(make_profile(), 10)
        line = filled_cart.cart.items[0]
        filled_cart.update_quantity(line.id, 50)

        assert order.items == items_before
        assert order.total_amount == Money.of(1797)
        assert order.items[0].quantity == 2

    def test_default_address_from_address_book(
        self, filled_cart, checkout_service, address_book, address
    ):
        address_book.add("user-42", address)
        order = checkout_service.checkout(cod()).unwrap().order
        assert order.shipping_address == address

    def test_guest_checkout_uses_sentinel(
        self, filled_cart, checkout_service, identity, address
    ):
        identity.sign_out()
        order = checkout_service.checkout(cod(address)).unwrap().order
        assert order.user_id == GUEST_USER_ID


class TestFailedCheckout:
    def test_scenario_service_failure_leaves_state_untouched(
        self, filled_cart, checkout_service, order_service, order_history, address
    ):
        before = filled_cart.cart
        order_service.fail = True

        result = checkout_service.checkout(cod(address))

        assert isinstance(result, Failure)
        err = result.failure()
        assert isinstance(err, OrderServiceUnavailable)
        assert err.retryable is True
        assert filled_cart.cart == before
        assert order_history.orders == ()

    def test_rejection_is_not_retryable(
        self, filled_cart, checkout_service, order_service, address
    ):
        order_service.reject = True
        err = checkout_service.checkout(cod(address)).failure()
        assert isinstance(err, OrderRejected)
        assert err.retryable is False

    def test_retry_after_failure_succeeds_once(
        self, filled_cart, checkout_service, order_service, order_history, address
    ):
        order_service.fail = True
        checkout_service.checkout(cod(address))
        order_service.fail = False

        result = checkout_service.checkout(cod(address))

        assert result.unwrap().order.total_amount == Money.of(1797)
        assert len(order_history.orders) == 1
        assert len(order_service.received) == 2


class TestPreconditions:
    def test_missing_payment_method(self, filled_cart, checkout_service, address):
        err = checkout_service.checkout(CheckoutCommand(None, address)).failure()
        assert isinstance(err, ValidationError)

    @pytest.mark.parametrize("method", [PaymentMethod.RAZORPAY, PaymentMethod.ONLINE])
    def test_online_payment_is_coming_soon(
        self, filled_cart, checkout_service, order_service, address, method
    ):
        before = filled_cart.cart
        err = checkout_service.checkout(CheckoutCommand(method, address)).failure()
        assert isinstance(err, PaymentMethodUnavailable)
        assert "Cash on Delivery" in err.message
        assert order_service.received == []
        assert filled_cart.cart == before

    def test_empty_cart_is_rejected(self, checkout_service, order_service, address):
        err = checkout_service.checkout(cod(address)).failure()
        assert isinstance(err, EmptyCart)
        assert order_service.received == []

    def test_terms_must_be_accepted(
        self, cart_service, checkout_service, profile_a, address
    ):
        cart_service.add_item(profile_a)
        err = checkout_service.checkout(cod(address)).failure()
        assert isinstance(err, TermsNotAccepted)

    def test_terms_gate_can_be_disabled(
        self, cart_service, order_history, order_service, identity, profile_a, address
    ):
        service = CheckoutService(
            CheckoutDeps(
                cart=cart_service,
                orders=order_history,
                order_service=order_service,
                identity=identity,
                require_terms=False,
            )
        )
        cart_service.add_item(profile_a)
        assert service.checkout(cod(address)).unwrap().order.total_amount == Money.of(599)

    def test_missing_address(self, filled_cart, checkout_service, order_service):
        err = checkout_service.checkout(cod()).failure()
        assert isinstance(err, ValidationError)
        assert "address" in err.message
        assert order_service.received == []

    def test_unknown_payment_method_is_a_validation_failure(
        self, filled_cart, checkout_service, order_service, address
    ):
        result = checkout_service.checkout(CheckoutCommand("upi", address))
        assert isinstance(result, Failure)
        assert isinstance(result.failure(), ValidationError)
        assert order_service.received == []


class GatedOrderService(InMemoryOrderService):
    """Blocks inside create_order until the test lets it go."""

    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def create_order(self, request):
        self.entered.set()
        self.release.wait(timeout=5)
        return super().create_order(request)


class TestConcurrentCheckout:
    @pytest.fixture
    def gated(self):
        return GatedOrderService()

    @pytest.fixture
    def service(self, cart_service, order_history, gated, identity):
        return CheckoutService(
            CheckoutDeps(
                cart=cart_service,
                orders=order_history,
                order_service=gated,
                identity=identity,
            )
        )

    def test_two_checkouts_of_one_cart_place_one_order(
        self, filled_cart, service, gated, order_history, address
    ):
        results = []

        def run():
            results.append(service.checkout(cod(address)))

        first = threading.Thread(target=run)
        first.start()
        assert gated.entered.wait(timeout=5)

        second = threading.Thread(target=run)
        second.start()
        second.join(timeout=0.2)
        assert second.is_alive()

        gated.release.set()
        first.join(timeout=5)
        second.join(timeout=5)

        assert sum(isinstance(r, Success) for r in results) == 1
        (failed,) = [r.failure() for r in results if isinstance(r, Failure)]
        assert isinstance(failed, EmptyCart)
        assert len(order_history.orders) == 1
        assert len(gated.received) == 1

    def test_item_added_during_checkout_stays_in_cart(
        self, cart_service, service, gated, profile_a, profile_b, address
    ):
        cart_service.add_item(profile_a, 3)
        cart_service.set_terms_accepted(True)
        receipts = []

        checkout = threading.Thread(
            target=lambda: receipts.append(service.checkout(cod(address)))
        )
        checkout.start()
        assert gated.entered.wait(timeout=5)

        adder = threading.Thread(target=lambda: cart_service.add_item(profile_b, 2))
        adder.start()
        adder.join(timeout=0.2)
        assert adder.is_alive()

        gated.release.set()
        checkout.join(timeout=5)
        adder.join(timeout=5)

        order = receipts[0].unwrap().order
        ordered = sum(it.quantity for it in order.items)
        assert ordered == 3
        assert cart_service.get_total_items() == 2
        assert cart_service.cart.items[0].taste_profile.blend_key() == (
            profile_b.blend_key()
        )
