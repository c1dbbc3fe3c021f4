import random
from pathlib import Path

import pytest

from shadow_bean.adapters.outbound.in_memory_addresses import InMemoryAddressBook
from shadow_bean.adapters.outbound.in_memory_order_service import InMemoryOrderService
from shadow_bean.adapters.outbound.in_memory_storage import InMemoryKeyValueStorage
from shadow_bean.adapters.outbound.kv_cart_repository import KeyValueCartRepository
from shadow_bean.adapters.outbound.static_identity import StaticIdentityProvider
from shadow_bean.core.domain.model.order import ShippingAddress
from shadow_bean.core.domain.model.taste_profile import (
    GrindType,
    RoastLevel,
    TasteProfile,
)
from shadow_bean.core.domain.service.cart_service import (
    CartDeps,
    CartService,
    LineIdFactory,
    SkuFactory,
)
from shadow_bean.core.domain.service.checkout_service import (
    CheckoutDeps,
    CheckoutService,
)
from shadow_bean.core.domain.service.order_history_service import OrderHistoryService
from shadow_bean.core.ports.outbound.identity import Identity

FIXED_MILLIS = 1_760_000_001_234


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))
        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/adapters/" in test_path:
            item.add_marker(pytest.mark.adapters)


def make_profile(**overrides) -> TasteProfile:
    fields = dict(
        id="tp-a",
        name="Morning Blend",
        bitterness=3,
        acidity=2,
        body=4,
        flavour=3,
        roast_level=RoastLevel.MEDIUM,
        grind_type=GrindType.POUR_OVER,
    )
    fields.update(overrides)
    return TasteProfile(**fields)


@pytest.fixture
def profile_a():
    return make_profile()


@pytest.fixture
def profile_b():
    return make_profile(id="tp-b", grind_type=GrindType.FRENCH_PRESS)


@pytest.fixture
def address():
    return ShippingAddress(
        name="Asha Rao",
        phone="9876543210",
        street="123 Coffee Lane",
        city="Bangalore",
        state="Karnataka",
        zip="560001",
    )


@pytest.fixture
def storage():
    return InMemoryKeyValueStorage()


@pytest.fixture
def cart_deps(storage):
    return CartDeps(
        repository=KeyValueCartRepository(storage),
        new_line_id=LineIdFactory(clock=lambda: FIXED_MILLIS),
        new_sku=SkuFactory(clock=lambda: FIXED_MILLIS, rng=random.Random(7)),
    )


@pytest.fixture
def cart_service(cart_deps):
    return CartService(cart_deps)


@pytest.fixture
def order_history():
    return OrderHistoryService()


@pytest.fixture
def order_service():
    return InMemoryOrderService()


@pytest.fixture
def identity():
    return StaticIdentityProvider(Identity(user_id="user-42", display_name="Asha Rao"))


@pytest.fixture
def address_book():
    return InMemoryAddressBook()


@pytest.fixture
def checkout_service(
    cart_service, order_history, order_service, identity, address_book
):
    return CheckoutService(
        CheckoutDeps(
            cart=cart_service,
            orders=order_history,
            order_service=order_service,
            identity=identity,
            addresses=address_book,
        )
    )
