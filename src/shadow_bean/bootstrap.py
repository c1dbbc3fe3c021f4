from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fastapi import FastAPI

from shadow_bean.adapters.inbound.web import create_app
from shadow_bean.adapters.outbound.file_storage import FileKeyValueStorage
from shadow_bean.adapters.outbound.http_order_service import HttpOrderService
from shadow_bean.adapters.outbound.in_memory_addresses import InMemoryAddressBook
from shadow_bean.adapters.outbound.in_memory_order_service import (
    InMemoryOrderService,
)
from shadow_bean.adapters.outbound.in_memory_storage import InMemoryKeyValueStorage
from shadow_bean.adapters.outbound.kv_cart_repository import KeyValueCartRepository
from shadow_bean.adapters.outbound.static_identity import StaticIdentityProvider
from shadow_bean.core.domain.service.cart_service import CartDeps, CartService
from shadow_bean.core.domain.service.checkout_service import (
    CheckoutDeps,
    CheckoutService,
)
from shadow_bean.core.domain.service.order_history_service import (
    OrderHistoryDeps,
    OrderHistoryService,
)
from shadow_bean.core.domain.service.taste_profile_library import TasteProfileLibrary
from shadow_bean.core.ports.outbound.identity import IdentityProvider
from shadow_bean.core.ports.outbound.order_service import OrderService
from shadow_bean.core.ports.outbound.storage import KeyValueStorage
from shadow_bean.settings import Settings, load_settings
from shadow_bean.utils.logging import configure_logging


@dataclass(frozen=True)
class UseCases:
    cart: CartService
    orders: OrderHistoryService
    checkout: CheckoutService
    profiles: TasteProfileLibrary
    identity: IdentityProvider
    addresses: InMemoryAddressBook


def build_usecases(
    settings: Settings | None = None,
    *,
    storage: KeyValueStorage | None = None,
    order_service: OrderService | None = None,
    identity: IdentityProvider | None = None,
) -> UseCases:
    settings = settings or load_settings()

    if storage is None:
        storage = (
            FileKeyValueStorage(Path(settings.storage_dir))
            if settings.storage_dir
            else InMemoryKeyValueStorage()
        )
    if order_service is None:
        order_service = (
            HttpOrderService(settings.order_api_url, timeout=settings.order_api_timeout)
            if settings.order_api_url
            else InMemoryOrderService()
        )
    identity = identity or StaticIdentityProvider()
    addresses = InMemoryAddressBook()

    cart = CartService(
        CartDeps(
            repository=KeyValueCartRepository(storage, currency=settings.currency),
            base_price=settings.base_price,
            currency=settings.currency,
        )
    )
    orders = OrderHistoryService(
        OrderHistoryDeps(strict_transitions=settings.strict_status_transitions)
    )
    checkout = CheckoutService(
        CheckoutDeps(
            cart=cart,
            orders=orders,
            order_service=order_service,
            identity=identity,
            addresses=addresses,
            require_terms=settings.require_terms,
        )
    )

    return UseCases(
        cart=cart,
        orders=orders,
        checkout=checkout,
        profiles=TasteProfileLibrary(),
        identity=identity,
        addresses=addresses,
    )


def build_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    usecases = build_usecases(settings)
    return create_app(
        usecases.cart, usecases.orders, usecases.checkout, usecases.profiles
    )


def create_asgi_app() -> FastAPI:
    settings = load_settings()
    configure_logging(settings.log_level)
    return build_app(settings)
