"""Tests for settings loading and dependency wiring."""

from decimal import Decimal

from shadow_bean.adapters.outbound.file_storage import FileKeyValueStorage
from shadow_bean.adapters.outbound.http_order_service import HttpOrderService
from shadow_bean.adapters.outbound.in_memory_order_service import InMemoryOrderService
from shadow_bean.bootstrap import build_app, build_usecases
from shadow_bean.core.domain.model.money import Money
from shadow_bean.settings import Settings, load_settings

from conftest import make_profile


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "SHADOW_BEAN_BASE_PRICE",
            "SHADOW_BEAN_ORDER_API_URL",
            "SHADOW_BEAN_STORAGE_DIR",
            "SHADOW_BEAN_STRICT_STATUS_TRANSITIONS",
            "SHADOW_BEAN_REQUIRE_TERMS",
        ):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.base_price == Decimal("599")
        assert settings.currency == "INR"
        assert settings.order_api_url is None
        assert settings.strict_status_transitions is False
        assert settings.require_terms is True

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SHADOW_BEAN_BASE_PRICE", "649")
        monkeypatch.setenv("SHADOW_BEAN_ORDER_API_URL", "https://api.example.test")
        monkeypatch.setenv("SHADOW_BEAN_ORDER_API_TIMEOUT", "3")
        monkeypatch.setenv("SHADOW_BEAN_STORAGE_DIR", str(tmp_path))
        monkeypatch.setenv("SHADOW_BEAN_STRICT_STATUS_TRANSITIONS", "yes")
        monkeypatch.setenv("SHADOW_BEAN_REQUIRE_TERMS", "0")
        settings = load_settings()
        assert settings.base_price == Decimal("649")
        assert settings.order_api_url == "https://api.example.test"
        assert settings.order_api_timeout == 3.0
        assert settings.storage_dir == str(tmp_path)
        assert settings.strict_status_transitions is True
        assert settings.require_terms is False


class TestBuildUsecases:
    def test_in_memory_defaults(self):
        usecases = build_usecases(Settings())
        assert isinstance(usecases.checkout.deps.order_service, InMemoryOrderService)
        usecases.cart.add_item(make_profile())
        assert usecases.cart.get_total_price() == Money.of(599)

    def test_configured_adapters(self, tmp_path):
        settings = Settings(
            base_price=Decimal("649"),
            order_api_url="https://api.example.test",
            storage_dir=str(tmp_path),
            strict_status_transitions=True,
        )
        usecases = build_usecases(settings)
        assert isinstance(usecases.checkout.deps.order_service, HttpOrderService)
        assert isinstance(
            usecases.cart.deps.repository.storage, FileKeyValueStorage
        )
        assert usecases.orders.deps.strict_transitions is True

        usecases.cart.add_item(make_profile())
        assert usecases.cart.get_total_price() == Money.of(649)
        assert (tmp_path / "shadow-bean-cart.json").exists()

    def test_build_app_routes(self):
        app = build_app(Settings())
        paths = {route.path for route in app.routes}
        assert {"/health", "/cart", "/checkout", "/orders/{order_id}"} <= paths
