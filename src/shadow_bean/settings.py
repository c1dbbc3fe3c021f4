from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    base_price: Decimal = Decimal("599")
    currency: str = "INR"
    order_api_url: str | None = None
    order_api_timeout: float = 10.0
    storage_dir: str | None = None
    strict_status_transitions: bool = False
    require_terms: bool = True
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


def load_settings() -> Settings:
    return Settings(
        base_price=Decimal(os.getenv("SHADOW_BEAN_BASE_PRICE", "599")),
        currency=os.getenv("SHADOW_BEAN_CURRENCY", "INR"),
        order_api_url=os.getenv("SHADOW_BEAN_ORDER_API_URL") or None,
        order_api_timeout=float(os.getenv("SHADOW_BEAN_ORDER_API_TIMEOUT", "10")),
        storage_dir=os.getenv("SHADOW_BEAN_STORAGE_DIR") or None,
        strict_status_transitions=_flag("SHADOW_BEAN_STRICT_STATUS_TRANSITIONS", False),
        require_terms=_flag("SHADOW_BEAN_REQUIRE_TERMS", True),
        log_level=os.getenv("SHADOW_BEAN_LOG_LEVEL", "INFO"),
        host=os.getenv("SHADOW_BEAN_HOST", "0.0.0.0"),
        port=int(os.getenv("SHADOW_BEAN_PORT", "8000")),
    )
