from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from returns.result import Failure, Result, Success

from shadow_bean.core.domain.model.cart import Cart, CartLineItem
from shadow_bean.core.domain.model.errors import CommerceError, PersistenceError
from shadow_bean.core.domain.model.money import DEFAULT_CURRENCY, Money
from shadow_bean.core.domain.model.taste_profile import (
    SENSORY_MAX,
    SENSORY_MIN,
    GrindType,
    RoastLevel,
    TasteProfile,
)
from shadow_bean.core.ports.outbound.cart_repository import CartRepository
from shadow_bean.core.ports.outbound.storage import KeyValueStorage

CART_STORAGE_KEY = "shadow-bean-cart"

Sensory = Annotated[int, Field(ge=SENSORY_MIN, le=SENSORY_MAX)]
Price = Annotated[
    Decimal, PlainSerializer(lambda d: float(d), return_type=float, when_used="json")
]


# ---- stored document ---------------------------------------------------------


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TasteProfileDocument(_Document):
    id: str
    name: str
    bitterness: Sensory
    acidity: Sensory
    body: Sensory
    flavour: Sensory
    roast_level: RoastLevel
    grind_type: GrindType


class CartLineDocument(_Document):
    id: str
    sku: str
    taste_profile: TasteProfileDocument
    quantity: int = Field(gt=0)
    unit_price: Price


class CartDocument(_Document):
    items: list[CartLineDocument] = Field(default_factory=list)
    terms_accepted: bool = False


# ---- mapping -----------------------------------------------------------------


def to_document(cart: Cart) -> CartDocument:
    return CartDocument(
        items=[
            CartLineDocument(
                id=it.id,
                sku=it.sku,
                taste_profile=TasteProfileDocument(
                    id=it.taste_profile.id,
                    name=it.taste_profile.name,
                    bitterness=it.taste_profile.bitterness,
                    acidity=it.taste_profile.acidity,
                    body=it.taste_profile.body,
                    flavour=it.taste_profile.flavour,
                    roast_level=it.taste_profile.roast_level,
                    grind_type=it.taste_profile.grind_type,
                ),
                quantity=it.quantity,
                unit_price=it.unit_price.amount,
            )
            for it in cart.items
        ],
        terms_accepted=cart.terms_accepted,
    )


def from_document(doc: CartDocument, currency: str = DEFAULT_CURRENCY) -> Cart:
    return Cart(
        items=tuple(
            CartLineItem(
                id=ln.id,
                sku=ln.sku,
                taste_profile=TasteProfile(
                    id=ln.taste_profile.id,
                    name=ln.taste_profile.name,
                    bitterness=ln.taste_profile.bitterness,
                    acidity=ln.taste_profile.acidity,
                    body=ln.taste_profile.body,
                    flavour=ln.taste_profile.flavour,
                    roast_level=ln.taste_profile.roast_level,
                    grind_type=ln.taste_profile.grind_type,
                ),
                quantity=ln.quantity,
                unit_price=Money.of(ln.unit_price, currency=currency),
            )
            for ln in doc.items
        ),
        terms_accepted=doc.terms_accepted,
        currency=currency,
    )


@dataclass
class KeyValueCartRepository(CartRepository):
    storage: KeyValueStorage
    key: str = CART_STORAGE_KEY
    currency: str = DEFAULT_CURRENCY

    def load(self) -> Result[Cart | None, CommerceError]:
        return self.storage.get(self.key).bind(self._decode)

    def save(self, cart: Cart) -> Result[None, CommerceError]:
        raw = to_document(cart).model_dump_json(by_alias=True)
        return self.storage.set(self.key, raw)

    def _decode(self, raw: str | None) -> Result[Cart | None, CommerceError]:
        if raw is None:
            return Success(None)
        try:
            doc = CartDocument.model_validate_json(raw)
        except PydanticValidationError as e:
            return Failure(
                PersistenceError(
                    message=f"stored cart is unreadable: {e.error_count()} errors"
                )
            )
        return Success(from_document(doc, currency=self.currency))
