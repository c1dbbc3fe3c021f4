from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

DEFAULT_CURRENCY = "INR"

_PAISA = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """A rupee amount held as whole paise, so sums never drift."""

    paise: int
    currency: str = DEFAULT_CURRENCY

    @staticmethod
    def of(amount: Decimal | int | str, currency: str = DEFAULT_CURRENCY) -> Money:
        rupees = Decimal(str(amount)).quantize(_PAISA, rounding=ROUND_HALF_UP)
        return Money(int(rupees.scaleb(2)), currency)

    @staticmethod
    def total(values: Iterable[Money], currency: str = DEFAULT_CURRENCY) -> Money:
        return sum(values, Money(0, currency))

    @property
    def amount(self) -> Decimal:
        return Decimal(self.paise).scaleb(-2)

    def __add__(self, other: Money) -> Money:
        if self.currency != other.currency:
            raise ValueError(f"currency_mismatch: {self.currency} vs {other.currency}")
        return Money(self.paise + other.paise, self.currency)

    def __mul__(self, quantity: int) -> Money:
        return Money(self.paise * quantity, self.currency)
