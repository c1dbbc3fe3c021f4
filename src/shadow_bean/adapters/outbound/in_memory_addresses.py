from __future__ import annotations

from dataclasses import dataclass, field

from shadow_bean.core.domain.model.order import ShippingAddress
from shadow_bean.core.ports.outbound.addresses import AddressBook


@dataclass
class InMemoryAddressBook(AddressBook):
    _addresses: dict[str, list[ShippingAddress]] = field(default_factory=dict)
    _defaults: dict[str, int] = field(default_factory=dict)

    def add(
        self, user_id: str, address: ShippingAddress, make_default: bool = False
    ) -> None:
        book = self._addresses.setdefault(user_id, [])
        book.append(address)
        if make_default or len(book) == 1:
            self._defaults[user_id] = len(book) - 1

    def set_default(self, user_id: str, index: int) -> None:
        book = self._addresses.get(user_id, [])
        if 0 <= index < len(book):
            self._defaults[user_id] = index

    def addresses(self, user_id: str) -> tuple[ShippingAddress, ...]:
        return tuple(self._addresses.get(user_id, ()))

    def default_address(self, user_id: str) -> ShippingAddress | None:
        idx = self._defaults.get(user_id)
        if idx is None:
            return None
        return self._addresses[user_id][idx]
