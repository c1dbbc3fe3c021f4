from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommerceError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(CommerceError):
    pass


@dataclass(frozen=True)
class EmptyCart(ValidationError):
    pass


@dataclass(frozen=True)
class TermsNotAccepted(ValidationError):
    pass


@dataclass(frozen=True)
class PaymentMethodUnavailable(CommerceError):
    method: str

    def __str__(self) -> str:  # pragma: no cover
        return f"payment_method_unavailable: {self.method} ({self.message})"


@dataclass(frozen=True)
class OrderServiceError(CommerceError):
    """Failure reported by (or while reaching) the order-creation service."""

    retryable: bool = False


@dataclass(frozen=True)
class OrderServiceUnavailable(OrderServiceError):
    retryable: bool = True


@dataclass(frozen=True)
class OrderRejected(OrderServiceError):
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover
        return f"order_rejected: status={self.status_code} ({self.message})"


@dataclass(frozen=True)
class PersistenceError(CommerceError):
    pass


@dataclass(frozen=True)
class OrderNotFound(CommerceError):
    order_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"order_not_found: {self.order_id} ({self.message})"


@dataclass(frozen=True)
class InvalidStatusTransition(CommerceError):
    order_id: str
    current: str
    target: str

    def __str__(self) -> str:  # pragma: no cover
        return (
            f"invalid_status_transition: {self.order_id} "
            f"{self.current} -> {self.target} ({self.message})"
        )
