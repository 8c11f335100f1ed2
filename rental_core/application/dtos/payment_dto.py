"""DTOs para pagos."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from rental_core.domain.entities.payment import Payment, PaymentMethod, PaymentStatus


@dataclass
class PaymentOutcomeDTO:
    """Señal externa de liquidación para un pago pendiente."""

    outcome: PaymentStatus
    reference: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SubmitPaymentDTO:
    method: PaymentMethod
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class RefundResultDTO:
    original_payment: Payment
    refund_payment: Payment
    refunded_total: Decimal
    remaining_refundable: Decimal

    @property
    def is_full_refund(self) -> bool:
        return self.remaining_refundable == Decimal("0")
