"""Servicios de dominio puros (sin efectos secundarios)."""

from rental_core.domain.services.pricing import (
    PriceQuote,
    calculate_price,
    discount_percent_for,
    insurance_daily_rate,
)
from rental_core.domain.services.refunds import (
    CancellationRefund,
    cancellation_refund,
    overdue_days,
    overdue_penalty,
    refund_eligible,
    refund_ineligibility_reason,
    refund_percent_for,
    refundable_remaining,
)

__all__ = [
    "PriceQuote",
    "calculate_price",
    "discount_percent_for",
    "insurance_daily_rate",
    "CancellationRefund",
    "cancellation_refund",
    "overdue_days",
    "overdue_penalty",
    "refund_eligible",
    "refund_ineligibility_reason",
    "refund_percent_for",
    "refundable_remaining",
]
