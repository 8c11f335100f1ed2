"""Cálculo de reembolsos por cancelación, multas por atraso y elegibilidad."""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from rental_core.domain.constants import (
    CANCELLATION_FLOOR_PERCENT,
    CANCELLATION_TIERS,
    OVERDUE_RATE_FACTOR,
    REFUND_WINDOW_DAYS,
)
from rental_core.domain.entities.payment import Payment, PaymentStatus, PaymentType
from rental_core.domain.value_objects.date_range import start_of_day
from rental_core.domain.value_objects.money import quantize

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CancellationRefund:
    refund_amount: Decimal
    fee: Decimal
    refund_percent: Decimal
    hours_until_start: Decimal


def refund_percent_for(hours_until_start: Decimal) -> Decimal:
    """
    Porcentaje reembolsable según las horas que faltan para el inicio.

    > 48 h -> 100 %, > 24 h -> 90 %, en otro caso 70 %.
    """
    for threshold_hours, percent in CANCELLATION_TIERS:
        if hours_until_start > threshold_hours:
            return percent
    return CANCELLATION_FLOOR_PERCENT


def cancellation_refund(total_paid: Decimal, hours_until_start: Decimal) -> CancellationRefund:
    percent = refund_percent_for(hours_until_start)
    refund_amount = quantize(total_paid * percent / HUNDRED)
    # fee es el complemento exacto del reembolso
    fee = quantize(total_paid) - refund_amount
    return CancellationRefund(
        refund_amount=refund_amount,
        fee=fee,
        refund_percent=percent,
        hours_until_start=hours_until_start,
    )


def overdue_days(end_date: date, now: datetime) -> int:
    """Días de atraso, redondeados hacia arriba; 0 si no hay atraso."""
    elapsed = (now - start_of_day(end_date)).total_seconds()
    if elapsed <= 0:
        return 0
    return math.ceil(elapsed / 86400)


def overdue_penalty(daily_rate: Decimal, days_overdue: int) -> Decimal:
    return quantize(Decimal(days_overdue) * daily_rate * OVERDUE_RATE_FACTOR)


def refund_ineligibility_reason(payment: Payment, now: datetime) -> str | None:
    """Motivo por el cual el pago no es reembolsable; None si lo es."""
    if payment.type == PaymentType.REFUND:
        return "un reembolso no puede ser reembolsado"
    if payment.status != PaymentStatus.COMPLETED:
        return f"estado actual '{payment.status.value}', se requiere 'completed'"
    if payment.created_at is None:
        return "fecha de creación desconocida"
    # timedelta.days trunca: 30 días y 23 horas siguen siendo 30
    if (now - payment.created_at).days > REFUND_WINDOW_DAYS:
        return f"fuera del plazo de {REFUND_WINDOW_DAYS} días"
    return None


def refund_eligible(payment: Payment, now: datetime) -> bool:
    """
    Un pago completado, que no sea a su vez un reembolso, dentro de los
    30 días (completos) desde su creación.
    """
    return refund_ineligibility_reason(payment, now) is None


def refundable_remaining(payment: Payment, refunds: Iterable[Payment]) -> Decimal:
    """Monto aún reembolsable: original menos los reembolsos no fallidos."""
    refunded = sum(
        (refund.amount for refund in refunds if refund.status != PaymentStatus.FAILED),
        Decimal("0"),
    )
    return max(quantize(payment.amount - refunded), Decimal("0.00"))
