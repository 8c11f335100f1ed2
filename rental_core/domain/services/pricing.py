"""Motor de precios: costo base, descuento por duración, seguro y caución."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from rental_core.domain.constants import (
    DEFAULT_CURRENCY,
    DISCOUNT_TIERS,
    INSURANCE_DAILY_RATES,
    SECURITY_DEPOSIT_FLOOR,
    SECURITY_DEPOSIT_PERCENT,
)
from rental_core.domain.errors import InvalidAmountError
from rental_core.domain.value_objects.date_range import DateRange
from rental_core.domain.value_objects.money import Money


@dataclass(frozen=True)
class PriceQuote:
    """Desglose del precio de una locación. Todos los montos con 2 decimales."""

    days: int
    daily_rate: Decimal
    base_cost: Decimal
    discount: Decimal
    discount_percent: Decimal
    insurance_fee: Decimal
    security_deposit: Decimal
    total_amount: Decimal
    currency_code: str = DEFAULT_CURRENCY


def discount_percent_for(days: int) -> Decimal:
    """
    Porcentaje de descuento para una cantidad de días.

    Tramos cerrados a la izquierda: [7, 30) -> 10 %, [30, ∞) -> 20 %.
    """
    for min_days, percent in DISCOUNT_TIERS:
        if days >= min_days:
            return percent
    return Decimal("0")


def insurance_daily_rate(tier: str | None) -> Decimal:
    if tier is None:
        return Decimal("0")
    try:
        return INSURANCE_DAILY_RATES[str(tier)]
    except KeyError:
        raise InvalidAmountError(f"Tipo de seguro inválido: {tier}") from None


def calculate_price(
    daily_rate: Decimal,
    start_date: date,
    end_date: date,
    insurance_tier: str | None = None,
    currency_code: str = DEFAULT_CURRENCY,
) -> PriceQuote:
    """
    Calcula el precio de una locación.

    Función pura: las mismas entradas producen siempre el mismo resultado.
    El depósito de caución no forma parte de `total_amount`.

    Raises:
        InvalidRangeError: si end_date no es posterior a start_date.
        InvalidAmountError: si la tarifa es negativa o el seguro desconocido.
    """
    if daily_rate < 0:
        raise InvalidAmountError(f"La tarifa diaria no puede ser negativa: {daily_rate}")

    days = DateRange(start=start_date, end=end_date).days
    # Valores enum llegan como InsuranceTier; se normalizan a su valor
    tier = getattr(insurance_tier, "value", insurance_tier)

    rate = Money(amount=daily_rate, currency_code=currency_code)
    base_cost = rate * days
    percent = discount_percent_for(days)
    discount = base_cost.percent(percent)
    insurance_fee = Money(amount=insurance_daily_rate(tier), currency_code=currency_code) * days
    security_deposit = base_cost.percent(SECURITY_DEPOSIT_PERCENT).max(
        Money(amount=SECURITY_DEPOSIT_FLOOR, currency_code=currency_code)
    )
    total = base_cost - discount + insurance_fee

    return PriceQuote(
        days=days,
        daily_rate=rate.amount,
        base_cost=base_cost.amount,
        discount=discount.amount,
        discount_percent=percent,
        insurance_fee=insurance_fee.amount,
        security_deposit=security_deposit.amount,
        total_amount=total.amount,
        currency_code=currency_code,
    )
