"""Constantes de negocio: tarifas, tramos de descuento y políticas de reembolso."""

from decimal import Decimal

DEFAULT_CURRENCY = "BRL"

# Duración máxima de la locación (end_date - start_date, en días)
MAX_RENTAL_SPAN_DAYS = 30

# Tramos de descuento por días inclusivos: (mínimo de días, porcentaje).
# Se evalúan de mayor a menor; el primero cuyo mínimo se alcance gana.
DISCOUNT_TIERS: tuple[tuple[int, Decimal], ...] = (
    (30, Decimal("20")),
    (7, Decimal("10")),
)

# Seguro: tarifa fija por día
INSURANCE_DAILY_RATES: dict[str, Decimal] = {
    "basic": Decimal("15"),
    "premium": Decimal("25"),
    "full": Decimal("40"),
}

SECURITY_DEPOSIT_PERCENT = Decimal("20")
SECURITY_DEPOSIT_FLOOR = Decimal("200")

# Multa por atraso: fracción de la tarifa diaria por día de atraso
OVERDUE_RATE_FACTOR = Decimal("0.5")

# Cancelación: (horas mínimas hasta el inicio, porcentaje reembolsado).
# Estrictamente mayor que el umbral; el último tramo es el piso.
CANCELLATION_TIERS: tuple[tuple[int, Decimal], ...] = (
    (48, Decimal("100")),
    (24, Decimal("90")),
)
CANCELLATION_FLOOR_PERCENT = Decimal("70")

REFUND_WINDOW_DAYS = 30
