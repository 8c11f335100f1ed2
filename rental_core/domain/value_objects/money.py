"""Value Object Money - representa un valor monetario con su moneda."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from rental_core.domain.constants import DEFAULT_CURRENCY

CENT = Decimal("0.01")


def quantize(value: Decimal | int | str) -> Decimal:
    """Redondea a 2 decimales (half-up)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """
    Value Object inmutable que representa un monto monetario.

    Attributes:
        amount: Monto decimal, siempre normalizado a 2 decimales.
        currency_code: Código ISO 4217 de la moneda (ej: BRL, USD).
    """

    amount: Decimal
    currency_code: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", quantize(self.amount))

        if len(self.currency_code) != 3:
            raise ValueError(f"currency_code debe ser de 3 caracteres: {self.currency_code}")

        if self.amount < 0:
            raise ValueError(f"amount no puede ser negativo: {self.amount}")

    def _check_currency(self, other: "Money", operation: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"No se puede {operation} Money con {type(other)}")
        if self.currency_code != other.currency_code:
            raise ValueError(
                f"No se puede {operation} montos de diferentes monedas: "
                f"{self.currency_code} vs {other.currency_code}"
            )

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other, "sumar")
        return Money(amount=self.amount + other.amount, currency_code=self.currency_code)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other, "restar")
        return Money(amount=self.amount - other.amount, currency_code=self.currency_code)

    def __mul__(self, factor: Decimal | int) -> "Money":
        return Money(amount=self.amount * Decimal(factor), currency_code=self.currency_code)

    __rmul__ = __mul__

    def percent(self, rate: Decimal) -> "Money":
        """Retorna `rate` por ciento de este monto."""
        return Money(amount=self.amount * rate / Decimal("100"), currency_code=self.currency_code)

    def max(self, other: "Money") -> "Money":
        self._check_currency(other, "comparar")
        return self if self.amount >= other.amount else other

    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency_code}"

    @classmethod
    def zero(cls, currency_code: str = DEFAULT_CURRENCY) -> "Money":
        """Crea un Money con valor cero."""
        return cls(amount=Decimal("0"), currency_code=currency_code)
