"""Value Object DateRange - rango inclusivo de fechas de una locación."""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from rental_core.domain.constants import MAX_RENTAL_SPAN_DAYS
from rental_core.domain.errors import InvalidRangeError


def start_of_day(day: date) -> datetime:
    """Instante 00:00 UTC de una fecha."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


@dataclass(frozen=True)
class DateRange:
    """
    Value Object inmutable que representa un rango de fechas [start, end].

    Ambos extremos son inclusivos y la hora del día no tiene significado:
    una reservación que termina el día X y otra que empieza el día X
    se superponen.

    Attributes:
        start: Fecha de retiro.
        end: Fecha de devolución.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise InvalidRangeError(
                f"end_date debe ser posterior a start_date: "
                f"{self.start.isoformat()} >= {self.end.isoformat()}"
            )

    @property
    def span_days(self) -> int:
        """Días entre las fechas (end - start)."""
        return (self.end - self.start).days

    @property
    def days(self) -> int:
        """Cantidad de días inclusiva: (end - start) + 1."""
        return self.span_days + 1

    def overlaps_with(self, other: "DateRange") -> bool:
        """Superposición inclusiva: s1 <= e2 y s2 <= e1."""
        return self.start <= other.end and other.start <= self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def validate_rental_span(self) -> None:
        """Valida la duración permitida para una locación (1 a 30 días)."""
        if self.span_days > MAX_RENTAL_SPAN_DAYS:
            raise InvalidRangeError(
                f"El período máximo de locación es de {MAX_RENTAL_SPAN_DAYS} días: "
                f"{self.span_days} solicitados"
            )

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"
