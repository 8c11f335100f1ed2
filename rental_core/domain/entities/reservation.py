"""Entidad Reservation - Agregado raíz del dominio."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from rental_core.domain.errors import InvalidStateError
from rental_core.domain.value_objects.date_range import DateRange, start_of_day
from rental_core.domain.value_objects.money import Money, quantize

if TYPE_CHECKING:
    from rental_core.domain.entities.payment import Payment
    from rental_core.domain.services.pricing import PriceQuote


class ReservationStatus(str, Enum):
    """Estados posibles de una reservación."""

    RESERVED = "reserved"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReservationPaymentStatus(str, Enum):
    """Estado de cobro agregado de una reservación."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


class InsuranceTier(str, Enum):
    BASIC = "basic"
    PREMIUM = "premium"
    FULL = "full"


# Única tabla de transiciones de la máquina de estados de la locación
RESERVATION_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.RESERVED: frozenset({ReservationStatus.ACTIVE, ReservationStatus.CANCELLED}),
    ReservationStatus.ACTIVE: frozenset({ReservationStatus.COMPLETED}),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}

LIVE_STATUSES = frozenset({ReservationStatus.RESERVED, ReservationStatus.ACTIVE})


@dataclass
class Reservation:
    """
    Entidad principal del dominio - Agregado Raíz.

    Representa la reserva de un vehículo para un rango inclusivo de fechas.
    Los montos se congelan en la creación; los cargos adicionales se
    acumulan aparte y nunca modifican `total_amount`.
    """

    # Identificadores
    id: int | None = None
    vehicle_id: int = 0
    requester_id: int = 0

    # Fechas
    start_date: date | None = None
    end_date: date | None = None

    # Financieros (snapshot de la creación)
    currency_code: str = "BRL"
    daily_rate: Decimal = Decimal("0")
    base_cost: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    insurance_tier: InsuranceTier | None = None
    insurance_fee: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    security_deposit: Decimal = Decimal("0")
    additional_charges: Decimal | None = None
    additional_charges_description: str | None = None

    # Estados
    status: ReservationStatus = ReservationStatus.RESERVED
    payment_status: ReservationPaymentStatus = ReservationPaymentStatus.PENDING

    # Operación
    pickup_location: str = ""
    return_location: str = ""
    notes: str | None = None
    cancellation_reason: str | None = None
    initial_mileage: int | None = None
    final_mileage: int | None = None
    actual_return_at: datetime | None = None

    # Control de concurrencia
    lock_version: int = 0

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Relaciones (no persistidas directamente)
    payments: list["Payment"] = field(default_factory=list)

    # === Propiedades calculadas ===

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def days(self) -> int:
        return self.date_range.days

    @property
    def total(self) -> Money:
        return Money(amount=self.total_amount, currency_code=self.currency_code)

    @property
    def is_live(self) -> bool:
        """Reservada o activa: ocupa el calendario del vehículo."""
        return self.status in LIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not RESERVATION_TRANSITIONS[self.status]

    def is_overdue(self, now: datetime) -> bool:
        """
        Activa, sin devolución, y `now` ya pasó las 00:00 UTC de `end_date`.

        `end_date` es inclusiva pero el atraso se cuenta desde el inicio de
        ese día: una devolución durante el último día reservado ya es tardía.
        """
        return (
            self.status == ReservationStatus.ACTIVE
            and self.actual_return_at is None
            and now > start_of_day(self.end_date)
        )

    def hours_until_start(self, now: datetime) -> Decimal:
        seconds = (start_of_day(self.start_date) - now).total_seconds()
        return Decimal(str(seconds)) / Decimal("3600")

    # === Máquina de estados ===

    def can_transition_to(self, target: ReservationStatus) -> bool:
        return target in RESERVATION_TRANSITIONS[self.status]

    def ensure_transition(self, target: ReservationStatus, operation: str) -> None:
        """Valida la transición sin mutar la entidad."""
        if not self.can_transition_to(target):
            expected = [
                source.value
                for source, targets in RESERVATION_TRANSITIONS.items()
                if target in targets
            ]
            raise InvalidStateError(
                entity=f"la reservación {self.id}",
                current_status=self.status.value,
                expected_status=expected,
                operation=operation,
            )

    def transition_to(self, target: ReservationStatus, operation: str, now: datetime) -> None:
        """Única función de transición; toda mutación de estado pasa por aquí."""
        self.ensure_transition(target, operation)
        self.status = target
        self.updated_at = now
        self.lock_version += 1

    def activate(self, now: datetime) -> None:
        self.transition_to(ReservationStatus.ACTIVE, "activar", now)

    def complete(
        self,
        now: datetime,
        final_mileage: int,
        additional_charges: Decimal,
        description: str | None = None,
        notes: str | None = None,
    ) -> None:
        self.transition_to(ReservationStatus.COMPLETED, "finalizar", now)
        self.actual_return_at = now
        self.final_mileage = final_mileage
        if additional_charges > 0:
            self.add_charges(additional_charges, description or "Cargos adicionales")
        elif self.additional_charges is None:
            self.additional_charges = quantize(0)
        if notes:
            self.append_note(notes)

    def cancel(self, now: datetime, reason: str, fee: Decimal) -> None:
        self.transition_to(ReservationStatus.CANCELLED, "cancelar", now)
        self.cancellation_reason = reason
        self.append_note(f"Cancelada el {now:%Y-%m-%d %H:%M} - Motivo: {reason}")
        if fee > 0:
            self.add_charges(fee, "Cargo por cancelación")

    def add_charges(self, amount: Decimal, description: str) -> None:
        """Suma cargos a los existentes; nunca los sobrescribe."""
        self.additional_charges = quantize((self.additional_charges or Decimal("0")) + amount)
        if self.additional_charges_description:
            self.additional_charges_description = (
                f"{self.additional_charges_description}; {description}"
            )
        else:
            self.additional_charges_description = description

    def append_note(self, note: str) -> None:
        self.notes = f"{self.notes}\n\n{note}" if self.notes else note

    def set_payment_status(self, payment_status: ReservationPaymentStatus, now: datetime) -> None:
        if self.payment_status == payment_status:
            return
        self.payment_status = payment_status
        self.updated_at = now
        self.lock_version += 1

    # === Factory ===

    @classmethod
    def create(
        cls,
        vehicle_id: int,
        requester_id: int,
        date_range: DateRange,
        quote: "PriceQuote",
        pickup_location: str,
        return_location: str | None,
        insurance_tier: InsuranceTier | None,
        initial_mileage: int | None,
        notes: str | None,
        now: datetime,
    ) -> "Reservation":
        """Crea una reservación en estado `reserved` con el precio congelado."""
        return cls(
            vehicle_id=vehicle_id,
            requester_id=requester_id,
            start_date=date_range.start,
            end_date=date_range.end,
            currency_code=quote.currency_code,
            daily_rate=quote.daily_rate,
            base_cost=quote.base_cost,
            discount=quote.discount,
            insurance_tier=insurance_tier,
            insurance_fee=quote.insurance_fee,
            total_amount=quote.total_amount,
            security_deposit=quote.security_deposit,
            status=ReservationStatus.RESERVED,
            payment_status=ReservationPaymentStatus.PENDING,
            pickup_location=pickup_location,
            return_location=return_location or pickup_location,
            initial_mileage=initial_mileage,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
