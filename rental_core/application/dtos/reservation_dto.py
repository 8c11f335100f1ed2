"""DTOs para reservaciones."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from rental_core.domain.entities.payment import Payment
from rental_core.domain.entities.reservation import InsuranceTier, Reservation
from rental_core.domain.entities.vehicle import VehicleStatus


@dataclass
class CreateReservationDTO:
    """DTO para crear una nueva reservación."""

    vehicle_id: int
    requester_id: int
    start_date: date
    end_date: date
    pickup_location: str
    return_location: str | None = None
    insurance_tier: InsuranceTier | None = None
    notes: str | None = None


@dataclass
class CompleteReservationDTO:
    """DTO para finalizar (devolver) una reservación activa."""

    final_mileage: int
    additional_charges: Decimal = Decimal("0")
    additional_charges_description: str | None = None
    notes: str | None = None


@dataclass
class AvailabilityDTO:
    vehicle_id: int
    start_date: date
    end_date: date
    available: bool
    vehicle_status: VehicleStatus
    conflicting_reservation_ids: list[int] = field(default_factory=list)


@dataclass
class ReservationCreatedDTO:
    """Reservación creada junto con su pago de locación pendiente."""

    reservation: Reservation
    rental_payment: Payment


@dataclass
class CompletionResultDTO:
    reservation: Reservation
    overdue_days: int
    overdue_penalty: Decimal
    total_additional_charges: Decimal
    additional_payment: Payment | None = None


@dataclass
class CancellationResultDTO:
    reservation: Reservation
    hours_until_start: Decimal
    refund_percent: Decimal
    refund_amount: Decimal
    cancellation_fee: Decimal
    refund_payment: Payment | None = None
    fee_payment: Payment | None = None
