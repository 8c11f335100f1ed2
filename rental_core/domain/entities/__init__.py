"""Entidades del dominio de locaciones."""

from rental_core.domain.entities.payment import (
    PAYMENT_TRANSITIONS,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)
from rental_core.domain.entities.reservation import (
    LIVE_STATUSES,
    RESERVATION_TRANSITIONS,
    InsuranceTier,
    Reservation,
    ReservationPaymentStatus,
    ReservationStatus,
)
from rental_core.domain.entities.vehicle import Vehicle, VehicleStatus

__all__ = [
    # Reservation
    "Reservation",
    "ReservationStatus",
    "ReservationPaymentStatus",
    "InsuranceTier",
    "RESERVATION_TRANSITIONS",
    "LIVE_STATUSES",
    # Payment
    "Payment",
    "PaymentStatus",
    "PaymentType",
    "PaymentMethod",
    "PAYMENT_TRANSITIONS",
    # Vehicle
    "Vehicle",
    "VehicleStatus",
]
