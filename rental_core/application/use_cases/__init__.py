"""Casos de uso del núcleo de locación."""

from rental_core.application.use_cases.activate_reservation import (
    ActivateReservationUseCase,
    ReservationActivationListener,
)
from rental_core.application.use_cases.calculate_price import CalculatePriceUseCase
from rental_core.application.use_cases.cancel_reservation import CancelReservationUseCase
from rental_core.application.use_cases.check_availability import (
    CheckAvailabilityUseCase,
    find_conflicts,
)
from rental_core.application.use_cases.complete_reservation import CompleteReservationUseCase
from rental_core.application.use_cases.create_reservation import CreateReservationUseCase
from rental_core.application.use_cases.get_payment import GetPaymentUseCase
from rental_core.application.use_cases.get_reservation import (
    GetReservationUseCase,
    ListReservationsUseCase,
)
from rental_core.application.use_cases.record_payment_outcome import RecordPaymentOutcomeUseCase
from rental_core.application.use_cases.request_refund import RequestRefundUseCase
from rental_core.application.use_cases.submit_payment import SubmitPaymentUseCase
from rental_core.application.use_cases.vehicles import (
    RegisterVehicleUseCase,
    SetVehicleStatusUseCase,
)

__all__ = [
    "ActivateReservationUseCase",
    "CalculatePriceUseCase",
    "CancelReservationUseCase",
    "CheckAvailabilityUseCase",
    "CompleteReservationUseCase",
    "CreateReservationUseCase",
    "GetPaymentUseCase",
    "GetReservationUseCase",
    "ListReservationsUseCase",
    "RecordPaymentOutcomeUseCase",
    "RequestRefundUseCase",
    "ReservationActivationListener",
    "SetVehicleStatusUseCase",
    "SubmitPaymentUseCase",
    "RegisterVehicleUseCase",
    "find_conflicts",
]
