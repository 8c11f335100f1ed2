"""DTOs (Data Transfer Objects) de la capa de aplicación."""

from rental_core.application.dtos.payment_dto import (
    PaymentOutcomeDTO,
    RefundResultDTO,
    SubmitPaymentDTO,
)
from rental_core.application.dtos.reservation_dto import (
    AvailabilityDTO,
    CancellationResultDTO,
    CompleteReservationDTO,
    CompletionResultDTO,
    CreateReservationDTO,
    ReservationCreatedDTO,
)

__all__ = [
    # Reservation DTOs
    "CreateReservationDTO",
    "CompleteReservationDTO",
    "AvailabilityDTO",
    "ReservationCreatedDTO",
    "CompletionResultDTO",
    "CancellationResultDTO",
    # Payment DTOs
    "PaymentOutcomeDTO",
    "SubmitPaymentDTO",
    "RefundResultDTO",
]
