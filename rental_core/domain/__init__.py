"""
Capa de Dominio - Locación de vehículos.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.
Incluye entidades, value objects, servicios puros y excepciones de dominio.

Estructura:
- entities/: Entidades del dominio (Vehicle, Reservation, Payment)
- value_objects/: Objetos de valor inmutables (Money, DateRange)
- services/: Motor de precios y calculadora de reembolsos/multas
- errors.py: Excepciones específicas del dominio
- constants.py: Tarifas y políticas del negocio
"""

from rental_core.domain.entities import (
    InsuranceTier,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    Reservation,
    ReservationPaymentStatus,
    ReservationStatus,
    Vehicle,
    VehicleStatus,
)
from rental_core.domain.errors import (
    ConflictError,
    DomainError,
    InvalidAmountError,
    InvalidRangeError,
    InvalidStateError,
    NotFoundError,
    NotRefundableError,
    OptimisticLockError,
    PaymentNotFoundError,
    ReservationNotFoundError,
    ValidationError,
    VehicleNotFoundError,
    VehicleNotRentableError,
)
from rental_core.domain.value_objects import DateRange, Money

__all__ = [
    # Entities
    "Vehicle",
    "VehicleStatus",
    "Reservation",
    "ReservationStatus",
    "ReservationPaymentStatus",
    "InsuranceTier",
    "Payment",
    "PaymentStatus",
    "PaymentType",
    "PaymentMethod",
    # Value Objects
    "Money",
    "DateRange",
    # Errors
    "DomainError",
    "NotFoundError",
    "VehicleNotFoundError",
    "ReservationNotFoundError",
    "PaymentNotFoundError",
    "ConflictError",
    "InvalidRangeError",
    "InvalidStateError",
    "VehicleNotRentableError",
    "OptimisticLockError",
    "NotRefundableError",
    "InvalidAmountError",
    "ValidationError",
]
