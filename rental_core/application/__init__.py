"""
Capa de Aplicación - Núcleo de locación de vehículos.

Esta capa contiene los casos de uso, DTOs e interfaces (puertos).
Orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- use_cases/: Casos de uso del sistema
- dtos/: Data Transfer Objects
- interfaces/: Puertos (contratos para adaptadores)
"""

from rental_core.application.dtos import (
    AvailabilityDTO,
    CancellationResultDTO,
    CompleteReservationDTO,
    CompletionResultDTO,
    CreateReservationDTO,
    PaymentOutcomeDTO,
    RefundResultDTO,
    ReservationCreatedDTO,
    SubmitPaymentDTO,
)
from rental_core.application.interfaces import (
    Clock,
    FakeClock,
    FakeUUIDGenerator,
    LockManager,
    PaymentRepo,
    RealUUIDGenerator,
    RentalPaymentListener,
    ReservationFilters,
    ReservationRepo,
    SettlementGateway,
    SettlementGatewayProvider,
    SettlementResult,
    SystemClock,
    TransactionManager,
    UUIDGenerator,
    VehicleRepo,
)

__all__ = [
    # DTOs
    "AvailabilityDTO",
    "CancellationResultDTO",
    "CompleteReservationDTO",
    "CompletionResultDTO",
    "CreateReservationDTO",
    "PaymentOutcomeDTO",
    "RefundResultDTO",
    "ReservationCreatedDTO",
    "SubmitPaymentDTO",
    # Interfaces - Repositories
    "VehicleRepo",
    "ReservationRepo",
    "ReservationFilters",
    "PaymentRepo",
    # Interfaces - Gateways
    "SettlementGateway",
    "SettlementGatewayProvider",
    "SettlementResult",
    "RentalPaymentListener",
    # Interfaces - Infrastructure
    "TransactionManager",
    "LockManager",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "UUIDGenerator",
    "RealUUIDGenerator",
    "FakeUUIDGenerator",
]
