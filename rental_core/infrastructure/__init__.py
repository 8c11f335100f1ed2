"""
Capa de Infraestructura - Núcleo de locación.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).

Estructura:
- db/: Tablas, repositorios SQL y transacciones SQLAlchemy
- gateways/: Adaptadores de liquidación (PIX, boleto, tarjeta)
- in_memory/: Repositorios, locks y transacciones in-memory
"""

from rental_core.infrastructure.db.repositories import (
    PaymentRepoSQL,
    ReservationRepoSQL,
    VehicleRepoSQL,
)
from rental_core.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from rental_core.infrastructure.gateways import (
    BoletoSettlementGateway,
    CreditCardSettlementGateway,
    PixSettlementGateway,
    SettlementGatewaySelector,
)
from rental_core.infrastructure.gateways.in_memory import StubSettlementGateway
from rental_core.infrastructure.in_memory import (
    InMemoryLockManager,
    InMemoryPaymentRepo,
    InMemoryReservationRepo,
    InMemoryTransactionManager,
    InMemoryVehicleRepo,
)

__all__ = [
    # Database - Repositories SQL
    "VehicleRepoSQL",
    "ReservationRepoSQL",
    "PaymentRepoSQL",
    "SQLAlchemyTransactionManager",
    # Gateways
    "PixSettlementGateway",
    "BoletoSettlementGateway",
    "CreditCardSettlementGateway",
    "SettlementGatewaySelector",
    "StubSettlementGateway",
    # In-Memory Implementations
    "InMemoryVehicleRepo",
    "InMemoryReservationRepo",
    "InMemoryPaymentRepo",
    "InMemoryTransactionManager",
    "InMemoryLockManager",
]
