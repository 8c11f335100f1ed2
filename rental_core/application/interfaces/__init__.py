"""Interfaces (Puertos) de la capa de aplicación."""

from rental_core.application.interfaces.clock import Clock, FakeClock, SystemClock
from rental_core.application.interfaces.lock_manager import (
    LockKey,
    LockManager,
    payment_lock,
    reservation_lock,
    vehicle_lock,
)
from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.application.interfaces.rental_payment_listener import RentalPaymentListener
from rental_core.application.interfaces.reservation_repo import ReservationFilters, ReservationRepo
from rental_core.application.interfaces.settlement_gateway import (
    SettlementGateway,
    SettlementGatewayProvider,
    SettlementResult,
)
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.application.interfaces.uuid_generator import (
    FakeUUIDGenerator,
    RealUUIDGenerator,
    UUIDGenerator,
)
from rental_core.application.interfaces.vehicle_repo import VehicleRepo

__all__ = [
    # Repositories
    "VehicleRepo",
    "ReservationRepo",
    "ReservationFilters",
    "PaymentRepo",
    # Gateways
    "SettlementGateway",
    "SettlementGatewayProvider",
    "SettlementResult",
    "RentalPaymentListener",
    # Infrastructure
    "TransactionManager",
    "LockManager",
    "LockKey",
    "vehicle_lock",
    "payment_lock",
    "reservation_lock",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "UUIDGenerator",
    "RealUUIDGenerator",
    "FakeUUIDGenerator",
]
