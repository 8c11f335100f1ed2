"""Implementaciones in-memory (modo por defecto y testing)."""

from rental_core.infrastructure.in_memory.lock_manager import InMemoryLockManager
from rental_core.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from rental_core.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from rental_core.infrastructure.in_memory.transaction_manager import (
    NoopTransactionManager as InMemoryTransactionManager,
)
from rental_core.infrastructure.in_memory.vehicle_repo import InMemoryVehicleRepo

__all__ = [
    # Repositories
    "InMemoryVehicleRepo",
    "InMemoryReservationRepo",
    "InMemoryPaymentRepo",
    # Infrastructure
    "InMemoryTransactionManager",
    "InMemoryLockManager",
]
