from dataclasses import dataclass
from datetime import date
from typing import Sequence

from rental_core.domain.entities.reservation import (
    Reservation,
    ReservationPaymentStatus,
    ReservationStatus,
)


@dataclass
class ReservationFilters:
    status: ReservationStatus | None = None
    payment_status: ReservationPaymentStatus | None = None
    vehicle_id: int | None = None
    requester_id: int | None = None
    start_date_from: date | None = None
    start_date_to: date | None = None
    # Activas sin devolución cuyo end_date sea <= esta fecha
    overdue_as_of: date | None = None


class ReservationRepo:
    async def get(self, reservation_id: int) -> Reservation | None:
        raise NotImplementedError

    async def add(self, reservation: Reservation) -> Reservation:
        raise NotImplementedError

    async def update(self, reservation: Reservation, expected_lock_version: int) -> Reservation:
        """
        Compare-and-swap sobre `lock_version`.

        Raises:
            OptimisticLockError: si la versión almacenada no es la esperada.
        """
        raise NotImplementedError

    async def list_live_for_vehicle(self, vehicle_id: int) -> Sequence[Reservation]:
        """Reservaciones `reserved` o `active` del vehículo."""
        raise NotImplementedError

    async def list(
        self,
        filters: ReservationFilters,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[Reservation]:
        """Más recientes primero."""
        raise NotImplementedError
