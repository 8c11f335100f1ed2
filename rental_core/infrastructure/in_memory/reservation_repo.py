import copy
from typing import Sequence

from rental_core.application.interfaces.reservation_repo import ReservationFilters, ReservationRepo
from rental_core.domain.entities.reservation import (
    LIVE_STATUSES,
    Reservation,
    ReservationStatus,
)
from rental_core.domain.errors import OptimisticLockError, ReservationNotFoundError


def _matches(reservation: Reservation, filters: ReservationFilters) -> bool:
    if filters.status is not None and reservation.status != filters.status:
        return False
    if filters.payment_status is not None and reservation.payment_status != filters.payment_status:
        return False
    if filters.vehicle_id is not None and reservation.vehicle_id != filters.vehicle_id:
        return False
    if filters.requester_id is not None and reservation.requester_id != filters.requester_id:
        return False
    if filters.start_date_from is not None and reservation.start_date < filters.start_date_from:
        return False
    if filters.start_date_to is not None and reservation.start_date > filters.start_date_to:
        return False
    if filters.overdue_as_of is not None:
        return (
            reservation.status == ReservationStatus.ACTIVE
            and reservation.actual_return_at is None
            and reservation.end_date <= filters.overdue_as_of
        )
    return True


class InMemoryReservationRepo(ReservationRepo):
    def __init__(self) -> None:
        self.reservations: dict[int, Reservation] = {}
        self._next_id = 1

    def _snapshot(self, reservation: Reservation) -> Reservation:
        # Los pagos se guardan en su propio repositorio
        stored = copy.deepcopy(reservation)
        stored.payments = []
        return stored

    async def get(self, reservation_id: int) -> Reservation | None:
        reservation = self.reservations.get(reservation_id)
        return copy.deepcopy(reservation) if reservation else None

    async def add(self, reservation: Reservation) -> Reservation:
        reservation.id = self._next_id
        self._next_id += 1
        self.reservations[reservation.id] = self._snapshot(reservation)
        return reservation

    async def update(self, reservation: Reservation, expected_lock_version: int) -> Reservation:
        stored = self.reservations.get(reservation.id)
        if stored is None:
            raise ReservationNotFoundError(reservation.id)
        if stored.lock_version != expected_lock_version:
            raise OptimisticLockError(
                "reservation", reservation.id, expected_lock_version, stored.lock_version
            )
        self.reservations[reservation.id] = self._snapshot(reservation)
        return reservation

    async def list_live_for_vehicle(self, vehicle_id: int) -> Sequence[Reservation]:
        return [
            copy.deepcopy(r)
            for r in self.reservations.values()
            if r.vehicle_id == vehicle_id and r.status in LIVE_STATUSES
        ]

    async def list(
        self,
        filters: ReservationFilters,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[Reservation]:
        matching = sorted(
            (r for r in self.reservations.values() if _matches(r, filters)),
            key=lambda r: (r.created_at, r.id),
            reverse=True,
        )
        end = None if limit is None else offset + limit
        return [copy.deepcopy(r) for r in matching[offset:end]]
