from datetime import timedelta

from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.application.interfaces.reservation_repo import ReservationFilters, ReservationRepo
from rental_core.domain.entities.reservation import Reservation, ReservationStatus
from rental_core.domain.errors import ReservationNotFoundError, ValidationError
from rental_core.domain.value_objects.date_range import start_of_day

MAX_PAGE_SIZE = 50


class GetReservationUseCase:
    """Reservación con sus pagos."""

    def __init__(self, reservation_repo: ReservationRepo, payment_repo: PaymentRepo) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo

    async def execute(self, reservation_id: int) -> Reservation:
        reservation = await self._reservation_repo.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        reservation.payments = list(await self._payment_repo.list_by_reservation(reservation_id))
        return reservation


class ListReservationsUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._clock = clock

    async def execute(
        self,
        filters: ReservationFilters,
        overdue: bool = False,
        limit: int = 15,
        offset: int = 0,
    ) -> list[Reservation]:
        if limit < 1 or offset < 0:
            raise ValidationError("limit", "limit debe ser >= 1 y offset >= 0")
        limit = min(limit, MAX_PAGE_SIZE)

        if overdue:
            if filters.status not in (None, ReservationStatus.ACTIVE):
                return []
            filters.status = ReservationStatus.ACTIVE
            filters.overdue_as_of = self._last_overdue_end_date()

        reservations = list(await self._reservation_repo.list(filters, limit=limit, offset=offset))
        for reservation in reservations:
            reservation.payments = list(
                await self._payment_repo.list_by_reservation(reservation.id)
            )
        return reservations

    def _last_overdue_end_date(self):
        # Atrasada desde las 00:00 UTC de su end_date
        now = self._clock.now()
        today = now.date()
        if now > start_of_day(today):
            return today
        return today - timedelta(days=1)
