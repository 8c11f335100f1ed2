import logging

from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.lock_manager import LockManager, reservation_lock
from rental_core.application.interfaces.reservation_repo import ReservationRepo
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.domain.entities.reservation import (
    Reservation,
    ReservationPaymentStatus,
    ReservationStatus,
)
from rental_core.domain.errors import ReservationNotFoundError


class ActivateReservationUseCase:
    """reserved -> active. El vehículo sigue `rented`."""

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        transaction_manager: TransactionManager,
        lock_manager: LockManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager
        self._lock_manager = lock_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: int) -> Reservation:
        async with self._lock_manager.acquire(reservation_lock(reservation_id)):
            async with self._transaction_manager.start():
                reservation = await self._reservation_repo.get(reservation_id)
                if reservation is None:
                    raise ReservationNotFoundError(reservation_id)

                expected_lock_version = reservation.lock_version
                reservation.activate(self._clock.now())
                reservation = await self._reservation_repo.update(
                    reservation, expected_lock_version
                )

        self._logger.info(
            "Reservation activated",
            extra={"reservation_id": reservation.id, "vehicle_id": reservation.vehicle_id},
        )
        return reservation


class ReservationActivationListener:
    """
    Reacciona a la liquidación del pago de locación: marca la reservación
    como pagada y la activa si sigue `reserved`.

    Si la reservación ya no está `reserved` (p.ej. se activó en el mostrador
    antes de que llegara la señal de pago) no se activa: se registra la
    inconsistencia y el pago queda completado. Una reservación cancelada
    no llega aquí: la cancelación anula el pago pendiente.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        transaction_manager: TransactionManager,
        lock_manager: LockManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager
        self._lock_manager = lock_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def on_rental_payment_completed(self, reservation_id: int) -> None:
        now = self._clock.now()
        async with self._lock_manager.acquire(reservation_lock(reservation_id)):
            async with self._transaction_manager.start():
                reservation = await self._reservation_repo.get(reservation_id)
                if reservation is None:
                    raise ReservationNotFoundError(reservation_id)

                expected_lock_version = reservation.lock_version
                reservation.set_payment_status(ReservationPaymentStatus.PAID, now)

                activated = reservation.status == ReservationStatus.RESERVED
                if activated:
                    reservation.activate(now)
                else:
                    self._logger.warning(
                        "Rental payment completed for a reservation that is not reserved",
                        extra={
                            "reservation_id": reservation_id,
                            "reservation_status": reservation.status.value,
                        },
                    )

                if reservation.lock_version != expected_lock_version:
                    await self._reservation_repo.update(reservation, expected_lock_version)

        if activated:
            self._logger.info(
                "Reservation activated by rental payment",
                extra={"reservation_id": reservation_id},
            )
