import logging
from decimal import Decimal

from rental_core.application.dtos.reservation_dto import (
    CompleteReservationDTO,
    CompletionResultDTO,
)
from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.lock_manager import (
    LockManager,
    reservation_lock,
    vehicle_lock,
)
from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.application.interfaces.reservation_repo import ReservationRepo
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.application.interfaces.uuid_generator import UUIDGenerator
from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.application.use_cases.vehicle_projection import refresh_vehicle_status
from rental_core.domain.entities.payment import Payment, PaymentType
from rental_core.domain.entities.reservation import ReservationStatus
from rental_core.domain.errors import (
    InvalidAmountError,
    ReservationNotFoundError,
    ValidationError,
    VehicleNotFoundError,
)
from rental_core.domain.services.refunds import overdue_days, overdue_penalty
from rental_core.domain.value_objects.money import quantize


class CompleteReservationUseCase:
    """
    Devolución del vehículo: active -> completed.

    Si la devolución es posterior al end_date se suma la multa por atraso a
    los cargos informados. Cualquier cargo > 0 genera un pago `additional`
    pendiente.
    """

    def __init__(
        self,
        vehicle_repo: VehicleRepo,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        transaction_manager: TransactionManager,
        lock_manager: LockManager,
        clock: Clock,
        uuid_generator: UUIDGenerator,
    ) -> None:
        self._vehicle_repo = vehicle_repo
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._transaction_manager = transaction_manager
        self._lock_manager = lock_manager
        self._clock = clock
        self._uuid_generator = uuid_generator
        self._logger = logging.getLogger(__name__)

    async def execute(
        self, reservation_id: int, request: CompleteReservationDTO
    ) -> CompletionResultDTO:
        if request.additional_charges < 0:
            raise InvalidAmountError(
                f"additional_charges no puede ser negativo: {request.additional_charges}"
            )

        current = await self._reservation_repo.get(reservation_id)
        if current is None:
            raise ReservationNotFoundError(reservation_id)

        async with self._lock_manager.acquire(
            vehicle_lock(current.vehicle_id), reservation_lock(reservation_id)
        ):
            async with self._transaction_manager.start():
                now = self._clock.now()
                reservation = await self._reservation_repo.get(reservation_id)
                reservation.ensure_transition(ReservationStatus.COMPLETED, "finalizar")

                initial_mileage = reservation.initial_mileage or 0
                if request.final_mileage < initial_mileage:
                    raise ValidationError(
                        "final_mileage",
                        f"debe ser mayor o igual al kilometraje inicial ({initial_mileage})",
                    )

                vehicle = await self._vehicle_repo.get_for_update(reservation.vehicle_id)
                if vehicle is None:
                    raise VehicleNotFoundError(reservation.vehicle_id)

                days_late = overdue_days(reservation.end_date, now) if reservation.is_overdue(now) else 0
                penalty = overdue_penalty(reservation.daily_rate, days_late)
                charges = quantize(request.additional_charges + penalty)
                description = request.additional_charges_description
                if penalty > 0:
                    late_fee = f"Multa por atraso ({days_late} días)"
                    description = f"{description}; {late_fee}" if description else late_fee

                reservation_version = reservation.lock_version
                vehicle_version = vehicle.lock_version

                reservation.complete(
                    now=now,
                    final_mileage=request.final_mileage,
                    additional_charges=charges,
                    description=description,
                    notes=request.notes,
                )
                reservation = await self._reservation_repo.update(reservation, reservation_version)

                vehicle.record_mileage(request.final_mileage, now)
                await refresh_vehicle_status(
                    vehicle, vehicle_version, self._vehicle_repo, self._reservation_repo, now
                )

                additional_payment = None
                if charges > Decimal("0"):
                    additional_payment = await self._payment_repo.add(
                        Payment.create_pending(
                            reservation_id=reservation.id,
                            amount=charges,
                            payment_type=PaymentType.ADDITIONAL,
                            description=f"Cargos adicionales - {description}",
                            now=now,
                            currency_code=reservation.currency_code,
                            transaction_id=self._uuid_generator.generate_transaction_id(),
                        )
                    )

        self._logger.info(
            "Reservation completed",
            extra={
                "reservation_id": reservation.id,
                "vehicle_id": reservation.vehicle_id,
                "final_mileage": request.final_mileage,
                "overdue_days": days_late,
                "additional_charges": str(charges),
            },
        )
        return CompletionResultDTO(
            reservation=reservation,
            overdue_days=days_late,
            overdue_penalty=penalty,
            total_additional_charges=charges,
            additional_payment=additional_payment,
        )
