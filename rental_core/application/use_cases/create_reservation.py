import logging

from rental_core.application.dtos.reservation_dto import (
    CreateReservationDTO,
    ReservationCreatedDTO,
)
from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.lock_manager import LockManager, vehicle_lock
from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.application.interfaces.reservation_repo import ReservationRepo
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.application.interfaces.uuid_generator import UUIDGenerator
from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.application.use_cases.check_availability import find_conflicts
from rental_core.application.use_cases.vehicle_projection import refresh_vehicle_status
from rental_core.domain.entities.payment import Payment, PaymentType
from rental_core.domain.entities.reservation import Reservation
from rental_core.domain.errors import (
    ConflictError,
    InvalidRangeError,
    ValidationError,
    VehicleNotFoundError,
    VehicleNotRentableError,
)
from rental_core.domain.services.pricing import calculate_price
from rental_core.domain.value_objects.date_range import DateRange


class CreateReservationUseCase:
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

    async def execute(self, request: CreateReservationDTO) -> ReservationCreatedDTO:
        now = self._clock.now()
        date_range = DateRange(start=request.start_date, end=request.end_date)
        date_range.validate_rental_span()
        if request.start_date <= now.date():
            raise InvalidRangeError(
                f"start_date debe ser posterior a hoy ({now.date().isoformat()}): "
                f"{request.start_date.isoformat()}"
            )
        if not request.pickup_location or not request.pickup_location.strip():
            raise ValidationError("pickup_location", "es obligatorio")

        # Verificación de conflicto e inserción bajo el mismo lock y transacción
        async with self._lock_manager.acquire(vehicle_lock(request.vehicle_id)):
            async with self._transaction_manager.start():
                vehicle = await self._vehicle_repo.get_for_update(request.vehicle_id)
                if vehicle is None:
                    raise VehicleNotFoundError(request.vehicle_id)
                if not vehicle.is_rentable:
                    raise VehicleNotRentableError(vehicle.id, vehicle.status.value)

                conflicts = await find_conflicts(self._reservation_repo, vehicle.id, date_range)
                if conflicts:
                    raise ConflictError(
                        vehicle_id=vehicle.id,
                        start_date=request.start_date,
                        end_date=request.end_date,
                        conflicting_ids=[r.id for r in conflicts],
                    )

                quote = calculate_price(
                    daily_rate=vehicle.daily_rate,
                    start_date=request.start_date,
                    end_date=request.end_date,
                    insurance_tier=request.insurance_tier,
                    currency_code=vehicle.currency_code,
                )
                vehicle_version = vehicle.lock_version

                reservation = await self._reservation_repo.add(
                    Reservation.create(
                        vehicle_id=vehicle.id,
                        requester_id=request.requester_id,
                        date_range=date_range,
                        quote=quote,
                        pickup_location=request.pickup_location,
                        return_location=request.return_location,
                        insurance_tier=request.insurance_tier,
                        initial_mileage=vehicle.mileage,
                        notes=request.notes,
                        now=now,
                    )
                )
                rental_payment = await self._payment_repo.add(
                    Payment.create_pending(
                        reservation_id=reservation.id,
                        amount=quote.total_amount,
                        payment_type=PaymentType.RENTAL,
                        description=f"Pago de locación - reservación {reservation.id}",
                        now=now,
                        currency_code=quote.currency_code,
                        transaction_id=self._uuid_generator.generate_transaction_id(),
                    )
                )
                await refresh_vehicle_status(
                    vehicle, vehicle_version, self._vehicle_repo, self._reservation_repo, now
                )

        reservation.payments = [rental_payment]
        self._logger.info(
            "Reservation created",
            extra={
                "reservation_id": reservation.id,
                "vehicle_id": reservation.vehicle_id,
                "requester_id": reservation.requester_id,
                "start_date": reservation.start_date.isoformat(),
                "end_date": reservation.end_date.isoformat(),
                "total_amount": str(reservation.total_amount),
                "payment_id": rental_payment.id,
            },
        )
        return ReservationCreatedDTO(reservation=reservation, rental_payment=rental_payment)
