import logging
from decimal import Decimal

from rental_core.application.interfaces.clock import Clock
from rental_core.application.interfaces.lock_manager import LockManager, vehicle_lock
from rental_core.application.interfaces.reservation_repo import ReservationRepo
from rental_core.application.interfaces.transaction_manager import TransactionManager
from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.application.use_cases.vehicle_projection import refresh_vehicle_status
from rental_core.domain.entities.vehicle import Vehicle, VehicleStatus
from rental_core.domain.errors import InvalidAmountError, ValidationError, VehicleNotFoundError
from rental_core.domain.value_objects.money import quantize


class RegisterVehicleUseCase:
    def __init__(
        self,
        vehicle_repo: VehicleRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
        currency_code: str = "BRL",
    ) -> None:
        self._vehicle_repo = vehicle_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._currency_code = currency_code
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        plate: str,
        brand: str,
        model: str,
        daily_rate: Decimal,
        mileage: int = 0,
    ) -> Vehicle:
        plate = (plate or "").strip().upper()
        if not plate:
            raise ValidationError("plate", "es obligatoria")
        if daily_rate <= 0:
            raise InvalidAmountError(f"La tarifa diaria debe ser positiva: {daily_rate}")
        if mileage < 0:
            raise ValidationError("mileage", "no puede ser negativo")

        now = self._clock.now()
        async with self._transaction_manager.start():
            if await self._vehicle_repo.get_by_plate(plate) is not None:
                raise ValidationError("plate", f"la placa {plate} ya está registrada")
            vehicle = await self._vehicle_repo.add(
                Vehicle(
                    plate=plate,
                    brand=brand,
                    model=model,
                    daily_rate=quantize(daily_rate),
                    currency_code=self._currency_code,
                    mileage=mileage,
                    status=VehicleStatus.AVAILABLE,
                    created_at=now,
                    updated_at=now,
                )
            )

        self._logger.info(
            "Vehicle registered",
            extra={"vehicle_id": vehicle.id, "plate": vehicle.plate},
        )
        return vehicle


class SetVehicleStatusUseCase:
    """
    Cambios operativos de la flota.

    `maintenance` e `inactive` se fijan tal cual; `available` libera el
    vehículo y recalcula la proyección (queda `rented` si tiene reservaciones
    vivas). `rented` nunca se fija a mano.
    """

    def __init__(
        self,
        vehicle_repo: VehicleRepo,
        reservation_repo: ReservationRepo,
        transaction_manager: TransactionManager,
        lock_manager: LockManager,
        clock: Clock,
    ) -> None:
        self._vehicle_repo = vehicle_repo
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager
        self._lock_manager = lock_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, vehicle_id: int, status: VehicleStatus) -> Vehicle:
        if status == VehicleStatus.RENTED:
            raise ValidationError("status", "'rented' lo asigna el ciclo de locación")

        async with self._lock_manager.acquire(vehicle_lock(vehicle_id)):
            async with self._transaction_manager.start():
                now = self._clock.now()
                vehicle = await self._vehicle_repo.get_for_update(vehicle_id)
                if vehicle is None:
                    raise VehicleNotFoundError(vehicle_id)

                previous = vehicle.status
                expected_lock_version = vehicle.lock_version
                vehicle.set_status(status, now)
                vehicle = await refresh_vehicle_status(
                    vehicle, expected_lock_version, self._vehicle_repo, self._reservation_repo, now
                )

        self._logger.info(
            "Vehicle status changed",
            extra={
                "vehicle_id": vehicle_id,
                "previous_status": previous.value,
                "status": vehicle.status.value,
            },
        )
        return vehicle
