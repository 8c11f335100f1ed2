from datetime import datetime

from rental_core.application.interfaces.reservation_repo import ReservationRepo
from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.domain.entities.vehicle import Vehicle


async def refresh_vehicle_status(
    vehicle: Vehicle,
    expected_lock_version: int,
    vehicle_repo: VehicleRepo,
    reservation_repo: ReservationRepo,
    now: datetime,
) -> Vehicle:
    """
    Recalcula el estado cacheado del vehículo y persiste cualquier cambio
    pendiente (estado o kilometraje).

    Debe llamarse con el lock del vehículo tomado y después de persistir la
    reservación que motivó el cambio.
    """
    live = await reservation_repo.list_live_for_vehicle(vehicle.id)
    vehicle.set_status(vehicle.project_status(bool(live)), now)
    if vehicle.lock_version == expected_lock_version:
        return vehicle
    return await vehicle_repo.update(vehicle, expected_lock_version)
