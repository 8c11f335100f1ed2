import copy

from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.domain.entities.vehicle import Vehicle
from rental_core.domain.errors import OptimisticLockError, VehicleNotFoundError


class InMemoryVehicleRepo(VehicleRepo):
    def __init__(self) -> None:
        self.vehicles: dict[int, Vehicle] = {}
        self._next_id = 1

    async def get(self, vehicle_id: int) -> Vehicle | None:
        vehicle = self.vehicles.get(vehicle_id)
        return copy.deepcopy(vehicle) if vehicle else None

    async def get_for_update(self, vehicle_id: int) -> Vehicle | None:
        # La exclusión mutua la da el LockManager
        return await self.get(vehicle_id)

    async def get_by_plate(self, plate: str) -> Vehicle | None:
        for vehicle in self.vehicles.values():
            if vehicle.plate == plate:
                return copy.deepcopy(vehicle)
        return None

    async def add(self, vehicle: Vehicle) -> Vehicle:
        vehicle.id = self._next_id
        self._next_id += 1
        self.vehicles[vehicle.id] = copy.deepcopy(vehicle)
        return vehicle

    async def update(self, vehicle: Vehicle, expected_lock_version: int) -> Vehicle:
        stored = self.vehicles.get(vehicle.id)
        if stored is None:
            raise VehicleNotFoundError(vehicle.id)
        if stored.lock_version != expected_lock_version:
            raise OptimisticLockError(
                "vehicle", vehicle.id, expected_lock_version, stored.lock_version
            )
        self.vehicles[vehicle.id] = copy.deepcopy(vehicle)
        return vehicle
