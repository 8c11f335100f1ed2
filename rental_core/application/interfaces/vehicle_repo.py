from rental_core.domain.entities.vehicle import Vehicle


class VehicleRepo:
    async def get(self, vehicle_id: int) -> Vehicle | None:
        raise NotImplementedError

    async def get_for_update(self, vehicle_id: int) -> Vehicle | None:
        """Lee el vehículo bloqueando su fila hasta el fin de la transacción."""
        raise NotImplementedError

    async def get_by_plate(self, plate: str) -> Vehicle | None:
        raise NotImplementedError

    async def add(self, vehicle: Vehicle) -> Vehicle:
        raise NotImplementedError

    async def update(self, vehicle: Vehicle, expected_lock_version: int) -> Vehicle:
        """
        Persiste el vehículo si la versión almacenada coincide.

        Raises:
            OptimisticLockError: si otra escritura cambió la versión.
        """
        raise NotImplementedError
