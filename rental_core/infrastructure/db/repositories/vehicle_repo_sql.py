from typing import Any

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rental_core.application.interfaces.vehicle_repo import VehicleRepo
from rental_core.domain.entities.vehicle import Vehicle, VehicleStatus
from rental_core.domain.errors import OptimisticLockError, VehicleNotFoundError
from rental_core.infrastructure.db.engine import as_utc
from rental_core.infrastructure.db.tables import vehicles


def _to_entity(row: Any) -> Vehicle:
    return Vehicle(
        id=row["id"],
        plate=row["plate"],
        brand=row["brand"],
        model=row["model"],
        daily_rate=row["daily_rate"],
        currency_code=row["currency_code"],
        mileage=row["mileage"],
        status=VehicleStatus(row["status"]),
        lock_version=row["lock_version"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )


def _to_values(vehicle: Vehicle) -> dict[str, Any]:
    return {
        "plate": vehicle.plate,
        "brand": vehicle.brand,
        "model": vehicle.model,
        "daily_rate": vehicle.daily_rate,
        "currency_code": vehicle.currency_code,
        "mileage": vehicle.mileage,
        "status": vehicle.status.value,
        "lock_version": vehicle.lock_version,
        "created_at": vehicle.created_at,
        "updated_at": vehicle.updated_at,
    }


class VehicleRepoSQL(VehicleRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _fetch_one(self, stmt) -> Vehicle | None:
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def get(self, vehicle_id: int) -> Vehicle | None:
        return await self._fetch_one(select(vehicles).where(vehicles.c.id == vehicle_id))

    async def get_for_update(self, vehicle_id: int) -> Vehicle | None:
        stmt = select(vehicles).where(vehicles.c.id == vehicle_id).with_for_update()
        return await self._fetch_one(stmt)

    async def get_by_plate(self, plate: str) -> Vehicle | None:
        return await self._fetch_one(select(vehicles).where(vehicles.c.plate == plate).limit(1))

    async def add(self, vehicle: Vehicle) -> Vehicle:
        result = await self._session.execute(insert(vehicles).values(_to_values(vehicle)))
        vehicle.id = result.inserted_primary_key[0]
        return vehicle

    async def update(self, vehicle: Vehicle, expected_lock_version: int) -> Vehicle:
        stmt = (
            update(vehicles)
            .where(vehicles.c.id == vehicle.id)
            .where(vehicles.c.lock_version == expected_lock_version)
            .values(_to_values(vehicle))
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            current = await self.get(vehicle.id)
            if current is None:
                raise VehicleNotFoundError(vehicle.id)
            raise OptimisticLockError(
                "vehicle", vehicle.id, expected_lock_version, current.lock_version
            )
        return vehicle
