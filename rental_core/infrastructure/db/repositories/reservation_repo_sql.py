from typing import Any, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rental_core.application.interfaces.reservation_repo import ReservationFilters, ReservationRepo
from rental_core.domain.entities.reservation import (
    LIVE_STATUSES,
    InsuranceTier,
    Reservation,
    ReservationPaymentStatus,
    ReservationStatus,
)
from rental_core.domain.errors import OptimisticLockError, ReservationNotFoundError
from rental_core.infrastructure.db.engine import as_utc
from rental_core.infrastructure.db.tables import reservations


def _to_entity(row: Any) -> Reservation:
    return Reservation(
        id=row["id"],
        vehicle_id=row["vehicle_id"],
        requester_id=row["requester_id"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        currency_code=row["currency_code"],
        daily_rate=row["daily_rate"],
        base_cost=row["base_cost"],
        discount=row["discount"],
        insurance_tier=InsuranceTier(row["insurance_tier"]) if row["insurance_tier"] else None,
        insurance_fee=row["insurance_fee"],
        total_amount=row["total_amount"],
        security_deposit=row["security_deposit"],
        additional_charges=row["additional_charges"],
        additional_charges_description=row["additional_charges_description"],
        status=ReservationStatus(row["status"]),
        payment_status=ReservationPaymentStatus(row["payment_status"]),
        pickup_location=row["pickup_location"],
        return_location=row["return_location"],
        notes=row["notes"],
        cancellation_reason=row["cancellation_reason"],
        initial_mileage=row["initial_mileage"],
        final_mileage=row["final_mileage"],
        actual_return_at=as_utc(row["actual_return_at"]),
        lock_version=row["lock_version"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )


def _to_values(reservation: Reservation) -> dict[str, Any]:
    return {
        "vehicle_id": reservation.vehicle_id,
        "requester_id": reservation.requester_id,
        "start_date": reservation.start_date,
        "end_date": reservation.end_date,
        "currency_code": reservation.currency_code,
        "daily_rate": reservation.daily_rate,
        "base_cost": reservation.base_cost,
        "discount": reservation.discount,
        "insurance_tier": reservation.insurance_tier.value if reservation.insurance_tier else None,
        "insurance_fee": reservation.insurance_fee,
        "total_amount": reservation.total_amount,
        "security_deposit": reservation.security_deposit,
        "additional_charges": reservation.additional_charges,
        "additional_charges_description": reservation.additional_charges_description,
        "status": reservation.status.value,
        "payment_status": reservation.payment_status.value,
        "pickup_location": reservation.pickup_location,
        "return_location": reservation.return_location,
        "notes": reservation.notes,
        "cancellation_reason": reservation.cancellation_reason,
        "initial_mileage": reservation.initial_mileage,
        "final_mileage": reservation.final_mileage,
        "actual_return_at": reservation.actual_return_at,
        "lock_version": reservation.lock_version,
        "created_at": reservation.created_at,
        "updated_at": reservation.updated_at,
    }


class ReservationRepoSQL(ReservationRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, reservation_id: int) -> Reservation | None:
        stmt = select(reservations).where(reservations.c.id == reservation_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def add(self, reservation: Reservation) -> Reservation:
        result = await self._session.execute(insert(reservations).values(_to_values(reservation)))
        reservation.id = result.inserted_primary_key[0]
        return reservation

    async def update(self, reservation: Reservation, expected_lock_version: int) -> Reservation:
        stmt = (
            update(reservations)
            .where(reservations.c.id == reservation.id)
            .where(reservations.c.lock_version == expected_lock_version)
            .values(_to_values(reservation))
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            current = await self.get(reservation.id)
            if current is None:
                raise ReservationNotFoundError(reservation.id)
            raise OptimisticLockError(
                "reservation", reservation.id, expected_lock_version, current.lock_version
            )
        return reservation

    async def list_live_for_vehicle(self, vehicle_id: int) -> Sequence[Reservation]:
        stmt = (
            select(reservations)
            .where(reservations.c.vehicle_id == vehicle_id)
            .where(reservations.c.status.in_([s.value for s in LIVE_STATUSES]))
            .order_by(reservations.c.start_date)
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]

    async def list(
        self,
        filters: ReservationFilters,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[Reservation]:
        stmt = select(reservations)
        if filters.status is not None:
            stmt = stmt.where(reservations.c.status == filters.status.value)
        if filters.payment_status is not None:
            stmt = stmt.where(reservations.c.payment_status == filters.payment_status.value)
        if filters.vehicle_id is not None:
            stmt = stmt.where(reservations.c.vehicle_id == filters.vehicle_id)
        if filters.requester_id is not None:
            stmt = stmt.where(reservations.c.requester_id == filters.requester_id)
        if filters.start_date_from is not None:
            stmt = stmt.where(reservations.c.start_date >= filters.start_date_from)
        if filters.start_date_to is not None:
            stmt = stmt.where(reservations.c.start_date <= filters.start_date_to)
        if filters.overdue_as_of is not None:
            stmt = (
                stmt.where(reservations.c.status == ReservationStatus.ACTIVE.value)
                .where(reservations.c.actual_return_at.is_(None))
                .where(reservations.c.end_date <= filters.overdue_as_of)
            )
        stmt = stmt.order_by(reservations.c.created_at.desc(), reservations.c.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]
