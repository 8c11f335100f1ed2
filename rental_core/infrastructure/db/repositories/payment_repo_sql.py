from typing import Any, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.domain.entities.payment import (
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)
from rental_core.domain.errors import OptimisticLockError, PaymentNotFoundError, ValidationError
from rental_core.infrastructure.db.engine import as_utc
from rental_core.infrastructure.db.tables import payments


def _to_entity(row: Any) -> Payment:
    return Payment(
        id=row["id"],
        reservation_id=row["reservation_id"],
        transaction_id=row["transaction_id"],
        amount=row["amount"],
        currency_code=row["currency_code"],
        type=PaymentType(row["type"]),
        method=PaymentMethod(row["method"]) if row["method"] else None,
        description=row["description"],
        refunded_payment_id=row["refunded_payment_id"],
        status=PaymentStatus(row["status"]),
        gateway_reference=row["gateway_reference"],
        gateway_response=row["gateway_response"] or {},
        lock_version=row["lock_version"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
        completed_at=as_utc(row["completed_at"]),
        refunded_at=as_utc(row["refunded_at"]),
    )


def _to_values(payment: Payment) -> dict[str, Any]:
    return {
        "reservation_id": payment.reservation_id,
        "transaction_id": payment.transaction_id,
        "amount": payment.amount,
        "currency_code": payment.currency_code,
        "type": payment.type.value,
        "method": payment.method.value if payment.method else None,
        "description": payment.description,
        "refunded_payment_id": payment.refunded_payment_id,
        "status": payment.status.value,
        "gateway_reference": payment.gateway_reference,
        "gateway_response": payment.gateway_response,
        "lock_version": payment.lock_version,
        "created_at": payment.created_at,
        "updated_at": payment.updated_at,
        "completed_at": payment.completed_at,
        "refunded_at": payment.refunded_at,
    }


class PaymentRepoSQL(PaymentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _list(self, stmt) -> list[Payment]:
        result = await self._session.execute(stmt.order_by(payments.c.id))
        return [_to_entity(row) for row in result.mappings().all()]

    async def get(self, payment_id: int) -> Payment | None:
        result = await self._session.execute(select(payments).where(payments.c.id == payment_id))
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def add(self, payment: Payment) -> Payment:
        if payment.type == PaymentType.RENTAL:
            existing = await self._session.execute(
                select(payments.c.id)
                .where(payments.c.reservation_id == payment.reservation_id)
                .where(payments.c.type == PaymentType.RENTAL.value)
                .limit(1)
            )
            if existing.scalar() is not None:
                raise ValidationError("type", "la reservación ya tiene un pago de locación")
        result = await self._session.execute(insert(payments).values(_to_values(payment)))
        payment.id = result.inserted_primary_key[0]
        return payment

    async def update(self, payment: Payment, expected_lock_version: int) -> Payment:
        stmt = (
            update(payments)
            .where(payments.c.id == payment.id)
            .where(payments.c.lock_version == expected_lock_version)
            .values(_to_values(payment))
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            current = await self.get(payment.id)
            if current is None:
                raise PaymentNotFoundError(payment.id)
            raise OptimisticLockError(
                "payment", payment.id, expected_lock_version, current.lock_version
            )
        return payment

    async def list_by_reservation(self, reservation_id: int) -> Sequence[Payment]:
        return await self._list(select(payments).where(payments.c.reservation_id == reservation_id))

    async def list_refunds_for(self, payment_id: int) -> Sequence[Payment]:
        return await self._list(
            select(payments)
            .where(payments.c.type == PaymentType.REFUND.value)
            .where(payments.c.refunded_payment_id == payment_id)
        )
