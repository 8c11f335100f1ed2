import copy
from collections import defaultdict
from typing import Sequence

from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.domain.entities.payment import Payment, PaymentType
from rental_core.domain.errors import OptimisticLockError, PaymentNotFoundError, ValidationError


class InMemoryPaymentRepo(PaymentRepo):
    def __init__(self) -> None:
        self._by_id: dict[int, Payment] = {}
        self._by_reservation: dict[int, list[int]] = defaultdict(list)
        self._next_id = 1

    async def get(self, payment_id: int) -> Payment | None:
        payment = self._by_id.get(payment_id)
        return copy.deepcopy(payment) if payment else None

    async def add(self, payment: Payment) -> Payment:
        if payment.type == PaymentType.RENTAL and any(
            self._by_id[pid].type == PaymentType.RENTAL
            for pid in self._by_reservation.get(payment.reservation_id, [])
        ):
            raise ValidationError("type", "la reservación ya tiene un pago de locación")
        payment.id = self._next_id
        self._next_id += 1
        self._by_id[payment.id] = copy.deepcopy(payment)
        self._by_reservation[payment.reservation_id].append(payment.id)
        return payment

    async def update(self, payment: Payment, expected_lock_version: int) -> Payment:
        stored = self._by_id.get(payment.id)
        if stored is None:
            raise PaymentNotFoundError(payment.id)
        if stored.lock_version != expected_lock_version:
            raise OptimisticLockError(
                "payment", payment.id, expected_lock_version, stored.lock_version
            )
        self._by_id[payment.id] = copy.deepcopy(payment)
        return payment

    async def list_by_reservation(self, reservation_id: int) -> Sequence[Payment]:
        return [
            copy.deepcopy(self._by_id[pid]) for pid in self._by_reservation.get(reservation_id, [])
        ]

    async def list_refunds_for(self, payment_id: int) -> Sequence[Payment]:
        return [
            copy.deepcopy(p)
            for p in self._by_id.values()
            if p.type == PaymentType.REFUND and p.refunded_payment_id == payment_id
        ]
