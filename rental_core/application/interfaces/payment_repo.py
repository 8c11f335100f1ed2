from typing import Sequence

from rental_core.domain.entities.payment import Payment


class PaymentRepo:
    async def get(self, payment_id: int) -> Payment | None:
        raise NotImplementedError

    async def add(self, payment: Payment) -> Payment:
        raise NotImplementedError

    async def update(self, payment: Payment, expected_lock_version: int) -> Payment:
        """
        Compare-and-swap sobre `lock_version`.

        Raises:
            OptimisticLockError: si la versión almacenada no es la esperada.
        """
        raise NotImplementedError

    async def list_by_reservation(self, reservation_id: int) -> Sequence[Payment]:
        raise NotImplementedError

    async def list_refunds_for(self, payment_id: int) -> Sequence[Payment]:
        """Pagos de tipo `refund` que referencian al pago original."""
        raise NotImplementedError
