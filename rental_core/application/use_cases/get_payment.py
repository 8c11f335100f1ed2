from rental_core.application.interfaces.payment_repo import PaymentRepo
from rental_core.domain.entities.payment import Payment
from rental_core.domain.errors import PaymentNotFoundError


class GetPaymentUseCase:
    def __init__(self, payment_repo: PaymentRepo) -> None:
        self._payment_repo = payment_repo

    async def execute(self, payment_id: int) -> Payment:
        payment = await self._payment_repo.get(payment_id)
        if payment is None:
            raise PaymentNotFoundError(payment_id)
        return payment
